"""
keras-bridge - argument-marshalling adapter over the Keras model API.

Wraps Keras models so they accept plain Python values, normalizes
version-dependent arguments, reshapes training history and records run
metadata.

Usage:
    from keras_bridge import keras_model_sequential
    from keras_bridge.compat import keras

    model = keras_model_sequential([
        keras.layers.Input(shape=(784,)),
        keras.layers.Dense(64, activation="relu"),
        keras.layers.Dense(10, activation="softmax"),
    ])
    model.compile(optimizer="rmsprop", loss="categorical_crossentropy",
                  metrics="accuracy")
    history = model.fit(x_train, y_train, epochs=5)
    print(history)
"""

from .config import BridgeConfig, get_config, load_config, set_config
from .convert import (
    as_class_weight,
    as_nullable_array,
    as_nullable_integer,
    keras_array,
    normalize_metrics,
)
from .history import TrainingHistory, to_training_history
from .generators import as_generator
from .model_interface import ModelInterface
from .model import (
    KerasModel,
    clone_model,
    keras_model,
    keras_model_sequential,
    load_model,
    multi_gpu_model,
)
from .tracking import FileRunTracker, get_tracker, set_tracker
from .utils import (
    confirm_overwrite,
    have_h5py,
    have_module,
    have_pillow,
    have_pyyaml,
    have_requests,
)

__all__ = [
    # Configuration
    "BridgeConfig",
    "get_config",
    "load_config",
    "set_config",
    # Models
    "ModelInterface",
    "KerasModel",
    "keras_model",
    "keras_model_sequential",
    "clone_model",
    "multi_gpu_model",
    "load_model",
    # Conversion
    "keras_array",
    "as_class_weight",
    "as_nullable_array",
    "as_nullable_integer",
    "normalize_metrics",
    "as_generator",
    # History
    "TrainingHistory",
    "to_training_history",
    # Tracking
    "FileRunTracker",
    "get_tracker",
    "set_tracker",
    # Environment
    "have_module",
    "have_h5py",
    "have_pyyaml",
    "have_requests",
    "have_pillow",
    "confirm_overwrite",
]

__version__ = "0.1.0"
