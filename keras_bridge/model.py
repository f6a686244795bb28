"""
Keras Model Adapter - ModelInterface implementation for Keras models.

Wraps a Keras model and forwards every operation to it, converting
arguments on the way in (array normalization, nullable integers, class
weights, version-gated argument sets) and results on the way out
(training history, named evaluation results). Training and evaluation
write run metadata to the configured run tracker.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Union
import io
import logging
import shutil
import sys

import numpy as np

from . import compat
from .callbacks import normalize_callbacks, resolve_view_metrics
from .compat import keras
from .config import get_config
from .convert import (
    as_class_weight,
    as_list,
    as_nullable_array,
    as_nullable_integer,
    keras_array,
    normalize_metrics,
    resolve_batch_size,
)
from .generators import call_generator_function
from .history import TrainingHistory, to_training_history, validation_sample_count
from .model_interface import ModelInterface
from .tracking import RunTracker, get_tracker
from .utils import confirm_overwrite, require_h5py

logger = logging.getLogger(__name__)


def _validation_data(validation_data: Any) -> Any:
    """Normalize a validation tuple; generators and datasets pass through."""
    if isinstance(validation_data, (list, tuple)):
        return tuple(keras_array(part) for part in validation_data)
    return validation_data


def _unwrap(model: Any) -> Any:
    """Framework model behind an adapter (or the model itself)."""
    if isinstance(model, KerasModel):
        return model.model
    return model


class KerasModel(ModelInterface):
    """
    Keras implementation of ModelInterface.

    Attributes not defined by the adapter (``layers``, ``weights``,
    ``metrics_names``, ...) are read from the wrapped model.
    """

    def __init__(self, model: Any, tracker: Optional[RunTracker] = None):
        """
        Initialize Keras model adapter.

        Args:
            model: Keras model (or another KerasModel to re-wrap)
            tracker: Run tracker (defaults to the process-wide tracker)

        Raises:
            RuntimeError: If the installed Keras is older than the
                minimum supported version
        """
        compat.check_keras_version()
        self._model = _unwrap(model)
        self._tracker = tracker
        self._compiled_metrics = None
        logger.debug(f"Wrapped {type(self._model).__name__} in KerasModel")

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_model":
            raise AttributeError(name)
        return getattr(self._model, name)

    def __call__(self, *args, **kwargs) -> Any:
        """Apply the model to inputs, as a layer."""
        return self._model(*args, **kwargs)

    def __repr__(self) -> str:
        name = getattr(self._model, "name", None)
        return f"<KerasModel {type(self._model).__name__} name={name!r}>"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def model(self) -> Any:
        """Wrapped Keras model."""
        return self._model

    @property
    def tracker(self) -> RunTracker:
        """Run tracker receiving evaluation and training records."""
        if self._tracker is not None:
            return self._tracker
        return get_tracker()

    def compile(
        self,
        optimizer: Any,
        loss: Any,
        metrics: Any = None,
        loss_weights: Any = None,
        sample_weight_mode: Any = None,
        weighted_metrics: Any = None,
        target_tensors: Any = None,
        **kwargs,
    ) -> "KerasModel":
        """
        Configure the model for training.

        Args:
            optimizer: Optimizer name or instance
            loss: Loss name or function; a mapping or list for multi-output models
            metrics: Metric, list of metrics, or mapping of name to metric.
                Plain functions in a mapping report under their key.
            loss_weights: Per-output loss coefficients
            sample_weight_mode: "temporal" for timestep-wise weights (Keras < 3)
            weighted_metrics: Metrics weighted by sample or class weights
            target_tensors: Target tensors replacing target placeholders (Keras < 2.4)
            **kwargs: Additional compile arguments

        Returns:
            Self for chaining

        Raises:
            ValueError: If a version-gated argument is set on a Keras
                version that does not accept it
        """
        metrics = normalize_metrics(metrics)

        args = {
            "optimizer": optimizer,
            "loss": loss,
            "metrics": metrics,
            "loss_weights": loss_weights,
        }

        if compat.supports_sample_weight_mode():
            args["sample_weight_mode"] = sample_weight_mode
        elif sample_weight_mode is not None:
            raise ValueError(
                f"sample_weight_mode is not supported by Keras {compat.keras_version()}"
            )

        args["weighted_metrics"] = as_list(weighted_metrics)

        if compat.supports_target_tensors():
            args["target_tensors"] = as_list(target_tensors)
        elif target_tensors is not None:
            raise ValueError(
                f"target_tensors is not supported by Keras {compat.keras_version()}"
            )

        args.update(kwargs)

        self._model.compile(**args)
        self._compiled_metrics = metrics

        return self

    def _resolve_view_metrics(self, view_metrics: Any, verbose: int, epochs: int) -> bool:
        if view_metrics is None:
            view_metrics = get_config().view_metrics
        if view_metrics == "auto":
            metrics = self._compiled_metrics
            if metrics is None:
                metrics = getattr(self._model, "metrics", None)
            return resolve_view_metrics(verbose, epochs, metrics)
        return bool(view_metrics)

    def _write_history_metadata(self, history: TrainingHistory) -> None:
        properties = {"validation_samples": history.params.get("validation_samples")}
        self.tracker.write_run_metadata("properties", properties)
        self.tracker.write_run_metadata("metrics", history.metrics)

    def _name_results(self, result: Any) -> Dict[str, Any]:
        """Attach the model's metric names to evaluation results."""
        if isinstance(result, Mapping):
            return dict(result)

        values = list(result) if isinstance(result, (list, tuple)) else [result]
        names = list(self._model.metrics_names)

        if len(names) != len(values):
            raise ValueError(
                f"Model reported {len(names)} metric names {names} "
                f"for {len(values)} evaluation results"
            )

        return dict(zip(names, values))

    def fit(
        self,
        x: Any = None,
        y: Any = None,
        batch_size: Optional[int] = None,
        epochs: int = 10,
        verbose: int = 1,
        callbacks: Any = None,
        view_metrics: Any = None,
        validation_split: float = 0.0,
        validation_data: Any = None,
        shuffle: bool = True,
        class_weight: Any = None,
        sample_weight: Any = None,
        initial_epoch: int = 0,
        steps_per_epoch: Optional[int] = None,
        validation_steps: Optional[int] = None,
        **kwargs,
    ) -> TrainingHistory:
        """
        Train the model for a fixed number of epochs.

        Args:
            x: Training inputs (array, list of arrays, or mapping of input names)
            y: Training targets
            batch_size: Samples per gradient update (32 when neither
                batch_size nor steps_per_epoch is given)
            epochs: Index of the final epoch
            verbose: 0 = silent, 1 = progress bar, 2 = one line per epoch
            callbacks: Callback or list of callbacks
            view_metrics: Show a live metrics plot; None uses the configured
                default, "auto" shows it in notebooks when training more than
                one epoch verbosely with compiled metrics
            validation_split: Fraction of training data held out for validation
            validation_data: (x_val, y_val) or (x_val, y_val, sample_weights)
            shuffle: Shuffle training data before each epoch
            class_weight: Mapping of class index to loss weight
            sample_weight: Per-sample loss weights
            initial_epoch: Epoch at which to start (resuming a run)
            steps_per_epoch: Batches per epoch
            validation_steps: Validation batches per epoch
            **kwargs: Additional fit arguments

        Returns:
            TrainingHistory of the run

        Raises:
            TypeError: If class_weight is not a mapping
        """
        view_metrics = self._resolve_view_metrics(view_metrics, verbose, epochs)

        args = {
            "x": keras_array(x),
            "y": keras_array(y),
            "batch_size": resolve_batch_size(batch_size, steps_per_epoch),
            "epochs": int(epochs),
            "verbose": int(verbose),
            "callbacks": normalize_callbacks(view_metrics, callbacks),
            "validation_split": validation_split,
            "validation_data": _validation_data(validation_data),
            "shuffle": shuffle,
            "class_weight": as_class_weight(class_weight),
            "sample_weight": as_nullable_array(sample_weight),
            "initial_epoch": int(initial_epoch),
            "steps_per_epoch": as_nullable_integer(steps_per_epoch),
            "validation_steps": as_nullable_integer(validation_steps),
        }
        args.update(kwargs)

        logger.info(
            f"Fitting {type(self._model).__name__} "
            f"(epochs={args['epochs']}, batch_size={args['batch_size']})"
        )
        history = self._model.fit(**args)

        history = to_training_history(
            history,
            validation_samples=validation_sample_count(x, validation_data, validation_split),
        )
        self._write_history_metadata(history)

        return history

    def evaluate(
        self,
        x: Any = None,
        y: Any = None,
        batch_size: Optional[int] = None,
        verbose: int = 1,
        sample_weight: Any = None,
        steps: Optional[int] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Evaluate the model.

        Args:
            x: Test inputs
            y: Test targets
            batch_size: Samples per batch (32 when neither batch_size nor
                steps is given)
            verbose: Verbosity mode
            sample_weight: Per-sample loss weights
            steps: Batches before declaring evaluation finished
            **kwargs: Additional evaluate arguments

        Returns:
            Loss and metric values keyed by the model's metric names
        """
        args = {
            "x": keras_array(x),
            "y": keras_array(y),
            "batch_size": resolve_batch_size(batch_size, steps),
            "verbose": int(verbose),
            "sample_weight": as_nullable_array(sample_weight),
            "steps": as_nullable_integer(steps),
        }
        if compat.evaluate_returns_dict():
            args["return_dict"] = True
        args.update(kwargs)

        result = self._name_results(self._model.evaluate(**args))
        self.tracker.write_run_metadata("evaluation", result)

        return result

    def predict(
        self,
        x: Any,
        batch_size: Optional[int] = None,
        verbose: int = 0,
        steps: Optional[int] = None,
        **kwargs,
    ) -> Any:
        """
        Generate predictions, processing samples in batches.

        Args:
            x: Inputs
            batch_size: Samples per batch (32 when neither batch_size nor
                steps is given)
            verbose: Verbosity mode
            steps: Batches before declaring prediction finished
            **kwargs: Additional predict arguments

        Returns:
            Array(s) of predictions
        """
        args = {
            "x": keras_array(x),
            "batch_size": resolve_batch_size(batch_size, steps),
            "verbose": int(verbose),
            "steps": as_nullable_integer(steps),
        }
        args.update(kwargs)

        return self._model.predict(**args)

    def predict_proba(self, x: Any, batch_size: int = 32, verbose: int = 0) -> Any:
        """
        Generate class probability predictions.

        Keras 2.6 removed ``predict_proba``; newer versions return the
        output of ``predict``.
        """
        args = {
            "x": keras_array(x),
            "batch_size": int(batch_size),
            "verbose": int(verbose),
        }
        if compat.has_predict_classes():
            return self._model.predict_proba(**args)
        return self._model.predict(**args)

    def predict_classes(self, x: Any, batch_size: int = 32, verbose: int = 0) -> Any:
        """
        Generate class predictions.

        On Keras >= 2.6 classes are derived from ``predict``: arg-max over
        the last axis, or a 0.5 threshold for single-unit and 1-D outputs.
        """
        args = {
            "x": keras_array(x),
            "batch_size": int(batch_size),
            "verbose": int(verbose),
        }
        if compat.has_predict_classes():
            return self._model.predict_classes(**args)

        proba = np.asarray(self._model.predict(**args))
        if proba.ndim > 1 and proba.shape[-1] > 1:
            return proba.argmax(axis=-1)
        return (proba > 0.5).astype("int32")

    def train_on_batch(
        self,
        x: Any,
        y: Any,
        class_weight: Any = None,
        sample_weight: Any = None,
    ) -> Any:
        """
        Single gradient update over one batch of samples.

        Returns:
            Scalar training loss, or a list of scalars when the model
            computes metrics (labels in ``metrics_names``)
        """
        return self._model.train_on_batch(
            x=keras_array(x),
            y=keras_array(y),
            class_weight=as_class_weight(class_weight),
            sample_weight=as_nullable_array(sample_weight),
        )

    def test_on_batch(self, x: Any, y: Any, sample_weight: Any = None) -> Any:
        """Evaluate one batch of samples."""
        return self._model.test_on_batch(
            x=keras_array(x),
            y=keras_array(y),
            sample_weight=as_nullable_array(sample_weight),
        )

    def predict_on_batch(self, x: Any) -> Any:
        """Predictions for a single batch of samples."""
        return self._model.predict_on_batch(x=keras_array(x))

    def fit_generator(
        self,
        generator: Any,
        steps_per_epoch: int,
        epochs: int = 1,
        verbose: int = 1,
        callbacks: Any = None,
        view_metrics: Any = None,
        validation_data: Any = None,
        validation_steps: Optional[int] = None,
        class_weight: Any = None,
        max_queue_size: int = 10,
        initial_epoch: int = 0,
    ) -> TrainingHistory:
        """
        Train on batches yielded by a generator.

        Args:
            generator: Function returning one batch per call, generator
                function, iterator, or Keras sequence. Batches are
                (inputs, targets) or (inputs, targets, sample_weights).
            steps_per_epoch: Batches per epoch
            epochs: Number of epochs
            verbose: Verbosity mode
            callbacks: Callback or list of callbacks
            view_metrics: See :meth:`fit`
            validation_data: Generator or (inputs, targets[, sample_weights])
            validation_steps: Validation batches when validation_data is a generator
            class_weight: Mapping of class index to loss weight
            max_queue_size: Maximum size of the generator queue
            initial_epoch: Epoch at which to start

        Returns:
            TrainingHistory of the run
        """
        view_metrics = self._resolve_view_metrics(view_metrics, verbose, epochs)

        history = call_generator_function(self._model, "fit", {
            "generator": generator,
            "steps_per_epoch": int(steps_per_epoch),
            "epochs": int(epochs),
            "verbose": int(verbose),
            "callbacks": normalize_callbacks(view_metrics, callbacks),
            "validation_data": _validation_data(validation_data),
            "validation_steps": as_nullable_integer(validation_steps),
            "class_weight": as_class_weight(class_weight),
            "max_queue_size": int(max_queue_size),
            "initial_epoch": int(initial_epoch),
        })

        if isinstance(validation_data, (list, tuple)):
            validation_samples = validation_sample_count(None, validation_data)
        elif validation_data is not None:
            validation_samples = as_nullable_integer(validation_steps)
        else:
            validation_samples = None

        history = to_training_history(history, validation_samples=validation_samples)
        self._write_history_metadata(history)

        return history

    def evaluate_generator(
        self,
        generator: Any,
        steps: int,
        max_queue_size: int = 10,
    ) -> Dict[str, Any]:
        """
        Evaluate on batches yielded by a generator.

        Args:
            generator: Generator yielding (inputs, targets) or
                (inputs, targets, sample_weights)
            steps: Batches before stopping
            max_queue_size: Maximum size of the generator queue

        Returns:
            Loss and metric values keyed by the model's metric names
        """
        args = {
            "generator": generator,
            "steps": int(steps),
            "max_queue_size": int(max_queue_size),
        }
        if compat.evaluate_returns_dict():
            args["return_dict"] = True

        result = self._name_results(
            call_generator_function(self._model, "evaluate", args)
        )
        self.tracker.write_run_metadata("evaluation", result)

        return result

    def predict_generator(
        self,
        generator: Any,
        steps: int,
        max_queue_size: int = 10,
        verbose: int = 0,
    ) -> Any:
        """
        Generate predictions for batches yielded by a generator.

        Args:
            generator: Generator yielding batches of inputs
            steps: Batches before stopping
            max_queue_size: Maximum size of the generator queue
            verbose: Verbosity mode

        Returns:
            Array(s) of predictions
        """
        return call_generator_function(self._model, "predict", {
            "generator": generator,
            "steps": int(steps),
            "max_queue_size": int(max_queue_size),
            "verbose": int(verbose),
        })

    def get_layer(self, name: Optional[str] = None, index: Optional[int] = None) -> Any:
        """
        Retrieve a layer by unique name or index.

        Indices follow horizontal graph traversal (bottom-up) and are 0-based.
        """
        return self._model.get_layer(name=name, index=as_nullable_integer(index))

    def pop_layer(self) -> Any:
        """Remove the last layer of a sequential model."""
        return self._model.pop()

    def summary(
        self,
        line_length: Optional[int] = None,
        positions: Any = None,
        stream: Any = None,
        **kwargs,
    ) -> None:
        """
        Write a summary of the model to ``stream``.

        Args:
            line_length: Total length of printed lines (terminal width by default)
            positions: Relative or absolute positions of log elements in each line
            stream: Writable text stream (stdout by default)
            **kwargs: Additional summary arguments
        """
        if stream is None:
            stream = sys.stdout
        if line_length is None:
            line_length = shutil.get_terminal_size().columns

        def print_fn(line, line_break=True, **_):
            stream.write(line)
            if line_break:
                stream.write("\n")

        self._model.summary(
            line_length=int(line_length),
            positions=positions,
            print_fn=print_fn,
            **kwargs,
        )

    def to_string(self, line_length: Optional[int] = None, positions: Any = None) -> str:
        """Summary of the model as a string."""
        buffer = io.StringIO()
        self.summary(line_length=line_length, positions=positions, stream=buffer)
        return "Model\n" + buffer.getvalue()

    def save(
        self,
        filepath: Union[str, Path],
        overwrite: bool = False,
        include_optimizer: bool = True,
        **kwargs,
    ) -> bool:
        """
        Save the model (architecture, weights, optimizer state).

        Args:
            filepath: Target path
            overwrite: Replace an existing file without asking
            include_optimizer: Save optimizer state
            **kwargs: Additional save arguments

        Returns:
            True if saved, False if the user declined to overwrite

        Raises:
            FileExistsError: If the file exists and overwrite cannot be confirmed
        """
        require_h5py(filepath)
        if not confirm_overwrite(filepath, overwrite):
            logger.info(f"Not overwriting {filepath}")
            return False

        if not include_optimizer:
            kwargs["include_optimizer"] = False
        self._model.save(str(filepath), overwrite=True, **kwargs)
        logger.info(f"Saved model to {filepath}")
        return True

    def save_weights(self, filepath: Union[str, Path], overwrite: bool = False) -> bool:
        """
        Save model weights.

        Returns:
            True if saved, False if the user declined to overwrite
        """
        require_h5py(filepath)
        if not confirm_overwrite(filepath, overwrite):
            logger.info(f"Not overwriting {filepath}")
            return False

        self._model.save_weights(str(filepath), overwrite=True)
        logger.info(f"Saved weights to {filepath}")
        return True

    def load_weights(self, filepath: Union[str, Path], **kwargs) -> "KerasModel":
        """Load weights saved by :meth:`save_weights`."""
        require_h5py(filepath)
        self._model.load_weights(str(filepath), **kwargs)
        return self


def keras_model(inputs: Any, outputs: Any = None, name: Optional[str] = None) -> KerasModel:
    """
    Functional model: a directed acyclic graph of layers.

    Args:
        inputs: Input tensor(s)
        outputs: Output tensor(s)
        name: Model name

    Returns:
        KerasModel
    """
    return KerasModel(keras.Model(inputs=inputs, outputs=outputs, name=name))


def keras_model_sequential(layers: Any = None, name: Optional[str] = None) -> KerasModel:
    """
    Model composed of a linear stack of layers.

    The first layer needs a defined input shape.
    """
    return KerasModel(keras.Sequential(layers=layers, name=name))


def clone_model(model: Any, input_tensors: Any = None) -> KerasModel:
    """
    Clone a model: new layers and new weights, same topology.

    Args:
        model: KerasModel or Keras model
        input_tensors: Optional input tensors to build the clone upon
    """
    return KerasModel(keras.models.clone_model(_unwrap(model), input_tensors=input_tensors))


def multi_gpu_model(model: Any, gpus: int) -> KerasModel:
    """
    Replicate a model on several GPUs (data parallelism).

    Raises:
        NotImplementedError: On Keras versions without multi_gpu_model
    """
    if not compat.has_multi_gpu_model():
        raise NotImplementedError(
            f"multi_gpu_model is not available in Keras {compat.keras_version()}; "
            "use a distribution strategy instead"
        )
    return KerasModel(keras.utils.multi_gpu_model(_unwrap(model), int(gpus)))


def load_model(
    filepath: Union[str, Path],
    custom_objects: Optional[Dict[str, Any]] = None,
    compile: bool = True,
) -> KerasModel:
    """
    Load a model saved with :meth:`KerasModel.save`.

    Args:
        filepath: Saved model path
        custom_objects: Custom layers, losses or metrics used by the model
        compile: Compile the model after loading
    """
    require_h5py(filepath)
    logger.info(f"Loading model from {filepath}")
    return KerasModel(
        keras.models.load_model(str(filepath), custom_objects=custom_objects, compile=compile)
    )
