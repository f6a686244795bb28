"""
Model Interface - abstract call surface of the model adapter.

Mirrors the method names and argument order of the Keras model API so the
adapter can stand in for the wrapped model in application code.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ModelInterface(ABC):
    """
    Abstract interface for adapted models.

    Implementations forward every operation to a framework-owned model and
    only convert arguments and results.
    """

    @property
    @abstractmethod
    def model(self) -> Any:
        """
        Get the wrapped framework model.

        Returns:
            Framework model object
        """
        ...

    @abstractmethod
    def compile(
        self,
        optimizer: Any,
        loss: Any,
        metrics: Any = None,
        **kwargs,
    ) -> "ModelInterface":
        """
        Configure the model for training.

        Args:
            optimizer: Optimizer name or instance
            loss: Loss name, function, or per-output mapping/list
            metrics: Metric, list of metrics, or mapping of name to metric
            **kwargs: Additional compile arguments

        Returns:
            Self for chaining
        """
        ...

    @abstractmethod
    def fit(self, x: Any = None, y: Any = None, **kwargs) -> Any:
        """
        Train the model for a fixed number of epochs.

        Args:
            x: Training inputs
            y: Training targets
            **kwargs: Additional fit arguments

        Returns:
            Training history
        """
        ...

    @abstractmethod
    def evaluate(self, x: Any = None, y: Any = None, **kwargs) -> Dict[str, Any]:
        """
        Evaluate the model.

        Args:
            x: Test inputs
            y: Test targets
            **kwargs: Additional evaluate arguments

        Returns:
            Metric name -> value
        """
        ...

    @abstractmethod
    def predict(self, x: Any, **kwargs) -> Any:
        """
        Generate predictions for input samples.

        Args:
            x: Inputs
            **kwargs: Additional predict arguments

        Returns:
            Predictions
        """
        ...

    @abstractmethod
    def train_on_batch(self, x: Any, y: Any, **kwargs) -> Any:
        """Single gradient update over one batch."""
        ...

    @abstractmethod
    def test_on_batch(self, x: Any, y: Any, **kwargs) -> Any:
        """Evaluate one batch."""
        ...

    @abstractmethod
    def predict_on_batch(self, x: Any) -> Any:
        """Predict one batch."""
        ...

    @abstractmethod
    def fit_generator(self, generator: Any, steps_per_epoch: int, **kwargs) -> Any:
        """
        Train on batches produced by a generator.

        Args:
            generator: Callable, iterator or Keras sequence
            steps_per_epoch: Batches per epoch
            **kwargs: Additional arguments

        Returns:
            Training history
        """
        ...

    @abstractmethod
    def evaluate_generator(self, generator: Any, steps: int, **kwargs) -> Dict[str, Any]:
        """Evaluate on batches produced by a generator."""
        ...

    @abstractmethod
    def predict_generator(self, generator: Any, steps: int, **kwargs) -> Any:
        """Predict on batches produced by a generator."""
        ...

    @abstractmethod
    def get_layer(self, name: Optional[str] = None, index: Optional[int] = None) -> Any:
        """
        Retrieve a layer by unique name or 0-based index.

        Returns:
            Layer instance
        """
        ...

    @abstractmethod
    def pop_layer(self) -> Any:
        """Remove the last layer of a sequential model."""
        ...

    @abstractmethod
    def summary(self, line_length: Optional[int] = None, **kwargs) -> None:
        """Write a textual description of the model."""
        ...
