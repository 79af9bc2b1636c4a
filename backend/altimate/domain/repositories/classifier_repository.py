from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from altimate.domain.entities.classification_entity import ClassificationRecord, ModelStatus
from altimate.domain.entities.options_entity import ModelLoadOptions


class ClassifierRepository(ABC):
    """Contract for the image classifier backing alt-text generation."""

    @abstractmethod
    def load_model(self, options: Optional[ModelLoadOptions] = None) -> None:
        """Load weights and labels. Concurrent callers share a single in-flight load."""
        raise NotImplementedError

    @abstractmethod
    def classify(
        self, image_tensor: np.ndarray, max_predictions: int = 5, normalized: bool = True
    ) -> List[ClassificationRecord]:
        """
        Classify a preprocessed image.

        - image_tensor: float32 array of shape [1, S, S, 3]
        - max_predictions: number of top records to return, sorted by descending probability
        - normalized: True when pixels are in 0-1, False when they are still 0-255
        """
        raise NotImplementedError

    @abstractmethod
    def is_model_loaded(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_model_info(self) -> ModelStatus:
        raise NotImplementedError

    @abstractmethod
    def dispose(self) -> None:
        """Release model resources. The repository may be loaded again afterwards.

        A load still in flight when dispose() runs is discarded instead of committed.
        """
        raise NotImplementedError
