from dataclasses import dataclass
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class ClassificationRecord:
    """One (label, probability) pair produced by the model for a candidate class.

    - label: class name as it appears in the label file (English)
    - probability: model probability in [0, 1]
    - confidence: same value as probability, kept for callers that read it by that name
    """
    label: str
    probability: float
    confidence: float

    @classmethod
    def of(cls, label: str, probability: float) -> "ClassificationRecord":
        p = float(probability)
        return cls(label=label, probability=p, confidence=p)


@dataclass
class RawPrediction:
    """Probability vector returned by a classifier adapter.

    - probabilities: 1-D array, one entry per class
    - labels: class names aligned with probabilities when the backend knows them
      (Hugging Face); None means the repository's label file applies (ONNX)
    """
    probabilities: np.ndarray
    labels: Optional[List[str]] = None


@dataclass(frozen=True)
class ModelStatus:
    is_loaded: bool
    total_classes: int
    # True when the label file could not be fetched and class_N placeholders are in use
    labels_placeholder: bool = False
