from dataclasses import dataclass, field
from typing import List

from altimate.domain.entities.classification_entity import ClassificationRecord


@dataclass(frozen=True)
class AltTextResult:
    alt_text: str
    classifications: List[ClassificationRecord] = field(default_factory=list)
    confidence: float = 0.0
