from dataclasses import dataclass
from typing import Dict, List, Sequence

from altimate.domain.caption_tables import (
    UNKNOWN_CATEGORY,
    get_category_description,
    get_korean_name,
    get_object_category,
    get_single_object_template,
)
from altimate.domain.entities.caption_entity import AltTextResult
from altimate.domain.entities.classification_entity import ClassificationRecord


EMPTY_CAPTION = "분석할 수 없는 이미지입니다"
TOP_RESULTS_ANALYZED = 3


@dataclass
class CaptionAnalysis:
    """Top results grouped by category.

    - groups: category -> records, in first-seen order
    - translated: English label -> Korean display name
    """
    top_result: ClassificationRecord
    groups: Dict[str, List[ClassificationRecord]]
    translated: Dict[str, str]
    dominant_category: str

    @property
    def has_multiple_categories(self) -> bool:
        return len(self.groups) > 1


def get_dominant_category(groups: Dict[str, List[ClassificationRecord]]) -> str:
    """Category whose members have the highest mean confidence (ties keep the first one)."""
    max_confidence = 0.0
    dominant = UNKNOWN_CATEGORY
    for category, records in groups.items():
        avg = sum(r.confidence for r in records) / len(records)
        if avg > max_confidence:
            max_confidence = avg
            dominant = category
    return dominant


def analyze_classifications(classifications: Sequence[ClassificationRecord]) -> CaptionAnalysis:
    top_results = list(classifications[:TOP_RESULTS_ANALYZED])
    groups: Dict[str, List[ClassificationRecord]] = {}
    translated: Dict[str, str] = {}

    for result in top_results:
        groups.setdefault(get_object_category(result.label), []).append(result)
        translated[result.label] = get_korean_name(result.label)

    dominant = get_dominant_category(groups)
    if dominant not in groups:
        # every confidence was 0
        dominant = next(iter(groups))

    return CaptionAnalysis(
        top_result=top_results[0],
        groups=groups,
        translated=translated,
        dominant_category=dominant,
    )


def single_object_caption(obj: str, confidence: float, category: str) -> str:
    return get_single_object_template(category)(obj, confidence)


def same_category_caption(objects: List[str], category: str) -> str:
    desc = get_category_description(category)
    if len(objects) == 1:
        return f"{desc} 사진입니다. {objects[0]}가 보입니다"
    return f"{desc} 관련 사진입니다. {'와 '.join(objects)}가 보입니다"


def mixed_category_caption(main_object: str, other_objects: List[str]) -> str:
    if not other_objects:
        return f"주로 {main_object}가 보이는 사진입니다"
    if len(other_objects) == 1:
        return f"{main_object}와 {other_objects[0]}가 함께 있는 사진입니다"
    return f"{main_object}를 포함해 여러 객체들이 있는 복합적인 사진입니다"


def contextual_caption(analysis: CaptionAnalysis) -> str:
    top = analysis.top_result
    main_object = analysis.translated.get(top.label, top.label)
    dominant_records = analysis.groups[analysis.dominant_category]

    if len(analysis.groups) == 1 and len(dominant_records) == 1:
        return single_object_caption(main_object, top.confidence, analysis.dominant_category)

    if not analysis.has_multiple_categories:
        objects = [analysis.translated[r.label] for r in dominant_records[:2]]
        return same_category_caption(objects, analysis.dominant_category)

    # Only the 2nd/3rd member of each group is listed next to the main object.
    others: List[str] = []
    for records in analysis.groups.values():
        for r in records[1:3]:
            others.append(analysis.translated[r.label])
    return mixed_category_caption(main_object, others)


def generate_smart_caption(classifications: Sequence[ClassificationRecord]) -> AltTextResult:
    """Compose a Korean alt-text sentence from ranked classification records.

    Records must already be sorted by descending probability.
    """
    if not classifications:
        return AltTextResult(alt_text=EMPTY_CAPTION, classifications=[], confidence=0.0)

    analysis = analyze_classifications(classifications)
    return AltTextResult(
        alt_text=contextual_caption(analysis),
        classifications=list(classifications),
        confidence=classifications[0].confidence,
    )


class GenerateCaptionUseCase:
    def execute(self, classifications: Sequence[ClassificationRecord]) -> AltTextResult:
        return generate_smart_caption(classifications)
