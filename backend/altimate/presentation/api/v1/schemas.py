from typing import List

from fastapi import HTTPException
from pydantic import BaseModel, Field
import requests

from altimate.domain.entities.caption_entity import AltTextResult
from altimate.domain.entities.classification_entity import ClassificationRecord
from altimate.domain.entities.options_entity import AnalyzeImageOptions
from altimate.domain.errors import MODEL_LOAD_FAILED, ImageAnalysisError


class AnalyzeRequest(BaseModel):
    image_url: str = Field(..., description="http(s) URL or data:image/...;base64 URL of the image")
    max_predictions: int = Field(5, ge=1, le=20, description="Number of classification results to return")
    target_size: int = Field(224, ge=32, le=1024, description="Side of the square model input")
    normalize: bool = Field(True, description="Scale pixels to 0-1 before inference")

    def to_options(self) -> AnalyzeImageOptions:
        return AnalyzeImageOptions(
            target_size=self.target_size,
            normalize=self.normalize,
            max_predictions=self.max_predictions,
        )


class ClassificationResponse(BaseModel):
    label: str
    probability: float
    confidence: float


class AltTextResponse(BaseModel):
    alt_text: str
    classifications: List[ClassificationResponse]
    confidence: float


class ClassifyResponse(BaseModel):
    classifications: List[ClassificationResponse]


class ModelStatusResponse(BaseModel):
    is_loaded: bool
    total_classes: int
    labels_placeholder: bool = False


def sanitize_image_url(url: str) -> str:
    val = (url or "").strip().strip("`").strip('"').strip("'")
    if not val:
        raise HTTPException(status_code=400, detail="이미지 URL이 비어 있습니다.")
    if not (val.startswith("http://") or val.startswith("https://") or val.startswith("data:image")):
        raise HTTPException(status_code=400, detail="URL은 http://, https:// 또는 data:image 로 시작해야 합니다.")
    return val


def to_classification_responses(records: List[ClassificationRecord]) -> List[ClassificationResponse]:
    return [ClassificationResponse(label=r.label, probability=r.probability, confidence=r.confidence) for r in records]


def to_alt_text_response(result: AltTextResult) -> AltTextResponse:
    return AltTextResponse(
        alt_text=result.alt_text,
        classifications=to_classification_responses(result.classifications),
        confidence=result.confidence,
    )


def to_http_exception(e: ImageAnalysisError) -> HTTPException:
    cause = e.__cause__
    detail = {"message": e.message, "code": e.code}
    if isinstance(cause, (ValueError, FileNotFoundError)):
        return HTTPException(status_code=400, detail=detail)
    if isinstance(cause, requests.RequestException) and e.code != MODEL_LOAD_FAILED:
        return HTTPException(status_code=502, detail=detail)
    if e.code == MODEL_LOAD_FAILED:
        return HTTPException(status_code=503, detail=detail)
    return HTTPException(status_code=500, detail=detail)
