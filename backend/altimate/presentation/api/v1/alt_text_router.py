from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from altimate.core.di.service_locator import ServiceLocator
from altimate.core.utils.logger import get_logger
from altimate.domain.entities.options_entity import AnalyzeImageOptions
from altimate.domain.errors import ImageAnalysisError
from altimate.presentation.api.v1.schemas import (
    AltTextResponse,
    AnalyzeRequest,
    ClassifyResponse,
    sanitize_image_url,
    to_alt_text_response,
    to_classification_responses,
    to_http_exception,
)


router = APIRouter(prefix="/api/v1/alt-text", tags=["alt-text"])
logger = get_logger("alt_text_router")


@router.post("/analyze", response_model=AltTextResponse)
def analyze_image(body: AnalyzeRequest):
    image_url = sanitize_image_url(body.image_url)
    try:
        result = ServiceLocator.session().analyze_image(image_url, body.to_options())
    except ImageAnalysisError as e:
        logger.error("Alt text generation failed [%s]: %s", e.code, e.message)
        raise to_http_exception(e)
    return to_alt_text_response(result)


@router.post("/analyze/upload", response_model=AltTextResponse)
def analyze_upload(
    file: UploadFile = File(..., description="JPEG, PNG or WEBP image"),
    max_predictions: int = Query(5, ge=1, le=20),
    target_size: int = Query(224, ge=32, le=1024),
    normalize: bool = Query(True),
):
    data = file.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="업로드된 파일이 비어 있습니다.")
    options = AnalyzeImageOptions(target_size=target_size, normalize=normalize, max_predictions=max_predictions)
    try:
        result = ServiceLocator.session().analyze_image(data, options)
    except ImageAnalysisError as e:
        logger.error("Alt text generation failed for upload '%s' [%s]: %s", file.filename, e.code, e.message)
        raise to_http_exception(e)
    return to_alt_text_response(result)


@router.post("/classify", response_model=ClassifyResponse)
def classify_image(body: AnalyzeRequest):
    image_url = sanitize_image_url(body.image_url)
    try:
        records = ServiceLocator.session().classify_image(image_url, body.to_options())
    except ImageAnalysisError as e:
        logger.error("Classification failed [%s]: %s", e.code, e.message)
        raise to_http_exception(e)
    return ClassifyResponse(classifications=to_classification_responses(records))
