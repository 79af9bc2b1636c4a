from fastapi import APIRouter

from altimate.core.di.service_locator import ServiceLocator
from altimate.core.utils.logger import get_logger
from altimate.domain.errors import ImageAnalysisError
from altimate.presentation.api.v1.schemas import ModelStatusResponse, to_http_exception


router = APIRouter(prefix="/api/v1/alt-text/model", tags=["model"])
logger = get_logger("model_router")


def _status() -> ModelStatusResponse:
    status = ServiceLocator.session().get_model_status()
    return ModelStatusResponse(
        is_loaded=status.is_loaded,
        total_classes=status.total_classes,
        labels_placeholder=status.labels_placeholder,
    )


@router.get("/status", response_model=ModelStatusResponse)
def model_status():
    return _status()


@router.post("/preload", response_model=ModelStatusResponse)
def preload_model():
    try:
        ServiceLocator.session().preload_model()
    except ImageAnalysisError as e:
        logger.error("Model preload failed: %s", e.message)
        raise to_http_exception(e)
    return _status()


@router.post("/cleanup", response_model=ModelStatusResponse)
def cleanup_model():
    ServiceLocator.session().cleanup()
    return _status()
