from typing import Optional

from altimate.domain.entities.options_entity import ModelLoadOptions
from altimate.domain.errors import MODEL_LOAD_FAILED, ImageAnalysisError
from altimate.domain.repositories.classifier_repository import ClassifierRepository


class PreloadModelUseCase:
    """Warms the model so the first analysis does not pay the download cost."""

    def __init__(self, repository: ClassifierRepository):
        self._repo = repository

    def execute(self, options: Optional[ModelLoadOptions] = None) -> None:
        if self._repo.is_model_loaded():
            return
        try:
            self._repo.load_model(options or ModelLoadOptions())
        except ImageAnalysisError:
            raise
        except Exception as e:
            raise ImageAnalysisError(f"모델 로딩에 실패했습니다: {e}", MODEL_LOAD_FAILED) from e
