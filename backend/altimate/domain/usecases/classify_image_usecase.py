from typing import List, Optional

from altimate.core.utils.image_processor import ImageInput, process_image
from altimate.core.utils.logger import get_logger
from altimate.domain.entities.classification_entity import ClassificationRecord
from altimate.domain.entities.options_entity import AnalyzeImageOptions
from altimate.domain.errors import CLASSIFICATION_FAILED, ImageAnalysisError
from altimate.domain.repositories.classifier_repository import ClassifierRepository

_logger = get_logger("classify_usecase")


class ClassifyImageUseCase:
    """Returns raw classification records without generating alt text."""

    def __init__(self, repository: ClassifierRepository, http_timeout: float = 30):
        self._repo = repository
        self._http_timeout = http_timeout

    def classify(self, image: ImageInput, options: AnalyzeImageOptions) -> List[ClassificationRecord]:
        """Load (if needed), preprocess and classify. Errors propagate untouched."""
        if not self._repo.is_model_loaded():
            _logger.info("Loading model...")
            self._repo.load_model(options.model_options)

        _logger.info("Preprocessing image...")
        tensor = process_image(image, options, timeout=self._http_timeout)

        _logger.info("Classifying image...")
        return self._repo.classify(tensor, options.max_predictions, normalized=options.normalize)

    def execute(self, image: ImageInput, options: Optional[AnalyzeImageOptions] = None) -> List[ClassificationRecord]:
        try:
            return self.classify(image, options or AnalyzeImageOptions())
        except ImageAnalysisError:
            raise
        except Exception as e:
            _logger.error("Image classification failed: %s", e)
            raise ImageAnalysisError(
                f"이미지 분류 중 오류가 발생했습니다: {e}", CLASSIFICATION_FAILED
            ) from e
