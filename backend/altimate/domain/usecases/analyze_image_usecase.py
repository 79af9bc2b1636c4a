from typing import Optional

from altimate.core.utils.image_processor import ImageInput
from altimate.core.utils.logger import get_logger
from altimate.domain.entities.caption_entity import AltTextResult
from altimate.domain.entities.options_entity import AnalyzeImageOptions
from altimate.domain.errors import ANALYSIS_FAILED, ImageAnalysisError
from altimate.domain.usecases.classify_image_usecase import ClassifyImageUseCase
from altimate.domain.usecases.generate_caption_usecase import GenerateCaptionUseCase

_logger = get_logger("analyze_usecase")


class AnalyzeImageUseCase:
    """Image -> Korean alt text.

    Tagged errors (model load, classification) pass through unchanged; anything else
    is wrapped as ANALYSIS_FAILED.
    """

    def __init__(self, classify_usecase: ClassifyImageUseCase, caption_usecase: GenerateCaptionUseCase):
        self._classify = classify_usecase
        self._caption = caption_usecase

    def execute(self, image: ImageInput, options: Optional[AnalyzeImageOptions] = None) -> AltTextResult:
        try:
            _logger.info("Image analysis started")
            classifications = self._classify.classify(image, options or AnalyzeImageOptions())

            _logger.info("Generating caption...")
            result = self._caption.execute(classifications)
        except ImageAnalysisError:
            raise
        except Exception as e:
            _logger.error("Image analysis failed: %s", e)
            raise ImageAnalysisError(f"이미지 분석 중 오류가 발생했습니다: {e}", ANALYSIS_FAILED) from e

        _logger.info("Analysis finished: %s", result.alt_text)
        return result
