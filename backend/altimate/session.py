"""Library entry point.

    from altimate.session import AltTextSession

    with AltTextSession() as session:
        result = session.analyze_image("dog.jpg")
        print(result.alt_text)  # "귀여운 골든 리트리버의 사진입니다"

Each session owns its classifier; nothing is shared through module globals.
"""
from typing import List, Optional

from altimate.core.config.environment_config import EnvironmentConfig
from altimate.core.di.repository_factory import build_classifier_repository
from altimate.core.utils.image_processor import ImageInput
from altimate.core.utils.logger import get_logger, set_log_level
from altimate.domain.entities.caption_entity import AltTextResult
from altimate.domain.entities.classification_entity import ClassificationRecord, ModelStatus
from altimate.domain.entities.options_entity import AnalyzeImageOptions, ModelLoadOptions
from altimate.domain.repositories.classifier_repository import ClassifierRepository
from altimate.domain.usecases.analyze_image_usecase import AnalyzeImageUseCase
from altimate.domain.usecases.classify_image_usecase import ClassifyImageUseCase
from altimate.domain.usecases.generate_caption_usecase import GenerateCaptionUseCase
from altimate.domain.usecases.preload_model_usecase import PreloadModelUseCase

_logger = get_logger("session")


class AltTextSession:
    """Explicit handle over one classifier: analyze, classify, preload, status, cleanup.

    The model loads lazily on first use (or via preload_model) and can be reloaded after cleanup().
    """

    def __init__(self, config: Optional[EnvironmentConfig] = None, repository: Optional[ClassifierRepository] = None):
        self.config = config or EnvironmentConfig()
        set_log_level(self.config.log_level)
        self._repo = repository or build_classifier_repository(self.config)
        self._classify = ClassifyImageUseCase(self._repo, http_timeout=self.config.http_timeout)
        self._analyze = AnalyzeImageUseCase(self._classify, GenerateCaptionUseCase())
        self._preload = PreloadModelUseCase(self._repo)

    def default_options(self) -> AnalyzeImageOptions:
        return AnalyzeImageOptions(
            target_size=self.config.target_size,
            max_predictions=self.config.max_predictions,
        )

    def analyze_image(self, image: ImageInput, options: Optional[AnalyzeImageOptions] = None) -> AltTextResult:
        return self._analyze.execute(image, options or self.default_options())

    def classify_image(self, image: ImageInput, options: Optional[AnalyzeImageOptions] = None) -> List[ClassificationRecord]:
        return self._classify.execute(image, options or self.default_options())

    def preload_model(self, options: Optional[ModelLoadOptions] = None) -> None:
        self._preload.execute(options)

    def get_model_status(self) -> ModelStatus:
        return self._repo.get_model_info()

    def cleanup(self) -> None:
        self._repo.dispose()
        _logger.info("Alt-imate resources cleaned up")

    def __enter__(self) -> "AltTextSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
