"""
End-to-end tests of AltTextSession with a fake classifier backend
"""
import logging

import pytest
from PIL import Image

from altimate.core.config.environment_config import EnvironmentConfig
from altimate.data.repositories.classifier_repository_impl import ClassifierRepositoryImpl
from altimate.domain.entities.options_entity import AnalyzeImageOptions, ModelLoadOptions
from altimate.domain.errors import ANALYSIS_FAILED, CLASSIFICATION_FAILED, MODEL_LOAD_FAILED, ImageAnalysisError
from altimate.session import AltTextSession

from conftest import FakeAdapter, encode_image


def failing_session(error):
    repo = ClassifierRepositoryImpl(adapter=FakeAdapter(load_error=error), labels_url="unused")
    return AltTextSession(config=EnvironmentConfig(), repository=repo)


class TestAnalyzeImage:
    """Image -> alt text"""

    def test_single_confident_object(self, session, png_bytes):
        result = session.analyze_image(png_bytes, AnalyzeImageOptions(max_predictions=1))
        assert result.alt_text == "귀여운 골든 리트리버의 사진입니다"
        assert result.confidence == pytest.approx(0.92)
        assert [c.label for c in result.classifications] == ["golden_retriever"]

    def test_default_options(self, session, fake_adapter):
        result = session.analyze_image(Image.new("RGB", (300, 200)))
        assert result.alt_text == "골든 리트리버와 비글가 함께 있는 사진입니다"
        assert len(result.classifications) == 3
        assert fake_adapter.predicted_shapes == [(1, 224, 224, 3)]

    def test_loads_lazily_with_progress(self, session, png_bytes):
        progress = []
        options = AnalyzeImageOptions(model_options=ModelLoadOptions(on_load_progress=progress.append))
        assert not session.get_model_status().is_loaded
        session.analyze_image(png_bytes, options)
        assert progress == [0.3, 0.7, 1.0]
        assert session.get_model_status().is_loaded

    def test_unsupported_format(self, session):
        with pytest.raises(ImageAnalysisError) as info:
            session.analyze_image(encode_image("GIF"))
        assert info.value.code == ANALYSIS_FAILED
        assert isinstance(info.value.__cause__, ValueError)
        assert "지원하지 않는 파일 형식" in info.value.message

    def test_model_load_failure_keeps_code(self, png_bytes):
        with pytest.raises(ImageAnalysisError) as info:
            failing_session(OSError("disk full")).analyze_image(png_bytes)
        assert info.value.code == MODEL_LOAD_FAILED


class TestClassifyImage:
    """Image -> raw classification records"""

    def test_records_follow_config_defaults(self, fake_adapter, repository, png_bytes):
        config = EnvironmentConfig(target_size=64, max_predictions=2)
        records = AltTextSession(config=config, repository=repository).classify_image(png_bytes)
        assert [r.label for r in records] == ["golden_retriever", "beagle"]
        assert fake_adapter.predicted_shapes == [(1, 64, 64, 3)]

    def test_unsupported_format(self, session):
        with pytest.raises(ImageAnalysisError) as info:
            session.classify_image(b"not an image")
        assert info.value.code == CLASSIFICATION_FAILED
        assert isinstance(info.value.__cause__, ValueError)


    def test_raw_pixels_flag_reaches_adapter(self, session, fake_adapter, png_bytes):
        session.classify_image(png_bytes, AnalyzeImageOptions(normalize=False))
        assert fake_adapter.normalized_flags == [False]


class TestLifecycle:
    """Preload, status and cleanup"""

    def test_preload(self, session, fake_adapter):
        session.preload_model()
        session.preload_model()
        assert fake_adapter.load_calls == 1
        status = session.get_model_status()
        assert status.is_loaded and status.total_classes == 3

    def test_preload_failure(self):
        with pytest.raises(ImageAnalysisError) as info:
            failing_session(RuntimeError("404")).preload_model()
        assert info.value.code == MODEL_LOAD_FAILED
        assert "모델 로딩에 실패했습니다" in info.value.message

    def test_log_level_from_config(self, repository):
        root = logging.getLogger("altimate")
        previous = root.level
        try:
            AltTextSession(config=EnvironmentConfig(log_level="debug"), repository=repository)
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)

    def test_context_manager_cleans_up(self, repository, fake_adapter, png_bytes):
        with AltTextSession(config=EnvironmentConfig(), repository=repository) as session:
            session.analyze_image(png_bytes)
        assert fake_adapter.dispose_calls == 1
        assert not session.get_model_status().is_loaded

    def test_usable_after_cleanup(self, session, fake_adapter, png_bytes):
        session.preload_model()
        session.cleanup()
        result = session.analyze_image(png_bytes, AnalyzeImageOptions(max_predictions=1))
        assert result.alt_text == "귀여운 골든 리트리버의 사진입니다"
        assert fake_adapter.load_calls == 2
