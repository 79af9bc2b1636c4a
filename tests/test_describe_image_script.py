"""
Tests for the describe_image command line script
"""
import json
from unittest.mock import patch

from altimate.core.config.environment_config import EnvironmentConfig
from altimate.data.repositories.classifier_repository_impl import ClassifierRepositoryImpl
from altimate.session import AltTextSession
from scripts import describe_image

from conftest import FakeAdapter


def fake_session_factory(adapter):
    def build():
        repo = ClassifierRepositoryImpl(adapter=adapter, labels_url="unused")
        return AltTextSession(config=EnvironmentConfig(), repository=repo)
    return build


def write_png(tmp_path, png_bytes):
    path = tmp_path / "dog.png"
    path.write_bytes(png_bytes)
    return str(path)


def test_prints_alt_text(tmp_path, png_bytes, capsys):
    adapter = FakeAdapter()
    with patch.object(describe_image, "AltTextSession", fake_session_factory(adapter)):
        code = describe_image.main([write_png(tmp_path, png_bytes), "--top-k", "1"])
    out, err = capsys.readouterr()
    assert code == 0
    assert out.strip() == "귀여운 골든 리트리버의 사진입니다"
    assert "모델 로딩 100%" in err
    assert adapter.dispose_calls == 1


def test_json_output(tmp_path, png_bytes, capsys):
    with patch.object(describe_image, "AltTextSession", fake_session_factory(FakeAdapter())):
        code = describe_image.main([write_png(tmp_path, png_bytes), "--top-k", "2", "--json"])
    body = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [c["label"] for c in body["classifications"]] == ["golden_retriever", "beagle"]


def test_error_exit_code(tmp_path, capsys):
    with patch.object(describe_image, "AltTextSession", fake_session_factory(FakeAdapter())):
        code = describe_image.main([str(tmp_path / "missing.png")])
    assert code == 1
    assert "ANALYSIS_FAILED" in capsys.readouterr().err
