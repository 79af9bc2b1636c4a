"""
Tests for label loading and model file caching
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from altimate.data.adapters.model_assets import (
    LabelSet,
    align_labels,
    cache_path_for,
    ensure_file,
    load_labels,
    parse_labels,
    resolve_model_file,
)

REQUESTS_GET = "altimate.data.adapters.model_assets.requests.get"


class TestLoadLabels:
    """Label file fetching and the placeholder fallback"""

    def test_fetches_one_label_per_line(self):
        response = MagicMock(text="background\ntench\n\ngoldfish\n")
        with patch(REQUESTS_GET, return_value=response) as get:
            labels = load_labels("https://example.com/labels.txt", timeout=7)
        get.assert_called_once_with("https://example.com/labels.txt", timeout=7)
        assert labels.names == ["background", "tench", "goldfish"]
        assert not labels.placeholder

    def test_local_file(self, tmp_path):
        path = tmp_path / "labels.txt"
        path.write_text("tench\ngoldfish\n", encoding="utf-8")
        with patch(REQUESTS_GET) as get:
            labels = load_labels(str(path))
        get.assert_not_called()
        assert labels.names == ["tench", "goldfish"]

    def test_unreachable_file_uses_placeholders(self):
        with patch(REQUESTS_GET, side_effect=requests.ConnectionError("offline")):
            labels = load_labels("https://example.com/labels.txt", num_classes=4)
        assert labels.names == ["class_0", "class_1", "class_2", "class_3"]
        assert labels.placeholder

    def test_empty_file_uses_placeholders(self):
        with patch(REQUESTS_GET, return_value=MagicMock(text="\n\n")):
            labels = load_labels("https://example.com/labels.txt", num_classes=2)
        assert labels.placeholder
        assert len(labels) == 2

    def test_strict_mode_raises(self):
        with patch(REQUESTS_GET, side_effect=requests.ConnectionError("offline")):
            with pytest.raises(requests.ConnectionError):
                load_labels("https://example.com/labels.txt", strict=True)

    def test_http_error_status(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        with patch(REQUESTS_GET, return_value=response):
            labels = load_labels("https://example.com/labels.txt", num_classes=3)
        assert labels.placeholder


class TestAlignLabels:
    """Matching label files to the model's output size"""

    def test_drops_leading_background(self):
        aligned = align_labels(LabelSet(names=["background", "tench", "goldfish"]), 2)
        assert aligned.names == ["tench", "goldfish"]

    def test_keeps_background_for_1001_way_models(self):
        labels = LabelSet(names=["background", "tench", "goldfish"])
        assert align_labels(labels, 3) is labels

    def test_mismatch_is_kept(self):
        labels = LabelSet(names=["tench", "goldfish"])
        assert align_labels(labels, 5) is labels

    def test_unknown_output_size(self):
        labels = LabelSet(names=["tench"])
        assert align_labels(labels, None) is labels

    def test_placeholders_follow_output_size(self):
        aligned = align_labels(LabelSet(names=["class_0"], placeholder=True), 3)
        assert aligned.names == ["class_0", "class_1", "class_2"]
        assert aligned.placeholder


class TestModelFiles:
    """Download cache for model weights"""

    def test_cache_path(self, tmp_path):
        path = cache_path_for("https://example.com/models/mobilenetv2-7.onnx?download=1", str(tmp_path))
        assert path == str(tmp_path / "mobilenetv2-7.onnx")

    def test_existing_file_is_not_downloaded(self, tmp_path):
        path = tmp_path / "model.onnx"
        path.write_bytes(b"onnx")
        with patch(REQUESTS_GET) as get:
            assert ensure_file(str(path), "https://example.com/model.onnx") == str(path)
        get.assert_not_called()

    def test_download(self, tmp_path):
        response = MagicMock()
        response.iter_content.return_value = [b"abc", b"", b"def"]
        with patch(REQUESTS_GET) as get:
            get.return_value.__enter__.return_value = response
            path = resolve_model_file("https://example.com/m/model.onnx", str(tmp_path / "cache"))
        assert path == str(tmp_path / "cache" / "model.onnx")
        assert (tmp_path / "cache" / "model.onnx").read_bytes() == b"abcdef"
        assert not (tmp_path / "cache" / "model.onnx.part").exists()

    def test_local_model_path(self, tmp_path):
        path = tmp_path / "local.onnx"
        path.write_bytes(b"onnx")
        assert resolve_model_file(str(path), str(tmp_path / "cache")) == str(path)

    def test_missing_url(self, tmp_path):
        assert ensure_file(str(tmp_path / "model.onnx"), None) is None
        with pytest.raises(RuntimeError):
            resolve_model_file("", str(tmp_path))


def test_parse_labels_strips_blank_lines():
    assert parse_labels("  a \n\n b\n") == ["a", "b"]
