"""
pytest configuration and shared fakes

FakeAdapter stands in for the ONNX / Hugging Face adapters so no test needs
network access or model weights.
"""
import base64
import io
import threading
from typing import List, Optional

import numpy as np
import pytest
from PIL import Image

from altimate.core.config.environment_config import EnvironmentConfig
from altimate.data.repositories.classifier_repository_impl import ClassifierRepositoryImpl
from altimate.domain.entities.classification_entity import RawPrediction
from altimate.session import AltTextSession


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")


class FakeAdapter:
    """Adapter double recording calls; optionally blocks or fails in load()."""

    def __init__(
        self,
        labels: Optional[List[str]] = None,
        probabilities: Optional[List[float]] = None,
        load_error: Optional[Exception] = None,
        predict_error: Optional[Exception] = None,
        provides_labels: bool = False,
        prediction_labels: Optional[List[str]] = None,
    ):
        self.provides_labels = provides_labels
        self.prediction_labels = prediction_labels
        self.normalized_flags = []
        self.labels = labels if labels is not None else ["golden_retriever", "beagle", "pizza"]
        self.probabilities = np.asarray(
            probabilities if probabilities is not None else [0.92, 0.05, 0.03], dtype=np.float32
        )
        self.load_error = load_error
        self.predict_error = predict_error
        self.load_calls = 0
        self.dispose_calls = 0
        self.predicted_shapes = []
        self.started = threading.Event()
        self.release = threading.Event()
        self.release.set()
        self._loaded = False

    def load(self, model_url=None):
        self.load_calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        if self.load_error is not None:
            raise self.load_error
        self._loaded = True

    def is_loaded(self):
        return self._loaded

    @property
    def num_outputs(self):
        return len(self.probabilities)

    def builtin_labels(self):
        return list(self.labels)

    def predict(self, tensor, normalized=True):
        if self.predict_error is not None:
            raise self.predict_error
        self.predicted_shapes.append(tuple(tensor.shape))
        self.normalized_flags.append(normalized)
        return RawPrediction(probabilities=self.probabilities, labels=self.prediction_labels)

    def dispose(self):
        self.dispose_calls += 1
        self._loaded = False


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def repository(fake_adapter):
    return ClassifierRepositoryImpl(adapter=fake_adapter, labels_url="unused://labels")


@pytest.fixture
def session(repository):
    return AltTextSession(config=EnvironmentConfig(), repository=repository)


def encode_image(fmt: str = "PNG", size=(64, 48), color=(200, 120, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format=fmt)
    return buf.getvalue()


def to_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def png_bytes():
    return encode_image("PNG")
