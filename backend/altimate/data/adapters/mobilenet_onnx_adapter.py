from typing import List, Optional, Sequence

import cv2
import numpy as np
import onnxruntime as ort

from altimate.core.utils.logger import get_logger
from altimate.data.adapters.model_assets import resolve_model_file
from altimate.domain.entities.classification_entity import RawPrediction

_logger = get_logger("mobilenet_onnx")


def softmax(logits: np.ndarray) -> np.ndarray:
    shifted = logits - np.max(logits)
    exp = np.exp(shifted)
    return exp / np.sum(exp)


def is_distribution(values: np.ndarray, atol: float = 1e-3) -> bool:
    return bool(values.size) and float(values.min()) >= 0.0 and abs(float(values.sum()) - 1.0) <= atol


def _fixed_dim(dim) -> Optional[int]:
    # ONNX shapes mix ints with symbolic names ('N', 'batch_size') or None
    return dim if isinstance(dim, int) and dim > 0 else None


class MobileNetOnnxAdapter:
    """Image classification adapter using ONNX Runtime.

    Takes NHWC tensors from the image processor and converts them to the layout the
    exported model declares (NCHW for the ONNX model zoo MobileNetV2, NHWC for TF exports).
    """

    def __init__(
        self,
        model_url: str,
        cache_dir: str = "models",
        device: str = "auto",
        mean: Sequence[float] = (),
        std: Sequence[float] = (),
        download_timeout: float = 120,
    ):
        self._model_url = model_url
        self._cache_dir = cache_dir
        self._device = device
        self._mean = np.asarray(mean, dtype=np.float32) if mean else None
        self._std = np.asarray(std, dtype=np.float32) if std else None
        self._download_timeout = download_timeout
        self._session = None
        self._input_name: Optional[str] = None
        self._channels_first = True
        self._input_hw: tuple = (None, None)
        self._num_outputs: Optional[int] = None

    def _providers(self) -> List[str]:
        available = ort.get_available_providers()
        wants_gpu = self._device.lower() in ("cuda", "gpu") or (
            self._device.lower() == "auto" and "CUDAExecutionProvider" in available
        )
        if wants_gpu:
            # Only effective when onnxruntime-gpu is installed
            return ["CUDAExecutionProvider", "CPUExecutionProvider"]
        return ["CPUExecutionProvider"]

    def load(self, model_url: Optional[str] = None) -> None:
        url = model_url or self._model_url
        path = resolve_model_file(url, self._cache_dir, timeout=self._download_timeout)
        providers = self._providers()
        self._session = ort.InferenceSession(path, providers=providers)

        model_input = self._session.get_inputs()[0]
        self._input_name = model_input.name
        shape = list(model_input.shape)
        # (N, 3, H, W) vs (N, H, W, 3)
        self._channels_first = len(shape) == 4 and _fixed_dim(shape[1]) == 3
        if len(shape) == 4:
            self._input_hw = (shape[2], shape[3]) if self._channels_first else (shape[1], shape[2])
            self._input_hw = tuple(_fixed_dim(d) for d in self._input_hw)

        out_shape = list(self._session.get_outputs()[0].shape)
        self._num_outputs = _fixed_dim(out_shape[-1]) if out_shape else None
        _logger.info(
            "ONNX model loaded: %s (providers=%s, nchw=%s, outputs=%s)",
            path, providers, self._channels_first, self._num_outputs,
        )

    def is_loaded(self) -> bool:
        return self._session is not None

    @property
    def num_outputs(self) -> Optional[int]:
        return self._num_outputs

    def builtin_labels(self) -> Optional[List[str]]:
        return None

    @property
    def provides_labels(self) -> bool:
        return False

    def prepare_input(self, tensor: np.ndarray, normalized: bool = True) -> np.ndarray:
        """NHWC float tensor -> model input (resized, standardized, transposed as needed).

        mean/std are given for 0-1 pixels; with normalized=False they are scaled to 0-255
        so both inputs reach the model identically.
        """
        batch = np.asarray(tensor, dtype=np.float32)
        if batch.ndim == 3:
            batch = np.expand_dims(batch, 0)
        h, w = self._input_hw
        if h and w and batch.shape[1:3] != (h, w):
            batch = np.stack([cv2.resize(img, (w, h), interpolation=cv2.INTER_LINEAR) for img in batch])
        if self._mean is not None and self._std is not None:
            scale = 1.0 if normalized else 255.0
            batch = (batch - self._mean * scale) / (self._std * scale)
        if self._channels_first:
            batch = np.transpose(batch, (0, 3, 1, 2))  # NHWC -> NCHW
        return np.ascontiguousarray(batch, dtype=np.float32)

    def predict(self, tensor: np.ndarray, normalized: bool = True) -> RawPrediction:
        if self._session is None:
            raise RuntimeError("ONNX session is not loaded")
        outputs = self._session.run(None, {self._input_name: self.prepare_input(tensor, normalized)})
        if not outputs:
            raise RuntimeError("ONNX model returned no outputs")
        scores = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        if not is_distribution(scores):
            scores = softmax(scores)
        return RawPrediction(probabilities=scores)

    def dispose(self) -> None:
        if self._session is not None:
            self._session = None
            _logger.info("ONNX session released")
