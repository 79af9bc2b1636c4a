import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional

import numpy as np
import requests
from PIL import Image

from altimate.domain.entities.classification_entity import RawPrediction


logger = logging.getLogger(__name__)


@dataclass
class HuggingFaceClassifierConfig:
    token: str
    model: str = "google/mobilenet_v2_1.0_224"
    base_url: str = "https://api-inference.huggingface.co"
    mode: str = "local"  # 'local' or 'api'
    timeout: float = 60


def tensor_to_image(tensor: np.ndarray, normalized: bool = True) -> Image.Image:
    """[1, H, W, 3] -> PIL RGB image; the HF processor does its own resizing.

    normalized tells whether pixels are in 0-1 (scaled back to 0-255) or already 0-255.
    """
    arr = np.asarray(tensor, dtype=np.float32)
    if arr.ndim == 4:
        arr = arr[0]
    if normalized:
        arr = arr * 255.0
    return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8)).convert("RGB")


class HuggingFaceClassifierClient:
    """Client to classify images with a MobileNet checkpoint on Hugging Face.

    - local: uses transformers pipeline('image-classification').
    - api: calls Hugging Face Inference API with image bytes.
    """

    def __init__(self, config: HuggingFaceClassifierConfig) -> None:
        self.config = config
        self._pipe = None
        self._loaded = False

    def load(self, model_url: Optional[str] = None) -> None:
        if model_url:
            self.config.model = model_url
        if self.config.mode.lower() == "local":
            import torch
            from transformers import pipeline  # type: ignore

            device = 0 if torch.cuda.is_available() else -1
            self._pipe = pipeline("image-classification", model=self.config.model, device=device)
            logger.info("Loaded local image-classification pipeline: %s", self.config.model)
        elif not self.config.token:
            raise ValueError("HUGGINGFACE_TOKEN is required for the classification API mode")
        self._loaded = True

    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def num_outputs(self) -> Optional[int]:
        labels = self.builtin_labels()
        return len(labels) if labels else None

    @property
    def provides_labels(self) -> bool:
        # both the pipeline and the Inference API answer with label names
        return True

    def builtin_labels(self) -> Optional[List[str]]:
        if self._pipe is None:
            return None
        id2label = self._pipe.model.config.id2label
        return [id2label[i] for i in sorted(id2label)]

    def predict(self, tensor: np.ndarray, normalized: bool = True) -> RawPrediction:
        image = tensor_to_image(tensor, normalized)
        if self.config.mode.lower() == "local":
            if self._pipe is None:
                raise RuntimeError("image-classification pipeline is not loaded")
            # top_k=None returns every class so the repository can apply its own top-K
            outputs = self._pipe(image, top_k=None)
        else:
            outputs = self._classify_api(image)
        labels = [str(o.get("label", "")) for o in outputs]
        scores = np.asarray([float(o.get("score", 0.0)) for o in outputs], dtype=np.float32)
        return RawPrediction(probabilities=scores, labels=labels)

    def _classify_api(self, image: Image.Image) -> List[dict]:
        buf = BytesIO()
        image.save(buf, format="PNG")
        url = f"{self.config.base_url.rstrip('/')}/models/{self.config.model}"
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/octet-stream",
            "Accept": "application/json",
        }
        resp = requests.post(url, headers=headers, data=buf.getvalue(), timeout=self.config.timeout)
        if resp.status_code >= 400:
            raise RuntimeError(f"HuggingFace API error {resp.status_code}: {resp.text}")
        try:
            data = resp.json()
        except ValueError:
            raise RuntimeError(f"Non-JSON response from HuggingFace API: {resp.text[:200]}")
        # Expect list of {'label': ..., 'score': ...}
        if isinstance(data, list):
            return [d for d in data if isinstance(d, dict)]
        if isinstance(data, dict) and "label" in data:
            return [data]
        return []

    def dispose(self) -> None:
        self._pipe = None
        self._loaded = False
