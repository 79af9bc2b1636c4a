import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv


# .env values take precedence over empty defaults inherited from the container.
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), override=True)


DEFAULT_MODEL_URL = (
    "https://github.com/onnx/models/raw/main/validated/vision/classification/"
    "mobilenet/model/mobilenetv2-7.onnx"
)
DEFAULT_LABELS_URL = "https://storage.googleapis.com/download.tensorflow.org/data/ImageNetLabels.txt"


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_floats(name: str, default: str) -> Tuple[float, ...]:
    return tuple(float(v) for v in os.getenv(name, default).split(",") if v.strip())


@dataclass
class EnvironmentConfig:
    app_env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    # 'onnx' runs MobileNet through ONNX Runtime, 'transformers' through a Hugging Face pipeline
    model_backend: str = field(default_factory=lambda: _env("ALTIMATE_MODEL_BACKEND", "onnx"))
    model_url: str = field(default_factory=lambda: _env("ALTIMATE_MODEL_URL", DEFAULT_MODEL_URL))
    # Downloaded weights are cached here
    model_dir: str = field(default_factory=lambda: _env("ALTIMATE_MODEL_DIR", "models"))
    labels_url: str = field(default_factory=lambda: _env("ALTIMATE_LABELS_URL", DEFAULT_LABELS_URL))
    num_classes: int = field(default_factory=lambda: int(_env("ALTIMATE_NUM_CLASSES", "1000")))
    # When true, an unreachable label file fails the model load instead of using class_N placeholders
    strict_labels: bool = field(default_factory=lambda: _env_bool("ALTIMATE_STRICT_LABELS", "false"))
    device: str = field(default_factory=lambda: _env("DEVICE", "auto"))  # 'cuda', 'cpu', or 'auto'
    target_size: int = field(default_factory=lambda: int(_env("ALTIMATE_TARGET_SIZE", "224")))
    max_predictions: int = field(default_factory=lambda: int(_env("ALTIMATE_MAX_PREDICTIONS", "5")))
    # Per-channel standardization applied by the ONNX adapter after the 0-1 scaling; empty disables it
    input_mean: Tuple[float, ...] = field(default_factory=lambda: _env_floats("ALTIMATE_MEAN", "0.485,0.456,0.406"))
    input_std: Tuple[float, ...] = field(default_factory=lambda: _env_floats("ALTIMATE_STD", "0.229,0.224,0.225"))
    http_timeout: float = field(default_factory=lambda: float(_env("ALTIMATE_HTTP_TIMEOUT", "30")))
    # Hugging Face classification backend
    huggingface_token: str = field(default_factory=lambda: _env("HUGGINGFACE_TOKEN", ""))
    hf_inference_base: str = field(default_factory=lambda: _env("HF_INFERENCE_API_BASE", "https://api-inference.huggingface.co"))
    hf_classifier_model: str = field(default_factory=lambda: _env("HF_CLASSIFIER_MODEL", "google/mobilenet_v2_1.0_224"))
    # Mode: 'local' runs transformers in-process, 'api' calls the Inference API
    hf_classifier_mode: str = field(default_factory=lambda: _env("HF_CLASSIFIER_MODE", "local"))
    log_level: str = field(default_factory=lambda: _env("ALTIMATE_LOG_LEVEL", "INFO"))
