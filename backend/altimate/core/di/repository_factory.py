from altimate.core.config.environment_config import EnvironmentConfig
from altimate.data.adapters.hf_classifier_client import HuggingFaceClassifierClient, HuggingFaceClassifierConfig
from altimate.data.adapters.mobilenet_onnx_adapter import MobileNetOnnxAdapter
from altimate.data.repositories.classifier_repository_impl import ClassifierRepositoryImpl
from altimate.domain.repositories.classifier_repository import ClassifierRepository


def build_classifier_adapter(cfg: EnvironmentConfig):
    backend = cfg.model_backend.lower()
    if backend == "onnx":
        return MobileNetOnnxAdapter(
            model_url=cfg.model_url,
            cache_dir=cfg.model_dir,
            device=cfg.device,
            mean=cfg.input_mean,
            std=cfg.input_std,
        )
    if backend == "transformers":
        client_cfg = HuggingFaceClassifierConfig(
            token=cfg.huggingface_token,
            model=cfg.hf_classifier_model,
            base_url=cfg.hf_inference_base,
            mode=cfg.hf_classifier_mode,
            timeout=cfg.http_timeout,
        )
        return HuggingFaceClassifierClient(config=client_cfg)
    raise ValueError(f"Unknown ALTIMATE_MODEL_BACKEND '{cfg.model_backend}' (expected 'onnx' or 'transformers')")


def build_classifier_repository(cfg: EnvironmentConfig) -> ClassifierRepository:
    return ClassifierRepositoryImpl(
        adapter=build_classifier_adapter(cfg),
        labels_url=cfg.labels_url,
        num_classes=cfg.num_classes,
        strict_labels=cfg.strict_labels,
        http_timeout=cfg.http_timeout,
    )
