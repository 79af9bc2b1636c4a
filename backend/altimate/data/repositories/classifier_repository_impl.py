import threading
from concurrent.futures import Future
from typing import List, Optional, Sequence

import numpy as np

from altimate.core.utils.logger import get_logger
from altimate.data.adapters.model_assets import LabelSet, align_labels, load_labels
from altimate.domain.entities.classification_entity import ClassificationRecord, ModelStatus
from altimate.domain.entities.options_entity import ModelLoadOptions
from altimate.domain.errors import CLASSIFICATION_FAILED, MODEL_LOAD_FAILED, ImageAnalysisError
from altimate.domain.repositories.classifier_repository import ClassifierRepository

_logger = get_logger("classifier_repo")


def top_k(probabilities: np.ndarray, labels: Sequence[str], k: int) -> List[ClassificationRecord]:
    """Return the k most probable classes, sorted descending, keeping index -> label mapping."""
    probs = np.asarray(probabilities, dtype=np.float64).reshape(-1)
    if k <= 0 or probs.size == 0:
        return []
    # stable sort keeps lower indices first on ties
    order = np.argsort(-probs, kind="stable")[:k]
    results: List[ClassificationRecord] = []
    for index in order.tolist():
        label = labels[index] if index < len(labels) else f"Unknown_{index}"
        results.append(ClassificationRecord.of(label, float(np.clip(probs[index], 0.0, 1.0))))
    return results


class ClassifierRepositoryImpl(ClassifierRepository):
    """Classifier repository backed by an adapter (ONNX Runtime or Hugging Face).

    Model loading is single-flight: the first caller performs the load while concurrent
    callers wait on the same Future and observe the same result or error.
    """

    def __init__(
        self,
        adapter,
        labels_url: str,
        num_classes: int = 1000,
        strict_labels: bool = False,
        http_timeout: float = 30,
    ):
        self._adapter = adapter
        self._labels_url = labels_url
        self._num_classes = num_classes
        self._strict_labels = strict_labels
        self._http_timeout = http_timeout
        self._labels: Optional[LabelSet] = None
        self._loaded = False
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None
        # bumped by dispose(); a load started under an older generation is discarded
        self._generation = 0

    def load_model(self, options: Optional[ModelLoadOptions] = None) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            future = self._inflight
            owner = future is None
            if owner:
                future = Future()
                self._inflight = future
            generation = self._generation

        if not owner:
            _logger.info("Model load already in progress; waiting for it")
            future.result()
            return

        try:
            self._load(options or ModelLoadOptions(), generation)
        except Exception as e:
            if isinstance(e, ImageAnalysisError):
                err = e
            else:
                err = ImageAnalysisError(f"모델 로딩에 실패했습니다: {e}", MODEL_LOAD_FAILED)
                err.__cause__ = e
            _logger.error("Model load failed: %s", e)
            future.set_exception(err)
            raise err
        else:
            future.set_result(None)
        finally:
            with self._lock:
                if self._inflight is future:
                    self._inflight = None

    def _load(self, options: ModelLoadOptions, generation: int) -> None:
        _logger.info("Model load started")
        self._report_progress(options, 0.3)
        self._adapter.load(options.model_url)
        self._report_progress(options, 0.7)

        builtin = self._adapter.builtin_labels()
        if builtin:
            labels = LabelSet(names=list(builtin))
        elif self._adapter.provides_labels:
            # predictions carry their own labels (Inference API), no label file needed
            labels = LabelSet(names=[])
        else:
            labels = load_labels(
                self._labels_url,
                num_classes=self._num_classes,
                timeout=self._http_timeout,
                strict=self._strict_labels,
            )
            labels = align_labels(labels, self._adapter.num_outputs)

        with self._lock:
            if self._generation != generation:
                self._adapter.dispose()
                raise RuntimeError("모델 로딩 중 리소스가 정리되어 로딩이 취소되었습니다")
            self._labels = labels
            self._loaded = True
        self._report_progress(options, 1.0)
        _logger.info("Model load finished: %d classes (placeholder labels=%s)", len(labels), labels.placeholder)

    @staticmethod
    def _report_progress(options: ModelLoadOptions, value: float) -> None:
        if options.on_load_progress is None:
            return
        try:
            options.on_load_progress(value)
        except Exception as e:
            _logger.warning("Progress callback failed at %.1f: %s", value, e)

    def classify(
        self, image_tensor: np.ndarray, max_predictions: int = 5, normalized: bool = True
    ) -> List[ClassificationRecord]:
        if not self._loaded or self._labels is None:
            raise ImageAnalysisError(
                "모델이 로드되지 않았습니다. load_model()을 먼저 호출하세요.", CLASSIFICATION_FAILED
            )
        try:
            prediction = self._adapter.predict(image_tensor, normalized=normalized)
            labels = prediction.labels if prediction.labels is not None else self._labels.names
            results = top_k(prediction.probabilities, labels, max_predictions)
        except Exception as e:
            _logger.error("Classification failed: %s", e)
            raise ImageAnalysisError(f"이미지 분류에 실패했습니다: {e}", CLASSIFICATION_FAILED) from e

        _logger.info("Top results: %s", [(r.label, round(r.probability, 4)) for r in results[:3]])
        return results

    def is_model_loaded(self) -> bool:
        return self._loaded

    def get_model_info(self) -> ModelStatus:
        labels = self._labels
        return ModelStatus(
            is_loaded=self._loaded,
            total_classes=len(labels) if labels is not None else 0,
            labels_placeholder=bool(labels is not None and labels.placeholder),
        )

    def dispose(self) -> None:
        with self._lock:
            self._generation += 1
            # a load in flight keeps running but will not commit; new callers start a fresh one
            self._inflight = None
            self._adapter.dispose()
            self._labels = None
            self._loaded = False
        _logger.info("Model resources released")
