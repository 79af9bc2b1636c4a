import os
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

import requests

from altimate.core.utils.logger import get_logger

_logger = get_logger("model_assets")


@dataclass(frozen=True)
class LabelSet:
    names: List[str]
    # True when the label file was unreachable and class_N names were generated
    placeholder: bool = False

    def __len__(self) -> int:
        return len(self.names)


def placeholder_labels(num_classes: int) -> List[str]:
    return [f"class_{i}" for i in range(num_classes)]


def cache_path_for(url: str, cache_dir: str) -> str:
    name = os.path.basename(urlparse(url).path) or "model.onnx"
    return os.path.join(cache_dir, name)


def ensure_file(path: str, url: Optional[str], timeout: float = 120) -> Optional[str]:
    """Return `path`, downloading it from `url` first when it is not on disk yet."""
    if os.path.isfile(path):
        return path
    if not url:
        return None
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = f"{path}.part"
    _logger.info("Downloading model file: %s", url)
    with requests.get(url, stream=True, timeout=timeout) as r:
        r.raise_for_status()
        with open(tmp_path, "wb") as f:
            for chunk in r.iter_content(chunk_size=1024 * 1024):
                if chunk:
                    f.write(chunk)
    os.replace(tmp_path, path)
    return path if os.path.isfile(path) else None


def resolve_model_file(model_url: str, cache_dir: str, timeout: float = 120) -> str:
    """Accept either a local file path or a URL cached under cache_dir."""
    if os.path.isfile(model_url):
        return model_url
    path = ensure_file(cache_path_for(model_url, cache_dir), model_url, timeout=timeout)
    if not path:
        raise RuntimeError(f"Could not prepare model file from '{model_url}'")
    return path


def parse_labels(text: str) -> List[str]:
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def load_labels(url: str, num_classes: int = 1000, timeout: float = 30, strict: bool = False) -> LabelSet:
    """Fetch a plain-text label file (one label per line).

    On failure, falls back to class_0..class_{num_classes-1} and flags the set as placeholder,
    unless `strict` is set, in which case the error propagates.
    """
    try:
        if os.path.isfile(url):
            with open(url, "r", encoding="utf-8") as f:
                text = f.read()
        else:
            resp = requests.get(url, timeout=timeout)
            resp.raise_for_status()
            text = resp.text
        names = parse_labels(text)
        if not names:
            raise ValueError("label file is empty")
        _logger.info("Loaded %d labels from %s", len(names), url)
        return LabelSet(names=names)
    except Exception as e:
        if strict:
            raise
        _logger.warning(
            "Label file unavailable (%s); using %d placeholder labels. Captions will be meaningless.",
            e,
            num_classes,
        )
        return LabelSet(names=placeholder_labels(num_classes), placeholder=True)


def align_labels(labels: LabelSet, num_outputs: Optional[int]) -> LabelSet:
    """Drop the leading 'background' entry of TF-style label files for 1000-way models."""
    if num_outputs is None:
        return labels
    if labels.placeholder:
        if len(labels) == num_outputs:
            return labels
        return LabelSet(names=placeholder_labels(num_outputs), placeholder=True)
    names = labels.names
    if len(names) == num_outputs + 1 and names[0].lower() == "background":
        return LabelSet(names=names[1:])
    if len(names) != num_outputs:
        _logger.warning("Label count %d does not match model outputs %d", len(names), num_outputs)
    return labels
