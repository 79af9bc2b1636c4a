"""Turns user images into tensors MobileNet understands.

Accepted inputs: PIL images, numpy arrays (HxW, HxWx3 RGB, HxWx4 RGBA), raw bytes,
binary file objects, local paths, http(s) URLs and data:image base64 URLs.
"""
import base64
import os
from io import BytesIO
from typing import Any, Optional, Union

import cv2
import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from altimate.core.utils.logger import get_logger
from altimate.domain.entities.options_entity import ImageProcessingOptions

_logger = get_logger("image_processor")

SUPPORTED_FORMATS = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}

ImageInput = Union[Image.Image, np.ndarray, bytes, bytearray, str, os.PathLike, Any]


def _unsupported_format_error() -> ValueError:
    return ValueError(
        f"지원하지 않는 파일 형식입니다. 지원 형식: {', '.join(SUPPORTED_FORMATS.values())}"
    )


def _decode_bytes(data: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(data))
    except UnidentifiedImageError:
        raise _unsupported_format_error()
    if image.format not in SUPPORTED_FORMATS:
        raise _unsupported_format_error()
    image.load()
    return image


def _fetch_url(url: str, timeout: float) -> bytes:
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def _decode_string(source: str, timeout: float) -> Image.Image:
    source = source.strip().strip('`"')
    if source.startswith("http://") or source.startswith("https://"):
        return _decode_bytes(_fetch_url(source, timeout))
    if source.startswith("data:image"):
        # data:image/png;base64,iVBORw0KGgo...
        try:
            _, encoded = source.split(",", 1)
            data = base64.b64decode(encoded)
        except ValueError as e:
            raise ValueError(f"잘못된 data URL입니다: {e}")
        return _decode_bytes(data)
    if not os.path.isfile(source):
        raise FileNotFoundError(f"이미지 파일을 찾을 수 없습니다: {source}")
    with open(source, "rb") as f:
        return _decode_bytes(f.read())


def _array_to_rgb(array: np.ndarray) -> np.ndarray:
    if array.ndim == 2:
        return cv2.cvtColor(array.astype(np.uint8), cv2.COLOR_GRAY2RGB)
    if array.ndim == 3 and array.shape[2] == 4:
        return cv2.cvtColor(array.astype(np.uint8), cv2.COLOR_RGBA2RGB)
    if array.ndim == 3 and array.shape[2] == 3:
        return array.astype(np.uint8)
    raise ValueError(f"지원하지 않는 배열 형태입니다: {array.shape}")


def to_rgb_array(image_input: ImageInput, timeout: float = 30.0) -> np.ndarray:
    """Decode any supported input into an HxWx3 uint8 RGB array."""
    if isinstance(image_input, np.ndarray):
        return _array_to_rgb(image_input)
    if isinstance(image_input, Image.Image):
        return np.array(image_input.convert("RGB"))
    if isinstance(image_input, (bytes, bytearray)):
        return np.array(_decode_bytes(bytes(image_input)).convert("RGB"))
    if isinstance(image_input, (str, os.PathLike)):
        return np.array(_decode_string(os.fspath(image_input), timeout).convert("RGB"))
    if hasattr(image_input, "read"):
        return np.array(_decode_bytes(image_input.read()).convert("RGB"))
    raise ValueError("지원하지 않는 이미지 형식입니다.")


def center_crop_resize(rgb: np.ndarray, target_size: int) -> np.ndarray:
    """Crop the centered square of side min(w, h) and resize it to target_size x target_size."""
    h, w = rgb.shape[:2]
    if h == 0 or w == 0:
        raise ValueError("빈 이미지는 처리할 수 없습니다.")
    size = min(h, w)
    y = (h - size) // 2
    x = (w - size) // 2
    square = rgb[y:y + size, x:x + size]
    interpolation = cv2.INTER_AREA if size > target_size else cv2.INTER_LINEAR
    return cv2.resize(square, (target_size, target_size), interpolation=interpolation)


def process_image(image_input: ImageInput, options: Optional[ImageProcessingOptions] = None, timeout: float = 30.0) -> np.ndarray:
    """Return a float32 tensor of shape [1, target_size, target_size, 3]."""
    opts = options or ImageProcessingOptions()
    if opts.target_size <= 0:
        raise ValueError(f"target_size must be positive, got {opts.target_size}")

    rgb = to_rgb_array(image_input, timeout=timeout)
    resized = center_crop_resize(rgb, opts.target_size)

    tensor = resized.astype(np.float32)
    if opts.normalize:
        tensor /= 255.0
    tensor = np.expand_dims(tensor, 0)  # HWC -> NHWC
    _logger.debug("Preprocessed image %s -> %s", rgb.shape, tensor.shape)
    return tensor
