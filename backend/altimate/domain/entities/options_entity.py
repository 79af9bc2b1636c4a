from dataclasses import dataclass, field
from typing import Callable, Optional


DEFAULT_TARGET_SIZE = 224
DEFAULT_MAX_PREDICTIONS = 5


@dataclass
class ImageProcessingOptions:
    """Preprocessing options.

    - target_size: side of the square tensor fed to the model
    - normalize: scale pixel values from 0-255 to 0-1
    - max_predictions: number of classification records to return
    """
    target_size: int = DEFAULT_TARGET_SIZE
    normalize: bool = True
    max_predictions: int = DEFAULT_MAX_PREDICTIONS


@dataclass
class ModelLoadOptions:
    """Model loading options.

    - model_url: overrides the configured weights URL (or HF model id for the transformers backend)
    - on_load_progress: called with values in (0, 1] while the model loads
    """
    model_url: Optional[str] = None
    on_load_progress: Optional[Callable[[float], None]] = None


@dataclass
class AnalyzeImageOptions(ImageProcessingOptions):
    model_options: ModelLoadOptions = field(default_factory=ModelLoadOptions)
