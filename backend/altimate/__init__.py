"""Alt-imate: Korean alt-text generation from MobileNet image classification.

Layers:
- domain: entities, caption tables, use cases and repository contracts
- data: classifier adapters (ONNX Runtime, Hugging Face) and repository implementations
- presentation: FastAPI routers and models
- core: configuration, DI, logging and image preprocessing
"""

__version__ = "1.0.0"
NAME = "Alt-imate"
