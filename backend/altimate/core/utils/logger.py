import logging


_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_ROOT_NAME = "altimate"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under 'altimate' (e.g. 'altimate.onnx_adapter')."""
    _configure_root()
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


def set_log_level(level: str) -> None:
    """Apply EnvironmentConfig.log_level (ALTIMATE_LOG_LEVEL) to every altimate logger."""
    _configure_root().setLevel(level.upper())
