from typing import Optional

from altimate.core.config.environment_config import EnvironmentConfig
from altimate.core.utils.logger import get_logger
from altimate.session import AltTextSession

_logger = get_logger("service_locator")


class ServiceLocator:
    """Lazy wiring for the HTTP layer. Library callers should build their own AltTextSession."""

    _config: Optional[EnvironmentConfig] = None
    _session: Optional[AltTextSession] = None

    @classmethod
    def config(cls) -> EnvironmentConfig:
        if cls._config is None:
            cls._config = EnvironmentConfig()
            _logger.info(
                "[config] MODEL_BACKEND=%s MODEL_URL=%s LABELS_URL=%s HUGGINGFACE_TOKEN=%s",
                cls._config.model_backend,
                cls._config.model_url,
                cls._config.labels_url,
                "SET" if cls._config.huggingface_token else "MISSING",
            )
        return cls._config

    @classmethod
    def session(cls) -> AltTextSession:
        if cls._session is None:
            cls._session = AltTextSession(config=cls.config())
        return cls._session

    @classmethod
    def override_session(cls, session: AltTextSession) -> None:
        cls._session = session

    @classmethod
    def reset(cls) -> None:
        """Release the session's model and forget cached wiring (app shutdown, tests)."""
        if cls._session is not None:
            cls._session.cleanup()
        cls._session = None
        cls._config = None
