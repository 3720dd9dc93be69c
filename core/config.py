"""
Configuration management with environment variables + .env fallback.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={value!r}, using {default}")
        return default


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}")
        return None


@dataclass
class Settings:
    """
    Application settings with environment variable support.

    Priority: Environment Variable > .env.local > .env > Default
    """
    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5001
    cors_origins: str = "*"

    # Lifecycle timing (milliseconds)
    cooldown_ms: int = 5000
    grace_window_ms: int = 2000
    default_duration_ms: int = 5000

    # Decision engine
    random_trigger_probability: float = 0.5
    movement_trigger_probability: float = 0.3
    velocity_threshold: float = 1.0
    movement_window: int = 3
    position_jitter: float = 50.0
    random_seed: Optional[int] = None

    # History retention (0 = unbounded)
    history_limit: int = 1000

    # Client
    server_url: str = "http://localhost:5001"

    # Runtime
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 5001),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            cooldown_ms=_env_int("INTERVENTION_COOLDOWN_MS", 5000),
            grace_window_ms=_env_int("RESTORE_GRACE_WINDOW_MS", 2000),
            default_duration_ms=_env_int("INTERVENTION_DURATION_MS", 5000),
            random_trigger_probability=_env_float("RANDOM_TRIGGER_PROBABILITY", 0.5),
            movement_trigger_probability=_env_float("MOVEMENT_TRIGGER_PROBABILITY", 0.3),
            velocity_threshold=_env_float("VELOCITY_THRESHOLD", 1.0),
            movement_window=_env_int("MOVEMENT_WINDOW", 3),
            position_jitter=_env_float("POSITION_JITTER", 50.0),
            random_seed=_env_optional_int("RANDOM_SEED"),
            history_limit=_env_int("HISTORY_LIMIT", 1000),
            server_url=os.getenv("INTERVENTION_SERVER_URL", "http://localhost:5001"),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_cors_origins(self) -> list[str]:
        """CORS origins as a list ("*" stays a single wildcard entry)."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]

    def validate(self) -> list[str]:
        """
        Validate settings.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not 0 < self.port < 65536:
            errors.append(f"PORT must be between 1 and 65535 (got {self.port})")
        if self.cooldown_ms < 0:
            errors.append("INTERVENTION_COOLDOWN_MS must not be negative")
        if self.grace_window_ms < 0:
            errors.append("RESTORE_GRACE_WINDOW_MS must not be negative")
        if self.default_duration_ms <= 0:
            errors.append("INTERVENTION_DURATION_MS must be positive")
        for name, value in (
            ("RANDOM_TRIGGER_PROBABILITY", self.random_trigger_probability),
            ("MOVEMENT_TRIGGER_PROBABILITY", self.movement_trigger_probability),
        ):
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be between 0 and 1 (got {value})")
        if self.movement_window <= 0:
            errors.append("MOVEMENT_WINDOW must be positive")
        if self.history_limit < 0:
            errors.append("HISTORY_LIMIT must not be negative (0 = unbounded)")

        return errors

    def validate_for_server(self) -> None:
        """
        Validate settings required to start the server.

        Raises:
            ValueError: With clear message if configuration is invalid
        """
        errors = self.validate()
        if errors:
            error_msg = "\n".join([f"  - {e}" for e in errors])
            raise ValueError(
                f"\nConfiguration Error:\n{error_msg}\n\n"
                f"Check your environment or .env.local file.\n"
            )


def _load_dotenv():
    """Load .env.local file if it exists."""
    # Try .env.local first, then .env
    root = os.path.dirname(os.path.dirname(__file__))
    env_local = os.path.join(root, ".env.local")
    env_file = os.path.join(root, ".env")

    if os.path.exists(env_local):
        load_dotenv(env_local)
        logger.debug(f"Loaded settings from {env_local}")
    elif os.path.exists(env_file):
        load_dotenv(env_file)
        logger.debug(f"Loaded settings from {env_file}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Loads from environment/.env.local.
    """
    _load_dotenv()
    logger.info("Loading settings from environment")
    return Settings.from_environment()
