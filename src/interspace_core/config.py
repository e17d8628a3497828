"""
Runtime Configuration

Environment-aware settings for the transaction pipeline. Values are read
from the process environment after loading a local ``.env`` file.

Environment Variables:
    - INTERSPACE_API_BASE_URL: Versioned API root of the backend
    - INTERSPACE_ACCESS_TOKEN: Bearer token attached to every request
    - INTERSPACE_REQUEST_TIMEOUT: HTTP timeout in seconds
    - INTERSPACE_POLL_INTERVAL_MS: Delay between status polls
    - INTERSPACE_POLL_MAX_ATTEMPTS: Status requests issued before timing out
    - INTERSPACE_PARTIAL_IS_TERMINAL: Stop polling on ``partial`` status
    - INTERSPACE_USE_TEST_SIGNER: Route operation signing through the approval queue
    - INTERSPACE_NATIVE_GAS_THRESHOLD_WEI: Native balance that covers one transfer
"""

import logging
import os
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_POLL_MAX_ATTEMPTS,
    NATIVE_GAS_THRESHOLD_WEI,
)
from .engine.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class Settings(BaseModel):
    """Pipeline settings; construct directly in tests, use ``load_settings()`` in apps."""
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Versioned API root")
    access_token: Optional[str] = Field(default=None, description="Bearer token")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout (seconds)")
    poll_interval_ms: int = Field(default=DEFAULT_POLL_INTERVAL_MS, ge=0)
    poll_max_attempts: int = Field(default=DEFAULT_POLL_MAX_ATTEMPTS, ge=1)
    partial_is_terminal: bool = Field(
        default=False,
        description="Treat 'partial' status as final instead of polling on",
    )
    use_test_signer: bool = Field(default=False, description="Development approval-queue signer")
    native_gas_threshold_wei: int = Field(default=NATIVE_GAS_THRESHOLD_WEI, ge=0)

    @property
    def poll_interval(self) -> float:
        """Polling interval in seconds."""
        return self.poll_interval_ms / 1000


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be numeric, got {raw!r}") from e


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build ``Settings`` from the environment.

    Args:
        env_file: Optional path to a dotenv file; defaults to ``.env`` lookup.

    Returns:
        Settings: Validated settings.

    Raises:
        ConfigurationError: If any variable holds an invalid value.
    """
    dotenv.load_dotenv(dotenv_path=env_file)

    try:
        settings = Settings(
            api_base_url=os.getenv("INTERSPACE_API_BASE_URL") or DEFAULT_API_BASE_URL,
            access_token=os.getenv("INTERSPACE_ACCESS_TOKEN") or None,
            request_timeout=_env_number("INTERSPACE_REQUEST_TIMEOUT", 30.0, float),
            poll_interval_ms=_env_number("INTERSPACE_POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS, int),
            poll_max_attempts=_env_number("INTERSPACE_POLL_MAX_ATTEMPTS", DEFAULT_POLL_MAX_ATTEMPTS, int),
            partial_is_terminal=_env_bool("INTERSPACE_PARTIAL_IS_TERMINAL", False),
            use_test_signer=_env_bool("INTERSPACE_USE_TEST_SIGNER", False),
            native_gas_threshold_wei=_env_number(
                "INTERSPACE_NATIVE_GAS_THRESHOLD_WEI", NATIVE_GAS_THRESHOLD_WEI, int
            ),
        )
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise ConfigurationError(str(e)) from e

    logger.debug("Loaded settings for %s (test signer: %s)", settings.api_base_url, settings.use_test_signer)
    return settings
