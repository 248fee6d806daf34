"""
phonobind Binding Configuration

Responsibilities:
- Hold settings that affect registration and ownership checking
- Read them from the environment

Environment:
    PHONOBIND_LOG_LEVEL         Logging level name (default: WARNING)
    PHONOBIND_DEBUG_OWNERSHIP   "1"/"0"; track owning holders to catch
                                double acquisition (default: on unless
                                running under python -O)
"""

import os
from dataclasses import dataclass, replace

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class BindingConfig:
    """
    Frozen binding configuration.

    Attributes:
        log_level: Logging level name used by the CLI
        debug_ownership: Reject a second owning holder over one native instance
    """
    log_level: str = "WARNING"
    debug_ownership: bool = __debug__

    @classmethod
    def from_env(cls, environ=None) -> "BindingConfig":
        """
        Build a config from environment variables.

        Raises:
            ValueError: If a variable holds an unrecognized value.
        """
        environ = os.environ if environ is None else environ
        config = cls()

        level = environ.get("PHONOBIND_LOG_LEVEL")
        if level is not None:
            config = config.with_log_level(level)

        debug = environ.get("PHONOBIND_DEBUG_OWNERSHIP")
        if debug is not None:
            value = debug.strip().lower()
            if value in _TRUE:
                config = replace(config, debug_ownership=True)
            elif value in _FALSE:
                config = replace(config, debug_ownership=False)
            else:
                raise ValueError(f"Invalid PHONOBIND_DEBUG_OWNERSHIP value: {debug!r}")

        return config

    def with_log_level(self, level: str) -> "BindingConfig":
        level = level.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {level!r}. Valid: {list(LOG_LEVELS)}")
        return replace(self, log_level=level)
