"""
phonobind Configuration Tests

Coverage:
- Defaults
- Environment parsing (log level, ownership tracking)
- Rejection of unrecognized values
"""

import logging

import pytest

from phonobind.config import BindingConfig
from phonobind.utils import configure_logging, serialize_json


class TestBindingConfig:

    def test_defaults(self):
        config = BindingConfig.from_env({})
        assert config.log_level == "WARNING"
        assert config.debug_ownership is __debug__

    def test_log_level_from_env(self):
        config = BindingConfig.from_env({"PHONOBIND_LOG_LEVEL": " debug "})
        assert config.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            BindingConfig.from_env({"PHONOBIND_LOG_LEVEL": "chatty"})

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("true", True), ("ON", True),
        ("0", False), ("no", False), ("Off", False),
    ])
    def test_debug_ownership_from_env(self, raw, expected):
        config = BindingConfig.from_env({"PHONOBIND_DEBUG_OWNERSHIP": raw})
        assert config.debug_ownership is expected

    def test_invalid_debug_ownership(self):
        with pytest.raises(ValueError, match="PHONOBIND_DEBUG_OWNERSHIP"):
            BindingConfig.from_env({"PHONOBIND_DEBUG_OWNERSHIP": "maybe"})

    def test_frozen(self):
        config = BindingConfig()
        with pytest.raises(AttributeError):
            config.log_level = "DEBUG"

    def test_with_log_level_returns_copy(self):
        config = BindingConfig()
        louder = config.with_log_level("info")
        assert louder.log_level == "INFO"
        assert config.log_level == "WARNING"


class TestUtils:

    def test_serialize_json_deterministic(self):
        text = serialize_json({"b": 1, "a": [1, 2]})
        assert text == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": 1\n}\n'

    def test_configure_logging(self, monkeypatch):
        logger = logging.getLogger("phonobind")
        monkeypatch.setattr(logger, "handlers", list(logger.handlers))
        monkeypatch.setattr(logger, "level", logger.level)

        configure_logging("DEBUG")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        configure_logging("ERROR")
        assert logger.level == logging.ERROR
        assert len(logger.handlers) == 1
