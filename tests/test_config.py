"""
Tests for configuration and structured logging
"""

import json
import logging

from eon_ledger import config as config_module
from eon_ledger.config import LedgerConfig, get_config, reload_config
from eon_ledger.logging_config import JSONFormatter, configure_logging, setup_logging, log_action


class TestLedgerConfig:

    def test_defaults(self):
        config = LedgerConfig(_env_file=None)
        assert config.token_name == "Eon"
        assert config.token_symbol == "EON"
        assert config.storage_backend == "memory"
        assert config.enable_testing_operations is False
        assert config.validate_issue_amount is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("EON_ENABLE_TESTING_OPERATIONS", "true")
        monkeypatch.setenv("EON_TOKEN_SYMBOL", "XEON")
        config = LedgerConfig(_env_file=None)
        assert config.enable_testing_operations is True
        assert config.token_symbol == "XEON"

    def test_reload_replaces_global(self, monkeypatch):
        original = get_config()
        monkeypatch.setenv("EON_LOG_LEVEL", "DEBUG")
        try:
            reloaded = reload_config()
            assert get_config() is reloaded
            assert reloaded.log_level == "DEBUG"
        finally:
            config_module.config = original


class TestStructuredLogging:

    def test_json_formatter_includes_structured_fields(self):
        record = logging.LogRecord("eon.token", logging.INFO, __file__, 1, "Minted", (), None)
        record.caller = "ab" * 20
        record.action = "issue"
        payload = json.loads(JSONFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "eon.token"
        assert payload["message"] == "Minted"
        assert payload["caller"] == "ab" * 20
        assert payload["action"] == "issue"
        assert "resource" not in payload

    def test_setup_logging_replaces_handlers(self):
        logger = setup_logging("WARNING", logger_name="eon.test")
        logger = setup_logging("DEBUG", logger_name="eon.test", fmt="text")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_log_action_attaches_fields(self, caplog):
        logger = logging.getLogger("eon.capture")
        with caplog.at_level(logging.WARNING, logger="eon.capture"):
            log_action(logger, "warning", "Rejected transfer", caller="c", action="transfer",
                       extra={"amount": "1.00000000"})
        record = caplog.records[0]
        assert record.action == "transfer"
        assert record.caller == "c"
        assert record.extra == {"amount": "1.00000000"}
        assert not hasattr(record, "resource")

    def test_configure_logging_applies_config(self):
        settings = LedgerConfig(log_level="DEBUG", log_format="text", _env_file=None)
        logger = configure_logging(settings)
        try:
            assert logger.name == "eon"
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 1
            assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
            assert logger.propagate is False
        finally:
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
            logger.propagate = True
