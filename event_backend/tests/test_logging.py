import logging

import pytest

from src.api.logging_config import APP_LOGGER, setup_logging


@pytest.fixture
def logger_name(request):
    name = f"event-calendar-test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestSetupLogging:
    def test_service_modules_log_under_the_configured_logger(self):
        assert logging.getLogger(APP_LOGGER).handlers
        assert logging.getLogger("src.api.services").getEffectiveLevel() <= logging.INFO

    def test_level_is_case_insensitive(self, logger_name):
        logger = setup_logging("debug", logger_name=logger_name)
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info_with_warning(self, logger_name, caplog):
        logger = setup_logging("chatty", logger_name=logger_name)
        assert logger.level == logging.INFO
        assert "Unknown LOG_LEVEL 'chatty'" in caplog.text

    def test_repeated_setup_does_not_duplicate_handlers(self, logger_name, tmp_path):
        logfile = tmp_path / "events.log"
        setup_logging("INFO", str(logfile), logger_name=logger_name)
        logger = setup_logging("WARNING", str(logfile), logger_name=logger_name)
        assert len(logger.handlers) == 2
        assert logger.level == logging.WARNING

    def test_file_handler_writes_formatted_records(self, logger_name, tmp_path):
        logfile = tmp_path / "logs" / "events.log"
        logger = setup_logging("INFO", str(logfile), logger_name=logger_name)
        logger.info("Created event 7")
        line = logfile.read_text(encoding="utf-8").strip()
        assert line.endswith(f"[INFO] {logger_name}: Created event 7")
