import logging
from logging.handlers import RotatingFileHandler

from travelling_trip.core.logger import logger, setup_logger


def test_setup_logger_does_not_stack_handlers(tmp_path):
    first = setup_logger("travelling_trip_test", tmp_path / "logs", "warning")
    again = setup_logger("travelling_trip_test", tmp_path / "other", "debug")

    assert again is first
    assert len(first.handlers) == 2
    file_handler = next(h for h in first.handlers if isinstance(h, RotatingFileHandler))
    assert file_handler.level == logging.WARNING
    assert (tmp_path / "logs").is_dir()
    assert not (tmp_path / "other").exists()

    for handler in first.handlers:
        handler.close()


def test_unknown_level_falls_back_to_info(tmp_path):
    log = setup_logger("travelling_trip_level_test", tmp_path, "chatty")
    file_handler = next(h for h in log.handlers if isinstance(h, RotatingFileHandler))
    assert file_handler.level == logging.INFO

    for handler in log.handlers:
        handler.close()


def test_application_logger_name():
    assert logger.name == "travelling_trip"
