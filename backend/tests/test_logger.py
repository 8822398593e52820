# backend/tests/test_logger.py

import importlib
import logging
from logging.handlers import RotatingFileHandler

from roadtrip.core import logger as logger_module
from roadtrip.core.config_loader import settings


def test_shared_logger_handlers():
    logger = logger_module.logger

    assert logger.name == "roadtrip_planner"
    file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    consoles = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert len(file_handlers) == 1
    assert len(consoles) == 1
    assert consoles[0].level == logging.getLevelName(settings.log_level.upper())


def test_import_is_silent_and_idempotent(caplog):
    caplog.set_level(logging.DEBUG, logger="roadtrip_planner")
    before = list(logger_module.logger.handlers)

    importlib.reload(logger_module)

    assert [r for r in caplog.records if r.name == "roadtrip_planner"] == []
    assert logger_module.logger.handlers == before
