# tests/test_logging.py
import logging

import logging_setup  # top-level module

LOGGER_NAME = logging_setup.LOGGER_NAME


def _attach_caplog(caplog):
    """Attach caplog.handler to our named logger (propagate=False means root won't see it)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(caplog.handler)
    return logger


def test_logger_includes_context_messages(caplog):
    logging_setup.setup_logging(verbosity=1)  # INFO
    log = logging_setup.get_logger(course_id="2410", artifact="files")

    logger = _attach_caplog(caplog)
    try:
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log.info("export started")
    finally:
        logger.removeHandler(caplog.handler)

    assert any(r.message == "export started" for r in caplog.records)
    assert any(getattr(r, "course_id", None) == "2410" for r in caplog.records)
    assert any(getattr(r, "artifact", None) == "files" for r in caplog.records)


def test_default_context_filter_unit():
    f = logging_setup.DefaultContextFilter()
    record = logging.LogRecord(
        name=LOGGER_NAME,
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="no extras",
        args=(),
        exc_info=None,
    )
    assert f.filter(record) is True
    assert getattr(record, "course_id") == "-"
    assert getattr(record, "artifact") == "-"


def test_reserved_extra_keys_are_renamed(caplog):
    logging_setup.setup_logging(verbosity=2)
    log = logging_setup.get_logger(artifact="users")

    logger = _attach_caplog(caplog)
    try:
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            log.debug("fetched", extra={"filename": "a.png", "user_id": 7})
    finally:
        logger.removeHandler(caplog.handler)

    rec = next(r for r in caplog.records if r.message == "fetched")
    assert rec.meta_filename == "a.png"
    assert rec.user_id == 7
    assert rec.course_id == "-"


def test_verbosity_levels():
    logging_setup.setup_logging(verbosity=0)
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING
    logging_setup.setup_logging(verbosity=2)
    assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
    logging_setup.setup_logging(verbosity=1)
    assert logging.getLogger(LOGGER_NAME).level == logging.INFO


def test_message_extra_is_renamed_and_quiet_floor(caplog):
    logging_setup.setup_logging(verbosity=-1)
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    logging_setup.setup_logging(verbosity=1)
    log = logging_setup.get_logger(artifact="messages", course_id=5)
    logger = _attach_caplog(caplog)
    try:
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log.info("wrote message", extra={"message": "hi", "page": 2})
    finally:
        logger.removeHandler(caplog.handler)

    rec = next(r for r in caplog.records if r.message == "wrote message")
    assert rec.meta_message == "hi"
    assert rec.page == 2
    assert rec.course_id == 5
