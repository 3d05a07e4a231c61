import logging

from vicsek.logging_config import setup_logging


def test_setup_logging_is_idempotent():
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG)

    assert logger.name == "vicsek"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "run.log"
    logger = setup_logging(logging.INFO, log_file=str(log_file))
    logging.getLogger("vicsek.model.borders").info("edge hit")

    for handler in logger.handlers:
        handler.flush()
    assert len(logger.handlers) == 2
    assert "edge hit" in log_file.read_text(encoding="utf-8")

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
