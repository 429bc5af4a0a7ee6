import logging
from pathlib import Path

from hkprobes.utils.logging_utils import setup_logger


def test_default_logger_covers_package_modules():
    logger = setup_logger()
    assert logger.name == "hkprobes"
    assert logger.level == logging.INFO
    assert logging.getLogger("hkprobes.selection.variability").getEffectiveLevel() == logging.INFO


def test_verbose_forces_debug_on_logger_and_handlers():
    logger = setup_logger("hkprobes.test_verbose", level=logging.WARNING, verbose=True)
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)


def test_repeated_setup_replaces_handlers(tmp_path: Path):
    name = "hkprobes.test_replace"
    setup_logger(name)
    logger = setup_logger(name, log_file=tmp_path / "nested" / "run.log")

    assert len(logger.handlers) == 2
    logger.info("written")
    for handler in logger.handlers:
        handler.flush()
    assert "written" in (tmp_path / "nested" / "run.log").read_text()


def test_file_only_logger(tmp_path: Path):
    logger = setup_logger("hkprobes.test_file_only", console=False, log_file=tmp_path / "run.log")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.FileHandler)
