"""Utility functions for the housekeeping probe selection pipeline."""

from .config import Config, load_config
from .logging_utils import setup_logger

__all__ = ["Config", "load_config", "setup_logger"]
