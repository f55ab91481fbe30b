"""Structured logging."""

from signal_fusion.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
