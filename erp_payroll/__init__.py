"""Payroll processing, approval and notification service."""

from .core import get_logger, get_settings

__all__ = ["get_logger", "get_settings"]
