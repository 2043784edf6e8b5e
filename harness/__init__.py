"""Harness package exports."""

from harness.config import get_settings
from harness.sanitizer import Sanitizer

__all__ = ["Sanitizer", "get_settings"]
