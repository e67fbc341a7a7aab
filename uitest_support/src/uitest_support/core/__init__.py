"""Core infrastructure for uitest-support."""

from uitest_support.core.config import Config
from uitest_support.core.exceptions import (
    UITestSupportError,
    ElementNotFound,
    MisuseError,
    ReportStorageError,
    ValidationError,
)

__all__ = [
    "Config",
    "UITestSupportError",
    "ElementNotFound",
    "MisuseError",
    "ReportStorageError",
    "ValidationError",
]
