"""Utilities package for the perfumery manufacturing tracker."""

from .config import Config, get_config, reset_config
from .datetime_utils import utc_now, today_local

__all__ = [
    "Config",
    "get_config",
    "reset_config",
    "utc_now",
    "today_local",
]
