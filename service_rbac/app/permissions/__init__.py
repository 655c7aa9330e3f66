"""
Permission providers producing the ordered rule list for the matcher.
"""

from .base import AbstractProvider
from .config_provider import ConfigProvider

__all__ = [
    "AbstractProvider",
    "ConfigProvider",
]
