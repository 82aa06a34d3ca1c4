"""
Package: config
Description: Relay configuration loading.
"""

from .settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
