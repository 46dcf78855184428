"""
Storage Layer.

This package handles reading and writing the configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
