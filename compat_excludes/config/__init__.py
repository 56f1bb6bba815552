"""Configuration module for compat-excludes."""

from compat_excludes.config.settings import ExcludesSettings, load_config

__all__ = ["ExcludesSettings", "load_config"]
