"""
Configuration loading for envtestkit.
"""

from .settings import EnvtestConfig, load_config, load_yaml_config

__all__ = ["EnvtestConfig", "load_config", "load_yaml_config"]
