from .loader import CaneflowConfig, ConfigError, default_config, load_config

__all__ = ["CaneflowConfig", "ConfigError", "default_config", "load_config"]
