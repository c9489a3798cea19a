from env.env import (
    ConfigError,
    Environment,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from env.paths import app_home, config_dir

__all__ = [
    "Environment",
    "get_env",
    "reset_env_caches",
    "get_logging_env",
    "ConfigError",
    "app_home",
    "config_dir",
]
