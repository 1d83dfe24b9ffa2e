"""Generator configuration loading, validation and JSON round trip."""

from eightsix.configs.loader import (
    ConfigError,
    GeneratorConfig,
    apply_config_json,
    config_to_json,
    load_config,
    random_seed,
    randomized,
    save_config,
)
from eightsix.configs.validators import ConfigFileV1

__all__ = [
    "ConfigError",
    "ConfigFileV1",
    "GeneratorConfig",
    "apply_config_json",
    "config_to_json",
    "load_config",
    "random_seed",
    "randomized",
    "save_config",
]
