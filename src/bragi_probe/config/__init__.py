"""bragi-probe configuration system."""

from bragi_probe.config.loader import find_config_file, load_config
from bragi_probe.config.models import (
    DEFAULT_INDEX_PREFIX,
    EnvironmentEntry,
    HttpConfig,
    ProbeConfig,
    ProbeIdentity,
)

__all__ = [
    "DEFAULT_INDEX_PREFIX",
    "EnvironmentEntry",
    "HttpConfig",
    "ProbeConfig",
    "ProbeIdentity",
    "load_config",
    "find_config_file",
]
