"""Services layer - Configuration and file-level normalization."""

from .nbcommute_config import (
    NbcommuteConfig,
    load_config,
    get_config,
    reset_config_cache,
    write_default_config,
    DEFAULT_CONFIG,
)

from .normalizer_service import NormalizeResult, normalize_file

__all__ = [
    # nbcommute_config
    "NbcommuteConfig",
    "load_config",
    "get_config",
    "reset_config_cache",
    "write_default_config",
    "DEFAULT_CONFIG",
    # normalizer_service
    "NormalizeResult",
    "normalize_file",
]
