"""Configuration system for the discovery service."""

from .loader import (
    DEFAULT_CONFIG_PATH,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
    load_config_from_env,
    load_config_from_yaml,
    list_profiles,
    CacheConfig,
    DiscoveryConfig,
    OpenAlexConfig,
    ScoringConfig,
    SemanticScholarConfig,
)
from .factory import (
    create_cache,
    create_discovery_service,
    create_openalex,
    create_semantic_scholar,
)

__all__ = [
    # Loader
    "DEFAULT_CONFIG_PATH",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
    "load_config_from_env",
    "load_config_from_yaml",
    "list_profiles",
    "CacheConfig",
    "DiscoveryConfig",
    "OpenAlexConfig",
    "ScoringConfig",
    "SemanticScholarConfig",
    # Factory
    "create_cache",
    "create_discovery_service",
    "create_openalex",
    "create_semantic_scholar",
]
