"""Configuration loader with Pydantic validation and env var expansion."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from ..settings import (
    DISCOVERY_CONFIG_PATH,
    DISCOVERY_PROFILE,
    OPENALEX_BASE_URL,
    OPENALEX_MAILTO,
    REQUEST_TIMEOUT_SECONDS,
    SEMANTIC_SCHOLAR_API_KEY,
    SEMANTIC_SCHOLAR_BASE_URL,
)
from ..transport import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "profiles.yaml"

_UNRESOLVED = re.compile(r"\$\{[^}]+\}")

USER_AGENT = "PaperDiscovery/1.0"

PREFERRED_VENUES = [
    "IEEE",
    "ACM",
    "Springer",
    "Elsevier",
    "USENIX",
    "NDSS",
    "CCS",
    "WWW",
    "ICSE",
    "SOSP",
]


class SemanticScholarConfig(BaseModel):
    """Configuration for the primary provider."""

    base_url: str = SEMANTIC_SCHOLAR_BASE_URL
    api_key: str | None = SEMANTIC_SCHOLAR_API_KEY
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    candidate_limit: int = Field(20, ge=1, le=100)
    query_suffix: str = "computing technology"
    requests_per_second: float | None = None  # Client-side throttle, off by default
    user_agent: str = USER_AGENT
    retry: RetryPolicy = RetryPolicy()


class OpenAlexConfig(BaseModel):
    """Configuration for the secondary (top-up) provider."""

    base_url: str = OPENALEX_BASE_URL
    mailto: str | None = OPENALEX_MAILTO
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    candidate_limit: int = Field(15, ge=1, le=200)
    query_suffix: str = "computing"
    user_agent: str = USER_AGENT
    retry: RetryPolicy = RetryPolicy(max_retries=0)


class ScoringConfig(BaseModel):
    """Relevance scoring rules.

    The thresholds are tuning constants; the reference-count band in
    particular is a rough proxy for paper length.
    """

    preferred_venues: list[str] = Field(default_factory=lambda: list(PREFERRED_VENUES))
    recent_year: int = 2019
    long_abstract_chars: int = 300
    reference_count_range: tuple[int, int] = (10, 60)

    venue_weight: int = 10
    recency_weight: int = 5
    direct_link_weight: int = 3
    long_abstract_weight: int = 2
    reference_count_weight: int = 2

    @model_validator(mode="after")
    def _check_range(self) -> "ScoringConfig":
        low, high = self.reference_count_range
        if low > high:
            raise ValueError("reference_count_range must be (low, high) with low <= high")
        return self


class CacheConfig(BaseModel):
    """Optional topic-keyed result cache."""

    enabled: bool = False
    ttl_seconds: float = Field(300.0, gt=0)
    max_entries: int = Field(256, ge=1)


class DiscoveryConfig(BaseModel):
    """Everything the discovery service needs, passed in at construction."""

    semantic_scholar: SemanticScholarConfig = SemanticScholarConfig()
    openalex: OpenAlexConfig = OpenAlexConfig()
    scoring: ScoringConfig = ScoringConfig()
    cache: CacheConfig = CacheConfig()
    max_results: int = Field(5, ge=1)
    min_abstract_chars: int = Field(100, ge=0)
    default_venue: str = "IEEE"


class ConfigFile(BaseModel):
    """Root configuration file structure."""

    profiles: dict[str, DiscoveryConfig]


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} references in string with environment variables.

    Args:
        value: String potentially containing env var references

    Returns:
        String with env vars expanded; unknown variables are left untouched
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}]+)\}"

    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replacer, value)


def expand_env_vars_recursive(data):
    """Recursively expand env vars in nested dict/list structures.

    A value that is nothing but an unset ``${VAR}`` becomes None, so optional
    secrets can be referenced without being required.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        expanded = expand_env_vars(data)
        if _UNRESOLVED.fullmatch(expanded):
            return None
        return expanded
    else:
        return data


def list_profiles(config_path: Path = DEFAULT_CONFIG_PATH) -> dict[str, DiscoveryConfig]:
    """Load and validate every profile in a YAML config file."""
    with open(config_path) as f:
        raw_data = yaml.safe_load(f) or {}

    expanded_data = expand_env_vars_recursive(raw_data)
    return ConfigFile(**expanded_data).profiles


def load_config_from_yaml(config_path: Path, profile_name: str) -> DiscoveryConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config YAML file
        profile_name: Name of profile to load

    Returns:
        DiscoveryConfig for the requested profile

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config is invalid
        KeyError: If profile doesn't exist
    """
    profiles = list_profiles(config_path)

    if profile_name not in profiles:
        available = ", ".join(profiles.keys())
        raise KeyError(
            f"Profile '{profile_name}' not found. Available profiles: {available}"
        )

    return profiles[profile_name]


def load_config_from_env() -> DiscoveryConfig:
    """Build configuration from environment variables and defaults only."""
    return DiscoveryConfig()


def load_config(
    profile: str | None = None,
    config_path: Path | None = None,
) -> DiscoveryConfig:
    """Load configuration from YAML file or environment variables.

    Args:
        profile: Profile name to load. If None, uses DISCOVERY_PROFILE env var
                or "default".
        config_path: Path to config file. If None, uses DISCOVERY_CONFIG_PATH
                or the profiles.yaml shipped next to this module.

    Returns:
        DiscoveryConfig for the selected profile

    Raises:
        ValidationError: If configuration is invalid
        KeyError: If requested profile doesn't exist
    """
    if profile is None:
        profile = DISCOVERY_PROFILE

    if config_path is None:
        config_path = Path(DISCOVERY_CONFIG_PATH) if DISCOVERY_CONFIG_PATH else DEFAULT_CONFIG_PATH

    if config_path.exists():
        return load_config_from_yaml(config_path, profile)

    logger.warning(f"Config file {config_path} not found, using environment variables")
    return load_config_from_env()
