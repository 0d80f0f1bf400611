"""Configuration settings for the paper discovery service."""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

# Logging setup
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)

# Semantic Scholar (primary provider)
SEMANTIC_SCHOLAR_API_KEY = os.getenv("SEMANTIC_SCHOLAR_API_KEY")
SEMANTIC_SCHOLAR_BASE_URL = os.getenv(
    "SEMANTIC_SCHOLAR_BASE_URL", "https://api.semanticscholar.org/graph/v1"
)

# OpenAlex (secondary provider)
# OpenAlex asks for a contact address to route requests into the polite pool.
OPENALEX_BASE_URL = os.getenv("OPENALEX_BASE_URL", "https://api.openalex.org")
OPENALEX_MAILTO = os.getenv("OPENALEX_MAILTO", "research@example.org")

# Profile selection
DISCOVERY_PROFILE = os.getenv("DISCOVERY_PROFILE", "default")
DISCOVERY_CONFIG_PATH = os.getenv("DISCOVERY_CONFIG_PATH")

# Retry settings (primary provider)
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_BASE_DELAY_SECONDS = 0.5
RETRY_MAX_JITTER_SECONDS = 0.3

# Request timeouts
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30.0"))
