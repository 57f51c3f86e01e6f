"""
Configuration - environment variables for SkinHub.

Values are read once at import. A local `.env` file is loaded first so
development setups do not need exported variables.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    """Read a positive integer env var, falling back to default on bad input."""
    raw = os.environ.get(name, "")
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# Upstash Redis (cart snapshots). Empty = in-memory carts only.
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

CART_KEY_PREFIX = os.environ.get("CART_KEY_PREFIX", "skinhub-cart")
CART_TTL_SECONDS = _int_env("CART_TTL_SECONDS", 7 * 24 * 3600)

# Catalog display policy
CURATED_LIST_LIMIT = _int_env("CURATED_LIST_LIMIT", 8)
PRODUCTS_PER_PAGE = _int_env("PRODUCTS_PER_PAGE", 20)

# Optional JSON file with the product collection
CATALOG_PATH = os.environ.get("CATALOG_PATH", "")

CURRENCY_LABEL = os.environ.get("CURRENCY_LABEL", "Rs.")


def redis_configured() -> bool:
    """True when both Upstash credentials are present."""
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)
