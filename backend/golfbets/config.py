import logging
import os

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _env_float(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return float(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid float (got %r); defaulting to %s",
            env_var,
            raw_value,
            default,
        )
        return default


def _handicap_mode(val):
    val = (val or "lowest").strip().lower()
    if val not in ("lowest", "gross"):
        logger.warning("Unknown DEFAULT_HANDICAP_MODE %r; using 'lowest'", val)
        return "lowest"
    return val


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

DEFAULT_HANDICAP_MODE = _handicap_mode(os.getenv("DEFAULT_HANDICAP_MODE"))
DEFAULT_JUNK_POINT_VALUE = _env_float("DEFAULT_JUNK_POINT_VALUE", 1.0)
LIVE_RESULTS_CACHE_TTL = _env_float("LIVE_RESULTS_CACHE_TTL", 300.0)
SHARE_CODE_LENGTH = int(_env_float("SHARE_CODE_LENGTH", 6))
