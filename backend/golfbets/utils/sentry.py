import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from ..config import _env_float

logger = logging.getLogger(__name__)

SERVICE_NAME = "golfbets-api"


def _sample_rate(env_var: str) -> float:
    value = _env_float(env_var, 0.0)
    if not 0.0 <= value <= 1.0:
        logger.warning("%s must be between 0 and 1 (got %s); sampling disabled", env_var, value)
        return 0.0
    return value


def init_sentry() -> bool:
    """Configure Sentry from ``SENTRY_*`` variables; return whether it is on."""

    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        logger.info("SENTRY_DSN not provided; skipping Sentry initialization.")
        return False

    environment = (os.getenv("SENTRY_ENVIRONMENT") or "").strip() or None
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FastApiIntegration()],
        environment=environment,
        server_name=SERVICE_NAME,
        traces_sample_rate=_sample_rate("SENTRY_TRACES_SAMPLE_RATE"),
        profiles_sample_rate=_sample_rate("SENTRY_PROFILES_SAMPLE_RATE"),
    )
    logger.info(
        "Initialized Sentry%s",
        f" (environment={environment})" if environment else "",
    )
    return True
