"""Rate limiting configuration."""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from scanbridge.core.config import settings


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    # Cloud Functions / Cloud Run sit behind Google's front end
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


# Uses Redis if REDIS_URL is set, falls back to memory for a single instance
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["300/minute"],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Scanners share a venue's NAT address, so ingestion limits are generous
RATE_LIMITS = {
    "record_scan": "600/minute",
    "record_error": "120/minute",
    "maintenance": "30/minute",
}
