"""Health-check payload for the API."""

from backend.config import get_settings


def get_health_status() -> dict:
    """Return the service name with a static ok status; the engine has no dependencies to probe."""
    return {"status": "ok", "service": get_settings().service_name}
