"""
Calendar configuration
"""
import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Calendar settings"""

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Notifications
    SNOOZE_MINUTES: float = float(os.getenv("SNOOZE_MINUTES", "5"))
    # "cancel" replaces an armed timer on edit/delete, "duplicate" never does
    RESCHEDULE_POLICY: str = os.getenv("RESCHEDULE_POLICY", "cancel")
    NOTIFY_AUTO_GRANT: bool = _env_flag("NOTIFY_AUTO_GRANT", "true")

    # Service
    CALENDAR_SERVICE_URL: str = os.getenv("CALENDAR_SERVICE_URL", "http://localhost:8004")


settings = Settings()
