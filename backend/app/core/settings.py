import os


def _get_list(name: str, fallback: str = "") -> list[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


class Settings:
    def __init__(self):
        self.app_name = "OrderDesk"
        self.api_version = "1.0.0"
        self.environment = os.getenv("ORDERDESK_ENVIRONMENT", "development")
        self.database_url = os.getenv("ORDERDESK_DATABASE_URL", "sqlite:///./orderdesk.db")
        self.log_level = os.getenv("ORDERDESK_LOG_LEVEL", "INFO").upper()
        self.cors_origins = _get_list("ORDERDESK_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
        # Adding an item to an order in one of these statuses derives its tasks
        self.derive_tasks_on_add_statuses = _get_list("ORDERDESK_DERIVE_ON_ADD_STATUSES", "pending,processing")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
