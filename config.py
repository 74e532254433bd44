import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./subscriptions.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Cancellation guard: days that must separate "today" from the next cycle
    MINIMUM_CANCELLATION_NOTICE_DAYS = data.get("MINIMUM_CANCELLATION_NOTICE_DAYS", 1)

    # Subscription processor worker
    PROCESSOR_ENABLED = bool(data.get("PROCESSOR_ENABLED", True))
    PROCESSOR_INTERVAL_SECONDS = data.get("PROCESSOR_INTERVAL_SECONDS", 3600)  # Hourly
