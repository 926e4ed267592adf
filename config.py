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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./payment_links.db")
    DB_BUSY_TIMEOUT_SECONDS = data.get("DB_BUSY_TIMEOUT_SECONDS", 30)  # SQLite only
    AUTO_CREATE_SCHEMA = bool(data.get("AUTO_CREATE_SCHEMA", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Payment links
    PAYMENT_LINK_BASE_URL = data.get("PAYMENT_LINK_BASE_URL", "http://localhost:3000/pay")
    LINK_TOKEN_LENGTH = data.get("LINK_TOKEN_LENGTH", 16)
    DEFAULT_LINK_EXPIRY_HOURS = data.get("DEFAULT_LINK_EXPIRY_HOURS", None)  # None = links never expire by default

    # Authorization gateway
    GATEWAY_MODE = data.get("GATEWAY_MODE", "simulated")  # simulated | http
    GATEWAY_URL = data.get("GATEWAY_URL", "")
    GATEWAY_TIMEOUT_SECONDS = data.get("GATEWAY_TIMEOUT_SECONDS", 8.0)
    GATEWAY_SIMULATED_MIN_DELAY_SECONDS = data.get("GATEWAY_SIMULATED_MIN_DELAY_SECONDS", 1.0)
    GATEWAY_SIMULATED_MAX_DELAY_SECONDS = data.get("GATEWAY_SIMULATED_MAX_DELAY_SECONDS", 3.0)

    # Redemption finalization
    FINALIZE_MAX_ATTEMPTS = data.get("FINALIZE_MAX_ATTEMPTS", 3)
    FINALIZE_RETRY_BACKOFF_SECONDS = data.get("FINALIZE_RETRY_BACKOFF_SECONDS", 0.05)

    # Stale transaction sweeper
    SWEEPER_ENABLED = bool(data.get("SWEEPER_ENABLED", True))
    SWEEPER_INTERVAL_SECONDS = data.get("SWEEPER_INTERVAL_SECONDS", 60)
    STALE_PROCESSING_SECONDS = data.get("STALE_PROCESSING_SECONDS", 300)
