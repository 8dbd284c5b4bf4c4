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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./tenant_access.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    UPSTREAM_API_URL = data.get("UPSTREAM_API_URL", "http://localhost:3001/api")
    UPSTREAM_TIMEOUT_SECONDS = float(data.get("UPSTREAM_TIMEOUT_SECONDS", 10))
    CORE_TENANT_ID = data.get("CORE_TENANT_ID", "core")
    CORE_TENANT_SLUG = data.get("CORE_TENANT_SLUG", "system-core")
    CORE_TENANT_NAME = data.get("CORE_TENANT_NAME", "System Core")
    ROUTE_GUARD_FALLBACK_PATH = data.get("ROUTE_GUARD_FALLBACK_PATH", "/dashboard")
    LOGIN_PATH = data.get("LOGIN_PATH", "/login")
    EVENT_OUTBOX_SIZE = int(data.get("EVENT_OUTBOX_SIZE", 50))
