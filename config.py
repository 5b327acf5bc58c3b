import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./recovery_register.db")
    AUTO_CREATE_SCHEMA = bool(data.get("AUTO_CREATE_SCHEMA", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Deployment environment, equivalent of NODE_ENV. Anything other than
    # "development" or "test" is treated as production.
    ENVIRONMENT = data.get("ENVIRONMENT", "production")
    DEV_ADMIN_BYPASS = bool(data.get("DEV_ADMIN_BYPASS", False))

    # The fallback is refused by AuthSettings when ENVIRONMENT is production
    SESSION_SECRET = data.get("SESSION_SECRET", "dev-session-secret-change-in-production")
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "recovery_session")
    SESSION_TTL_SECONDS = int(data.get("SESSION_TTL_SECONDS", 24 * 60 * 60))
    SESSION_COOKIE_SECURE = data.get("SESSION_COOKIE_SECURE")
    SESSION_COOKIE_SAMESITE = data.get("SESSION_COOKIE_SAMESITE", "lax")
    SESSION_COOKIE_DOMAIN = data.get("SESSION_COOKIE_DOMAIN")

    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    MIN_PSEUDONYM_LENGTH = int(data.get("MIN_PSEUDONYM_LENGTH", 2))
    MAX_PSEUDONYM_LENGTH = int(data.get("MAX_PSEUDONYM_LENGTH", 20))
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 6))
    STRICT_PASSWORD_MIN_LENGTH = int(data.get("STRICT_PASSWORD_MIN_LENGTH", 8))
    PASSWORD_REQUIRE_NUMBER = bool(data.get("PASSWORD_REQUIRE_NUMBER", False))
    PASSWORD_REQUIRE_SPECIAL_CHAR = bool(data.get("PASSWORD_REQUIRE_SPECIAL_CHAR", False))
    PASSWORD_REQUIRE_UPPERCASE = bool(data.get("PASSWORD_REQUIRE_UPPERCASE", False))
    ALLOW_PSEUDONYMOUS_IDENTITY = bool(data.get("ALLOW_PSEUDONYMOUS_IDENTITY", True))
    OAUTH_ENABLED = bool(data.get("OAUTH_ENABLED", False))
