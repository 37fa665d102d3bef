import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///books_service.db"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Tokens are minted by the upstream gateway with the same secret
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_IDENTITY_CLAIM = os.getenv("JWT_IDENTITY_CLAIM", "sub")
    JWT_ROLE_CLAIM = os.getenv("JWT_ROLE_CLAIM", "role")
    ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")

    # Equivalent of "create tables on boot"; turn off once migrations are managed with `flask db`
    AUTO_CREATE_SCHEMA = _flag("AUTO_CREATE_SCHEMA", "1")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    AUTO_CREATE_SCHEMA = True
    LOG_LEVEL = "DEBUG"
