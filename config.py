from dotenv import load_dotenv
import os

load_dotenv()


def _engine_options(uri):
    # Pool and SSL settings only make sense for the hosted PostgreSQL instance
    if not uri or not uri.startswith("postgresql"):
        return {}
    return {
        'pool_pre_ping': True,  # Test connection before use
        'pool_recycle': 300,    # Recycle connections every 5 minutes
        'pool_size': 5,
        'max_overflow': 10,
        'pool_timeout': 30,
        'connect_args': {
            'sslmode': os.getenv("DB_SSLMODE", "require"),
            'connect_timeout': 10,
        }
    }


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///cafe.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "12"))

    # Daily voting cycle
    CAFE_TIMEZONE = os.getenv("CAFE_TIMEZONE", "Asia/Riyadh")
    CAFE_CUTOFF_HOUR = int(os.getenv("CAFE_CUTOFF_HOUR", "18"))

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOG_LEVEL = "WARNING"
    ADMIN_EMAIL = None
    ADMIN_PASSWORD = None
