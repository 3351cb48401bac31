import os


def normalize_database_url(raw_url: str) -> str:
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    return raw_url


def _payment_rate_limit():
    per_ip = int(os.getenv("PAYMENT_RATE_LIMIT_PER_IP", "10"))
    window = int(os.getenv("PAYMENT_RATE_LIMIT_WINDOW_MINUTES", "60"))
    return f"{per_ip} per {window} minutes"


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-unsafe-key")
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.getenv("DATABASE_URL", "sqlite:///instance/getaway.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": int(os.getenv("DATABASE_POOL_TIMEOUT", "10")),
    }
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "120"))
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per day;80 per hour")
    SENTRY_DSN = os.getenv("SENTRY_DSN")

    RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")
    RAZORPAY_API_BASE = os.getenv("RAZORPAY_API_BASE", "https://api.razorpay.com/v1")
    RAZORPAY_TIMEOUT_SECONDS = float(os.getenv("RAZORPAY_TIMEOUT_SECONDS", "10"))

    PAYMENT_ENV = os.getenv("PAYMENT_ENV", os.getenv("FLASK_ENV", "development"))
    PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "INR")
    PAYMENT_MIN_AMOUNT = int(os.getenv("PAYMENT_MIN_AMOUNT", "500"))
    PAYMENT_MAX_AMOUNT = int(os.getenv("PAYMENT_MAX_AMOUNT", "500000"))
    # Floor applied in every environment except development.
    PAYMENT_LIVE_MIN_AMOUNT = int(os.getenv("PAYMENT_LIVE_MIN_AMOUNT", "100"))
    PAYMENT_RATE_LIMIT = _payment_rate_limit()

    COMPANY_NAME = os.getenv("COMPANY_NAME", "Getaway Vibe")
    COMPANY_EMAIL = os.getenv("COMPANY_EMAIL", "info@getawayvibe.com")
    COMPANY_PHONE = os.getenv("COMPANY_PHONE", "+91-9876543210")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CACHE_TYPE = "NullCache"
    RATELIMIT_ENABLED = False
    PAYMENT_ENV = "testing"
    RAZORPAY_KEY_ID = "rzp_test_key"
    RAZORPAY_KEY_SECRET = "rzp_test_secret"


config_by_env = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
