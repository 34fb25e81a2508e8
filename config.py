import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to app.py as trainerbooking.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "trainerbooking.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Cookie security defaults (csrf cookie)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False  # set True when using HTTPS

    # Double-submit CSRF check on POST/PUT/PATCH/DELETE
    CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"

    # Working window used for free-gap computation in the day view
    WORKING_DAY_START = os.getenv("WORKING_DAY_START", "06:00")
    WORKING_DAY_END = os.getenv("WORKING_DAY_END", "22:00")

    # Whether "selected bookings overlap each other" alone needs an override
    BULK_SELF_OVERLAP_BLOCKS = os.getenv("BULK_SELF_OVERLAP_BLOCKS", "true").lower() == "true"

    # Max sessions a single counter adjustment may move
    COUNTER_DELTA_LIMIT = int(os.getenv("COUNTER_DELTA_LIMIT", "5"))

    # Calendar feed includes bookings from this many days back
    CALENDAR_FEED_LOOKBACK_DAYS = int(os.getenv("CALENDAR_FEED_LOOKBACK_DAYS", "7"))

    # Booking defaults
    DEFAULT_SESSION_MINUTES = int(os.getenv("DEFAULT_SESSION_MINUTES", "60"))
    DEFAULT_SESSION_TYPE = os.getenv("DEFAULT_SESSION_TYPE", "Training")

    # WhatsApp Cloud API (booking confirmations); test mode only logs
    WHATSAPP_API_KEY = os.getenv("WHATSAPP_API_KEY")
    WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID")
    WHATSAPP_API_BASE = os.getenv("WHATSAPP_API_BASE", "https://graph.facebook.com/v20.0")
    WHATSAPP_TEST_MODE = os.getenv("WHATSAPP_TEST_MODE", "true").lower() == "true"
    WHATSAPP_TIMEOUT_SECONDS = int(os.getenv("WHATSAPP_TIMEOUT_SECONDS", "10"))

    # Demo data (flask seed-demo)
    DEMO_SEED = int(os.getenv("DEMO_SEED", "42"))

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    CSRF_ENABLED = False
    WHATSAPP_TEST_MODE = True
