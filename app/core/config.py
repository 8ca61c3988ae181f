from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required)
    - ATLAS_SSO_URL, ATLAS_APP_CODE, ATLAS_ENCRYPTION_KEY, ATLAS_ENCRYPTION_IV
    - ENCRYPTION_ENABLED, ENCRYPTION_KEY, ENCRYPTION_IV (response encryption)
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str = "SmartClock Attendance"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Geofence settings
    GEOFENCE_ENFORCED: bool = True
    DEFAULT_SITE_RADIUS_M: int = 10

    # Worker local calendar day when the profile has no timezone
    DEFAULT_TIMEZONE: str = "UTC"

    # Daily hours before overtime kicks in
    REGULAR_HOURS_PER_DAY: float = 8.0

    # Site display token (QR) settings
    SITE_TOKEN_SECRET: str = "change_me_site_token_secret_at_least_32_bytes"
    SITE_TOKEN_ALG: str = "HS256"
    SITE_TOKEN_ROTATION_SECONDS: int = 10
    SITE_TOKEN_GRACE_SECONDS: int = 2

    # Display Authentication
    DISPLAY_API_KEY: str = "change_me_display_key"


settings = Settings()
