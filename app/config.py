"""Configuration management using environment variables"""
import logging
import os
from dotenv import load_dotenv
from app.domain.messages import MAX_CAROUSEL_BUBBLES

# Load environment variables from .env file
load_dotenv()

# Development placeholder for secrets (not secure - for local testing only)
DEV_SECRET_PLACEHOLDER = "test_secret_dev"

# Names accepted by BOT_PROFILE (see app.rules.PROFILES)
BOT_PROFILES = ("bali", "store")

logger = logging.getLogger(__name__)


def _get_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings - YAGNI: Only what we need right now"""

    def __init__(self):
        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development")

        # LINE Messaging API credentials
        if self.environment == "production":
            self.line_channel_secret = self._get_required("LINE_CHANNEL_SECRET")
            self.line_channel_access_token = self._get_required("LINE_CHANNEL_ACCESS_TOKEN")

            # Reject test secrets in production
            if self.line_channel_secret == DEV_SECRET_PLACEHOLDER:
                raise ValueError(
                    f"Cannot use test secret '{DEV_SECRET_PLACEHOLDER}' in production mode. "
                    "Set a real LINE_CHANNEL_SECRET from the LINE Developers console."
                )
        else:
            # Development mode: Load from .env file (never commit secrets to git)
            self.line_channel_secret = os.getenv("LINE_CHANNEL_SECRET", DEV_SECRET_PLACEHOLDER)
            self.line_channel_access_token = os.getenv("LINE_CHANNEL_ACCESS_TOKEN", "")

            if self.line_channel_secret == DEV_SECRET_PLACEHOLDER:
                logger.warning(
                    "⚠️  Using default LINE_CHANNEL_SECRET - signature validation will fail with real LINE webhooks"
                )

            self._warn_missing_credentials()

        # Which rule set answers the conversation: "bali" (real estate) or "store" (catalog demo)
        self.bot_profile = os.getenv("BOT_PROFILE", "bali").strip().lower()
        if self.bot_profile not in BOT_PROFILES:
            raise ValueError(
                f"Invalid BOT_PROFILE '{self.bot_profile}'. Choose one of: {', '.join(BOT_PROFILES)}"
            )

        # Airtable (property listings)
        self.airtable_api_key = os.getenv("AIRTABLE_API_KEY", "")
        self.airtable_base_id = os.getenv("AIRTABLE_BASE_ID", "")
        self.airtable_table_name = os.getenv("AIRTABLE_TABLE_NAME", "Properties")
        self.airtable_fallback_table_name = os.getenv("AIRTABLE_FALLBACK_TABLE_NAME", "不動産")
        # One carousel bubble per listing
        self.airtable_max_records = min(max(int(os.getenv("AIRTABLE_MAX_RECORDS", "10")), 1), MAX_CAROUSEL_BUBBLES)
        self.airtable_timeout = float(os.getenv("AIRTABLE_TIMEOUT", "10.0"))  # seconds

        # Property lookup behaviour
        self.property_lookup_diagnostics = _get_bool("PROPERTY_LOOKUP_DIAGNOSTICS", True)
        # Substitute sample listings when Airtable rejects our credentials (demo only)
        self.property_demo_fallback = _get_bool("PROPERTY_DEMO_FALLBACK", False)

        # Server configuration
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "3000"))

        # Public base URL used to qualify static image paths (/images/...)
        self.base_url = os.getenv("BASE_URL", f"http://localhost:{self.port}").rstrip("/")

        # External booking form for the inspection card
        self.google_form_url = os.getenv("GOOGLE_FORM_URL", "") or "https://forms.google.com"

        self.placeholder_image_url = os.getenv(
            "PLACEHOLDER_IMAGE_URL",
            "https://via.placeholder.com/600x390?text=No+Image"
        )

        # Optional cache-busting token appended to static image URLs (e.g. deploy version)
        self.image_version = os.getenv("IMAGE_VERSION", "")

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def airtable_enabled(self) -> bool:
        return bool(self.airtable_api_key and self.airtable_base_id)

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key, "").strip()
        if not value:
            raise ValueError(
                f"Missing required environment variable: {key}. "
                f"Required in production mode."
            )
        return value

    def _warn_missing_credentials(self) -> None:
        """Warn about missing credentials in development mode."""
        required_credentials = {
            "LINE_CHANNEL_ACCESS_TOKEN": "Required to send replies. Without it replies are only logged (dry-run).",
            "AIRTABLE_API_KEY": "Required for property listings. Create a personal access token at https://airtable.com/create/tokens",
            "AIRTABLE_BASE_ID": "Required for property listings. The base ID starts with 'app'.",
        }

        missing = [
            f"{key} - {desc}"
            for key, desc in required_credentials.items()
            if not os.getenv(key, "").strip()
        ]

        if missing:
            logger.warning(
                "⚠️  Missing configuration - some features are disabled until these are set:\n" +
                "\n".join(f"  - {config}" for config in missing) +
                "\n\nCopy .env.example to .env and fill in your credentials."
            )


# Global settings instance
settings = Settings()
