"""
Configuration module for the VoltStore backend.

Loads environment variables and validates required settings.
"""
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _clean_credential(raw: str) -> str:
    """Strip whitespace and stray quotes that hosting dashboards tend to add."""
    return raw.strip().strip("'\"").strip()


class Settings:
    """Application settings loaded from environment variables."""

    # Google Gemini API (GEMINI_API_KEY preferred, GOOGLE_API_KEY accepted)
    GEMINI_API_KEY: str = _clean_credential(
        os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
    )
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GENERATION_TIMEOUT_SECONDS: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "15"))

    # Supabase catalog (read-only, publishable key)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")

    # Durable local state (language, exchange rates, suppression window)
    STATE_FILE: str = os.getenv("STATE_FILE", ".voltstore_state.json")

    # Exchange-rate cache
    RATE_CACHE_HOURS: float = float(os.getenv("RATE_CACHE_HOURS", "24"))
    RATE_SUPPRESS_HOURS: float = float(os.getenv("RATE_SUPPRESS_HOURS", "4"))
    RATE_REFRESH_DEBOUNCE_SECONDS: float = float(os.getenv("RATE_REFRESH_DEBOUNCE_SECONDS", "2"))

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def RATE_CACHE_DURATION_MS(self) -> int:
        """Exchange-rate TTL in milliseconds."""
        return int(self.RATE_CACHE_HOURS * 3600 * 1000)

    @property
    def RATE_SUPPRESS_DURATION_MS(self) -> int:
        """Back-off window after the rate quote was rate-limited, in milliseconds."""
        return int(self.RATE_SUPPRESS_HOURS * 3600 * 1000)

    @classmethod
    def validate(cls) -> None:
        """
        Validate that settings are usable.

        A missing Gemini key or Supabase URL is not an error: the engine
        degrades to the deterministic fallback and the default catalog.

        Raises:
            ValueError: If a duration setting is not positive.
        """
        durations = {
            "GENERATION_TIMEOUT_SECONDS": cls.GENERATION_TIMEOUT_SECONDS,
            "RATE_CACHE_HOURS": cls.RATE_CACHE_HOURS,
            "RATE_SUPPRESS_HOURS": cls.RATE_SUPPRESS_HOURS,
        }

        invalid = [key for key, value in durations.items() if value <= 0]

        if invalid:
            raise ValueError(
                f"Settings must be positive: {', '.join(invalid)}. "
                "Please check your .env file."
            )

        if cls.RATE_REFRESH_DEBOUNCE_SECONDS < 0:
            raise ValueError("RATE_REFRESH_DEBOUNCE_SECONDS must not be negative.")

    @classmethod
    def missing_optional(cls) -> list[str]:
        """Names of optional integrations that are not configured."""
        optional_settings = {
            "GEMINI_API_KEY": cls.GEMINI_API_KEY,
            "SUPABASE_URL": cls.SUPABASE_URL,
        }
        return [key for key, value in optional_settings.items() if not value]

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"⚠️  Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise

    if settings.is_development() and settings.missing_optional():
        print(
            f"⚠️  Warning: not configured: {', '.join(settings.missing_optional())}. "
            "Recommendations will use the local fallback selector."
        )
