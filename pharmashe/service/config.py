# pharmashe/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

from pathlib import Path
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'PHARMASHE_') or .env file.
    The Gemini key is also read from a plain GEMINI_API_KEY variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="PHARMASHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("PHARMASHE_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="API key for the Gemini API. Never sent to the browser.",
    )

    gemini_model: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model used for drug analyses.",
    )

    default_context: str = Field(
        default="women's health analysis",
        description="Analysis context used when the caller does not supply one.",
    )

    # External services
    openfda_base_url: str = Field(
        default="https://api.fda.gov/drug/drugsfda.json",
        description="Drugs@FDA endpoint.",
    )

    openfda_limit: int = Field(
        default=99,
        ge=1,
        le=99,
        description="Maximum number of application records per openFDA search.",
    )

    dictionary_base_url: str = Field(
        default="https://api.dictionaryapi.dev/api/v2/entries/en",
        description="Free Dictionary API entries endpoint.",
    )

    request_timeout: float = Field(
        default=15.0,
        gt=0.0,
        description="Timeout in seconds for openFDA and dictionary requests.",
    )

    # Definition lookup limits
    max_definitions: int = Field(
        default=3, ge=1, description="Maximum definitions shown for a term."
    )

    max_definitions_per_group: int = Field(
        default=2,
        ge=1,
        description="Maximum definitions kept per part of speech.",
    )

    # Input and storage
    max_drugs: int = Field(
        default=10, ge=1, le=50, description="Maximum drugs in one analysis."
    )

    profile_path: Path = Field(
        default=Path.home() / ".pharmashe" / "profile.json",
        description="Local file holding the user's health profile.",
    )

    log_level: str = Field(default="INFO", description="Root logging level.")

    @field_validator("gemini_model")
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Ensure model name is not empty."""
        if not v.strip():
            raise ValueError("Gemini model name cannot be empty")
        return v.strip()

    @field_validator("gemini_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("openfda_base_url", "dictionary_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Service URL cannot be empty")
        return v.strip().rstrip("/")


# Singleton settings instance
settings = Settings()
