"""
SmartSpend Settings

Every knob the app reads from the environment (or a local .env file)
lives in this module, one pydantic-settings class per collaborator.

DESIGN DECISION: Optional collaborators are validated lazily.
A missing Gemini key or Sheets credential only disables that feature;
the ledger itself needs nothing but AppSettings, which has defaults
for every field.
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Where the optional Sheets backend keeps the ledger."""
    
    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    credentials_path: str = Field(
        ...,
        description="Service account key file (JSON)"
    )
    spreadsheet_id: str = Field(
        ...,
        min_length=1,
        description="Key of the spreadsheet holding the ledger"
    )
    
    # Worksheet titles; created on first use if absent
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="One row per transaction, newest first"
    )
    settings_sheet_name: str = Field(
        default="Settings",
        description="Key/value rows: balance offset, theme, currency"
    )
    
    @field_validator('credentials_path')
    @classmethod
    def check_credentials_path(cls, v: str) -> str:
        """A missing key file is only a warning; it may be mounted at deploy time."""
        if not Path(v).exists():
            warnings.warn(
                f"Service account key not found at {v}; "
                "the Sheets backend will fail to connect until it exists."
            )
        return v


class GeminiSettings(BaseSettings):
    """Gemini assistant (receipt scan, categorize, insights, chat)."""
    
    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    api_key: str = Field(
        ...,
        min_length=1,
        description="Google AI Studio key; without it the assistant is disabled"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Multimodal model used for every assistant call"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Reply length cap"
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Kept low so receipt fields come back consistently"
    )


class AppSettings(BaseSettings):
    """
    Ledger, storage and analytics settings.
    
    All fields have defaults, so a bare checkout runs with local JSON
    storage under ./data.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Runtime
    app_environment: str = Field(
        default="development",
        description="development / production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Render logs for a console instead of JSON lines"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    
    # Product
    product_name: str = Field(
        default="smartspend",
        description="Used as the export filename prefix"
    )
    
    # Storage
    storage_backend: str = Field(
        default="json",
        pattern="^(json|sheets|memory)$",
        description="Which persistence backend to use"
    )
    data_dir: str = Field(
        default="data",
        description="Directory for the local JSON backend"
    )
    
    # Derived analytics
    top_n: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Drill-down entries per category / per day"
    )
    insight_sample_size: int = Field(
        default=50,
        ge=1,
        description="Most recent transactions sent for AI insights"
    )
    chat_recent_count: int = Field(
        default=10,
        ge=1,
        description="Recent transactions included in the chat context"
    )
    chat_top_categories: int = Field(
        default=5,
        ge=1,
        description="Expense categories included in the chat context"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing for the log level."""
        return v.strip().upper()
    
    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


class Settings(BaseSettings):
    """
    Entry point for all settings.
    
    Each section is built on access, so reading `.app` never fails
    because Gemini or Sheets is unconfigured.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()
    
    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide Settings instance.
    
    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Report which settings sections load.
    
    Returns {section: ok} plus a "<section>_error" message for each
    section that failed. The UI uses it to explain disabled features.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("google_sheets", "gemini", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
