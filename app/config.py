"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


# Values the hosted services cannot work without. Missing ones are reported
# at startup but do not stop the application from booting.
REQUIRED_SETTINGS = (
    "firebase_api_key",
    "firebase_auth_domain",
    "firebase_project_id",
    "firebase_storage_bucket",
    "firebase_messaging_sender_id",
    "firebase_app_id",
    "firebase_measurement_id",
    "openai_api_key",
)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="WhatCanICook", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    public_hostname: Optional[str] = Field(
        default=None, description="Hostname the app is served from"
    )
    production_hostname: str = Field(
        default="whatcanicookai.netlify.app",
        description="Hostname that acts as its own auth domain in production",
    )

    # Firebase project settings
    firebase_api_key: Optional[str] = Field(default=None, description="Web API key")
    firebase_auth_domain: Optional[str] = Field(default=None, description="Auth domain")
    firebase_project_id: Optional[str] = Field(default=None, description="Project id")
    firebase_storage_bucket: Optional[str] = Field(
        default=None, description="Storage bucket"
    )
    firebase_messaging_sender_id: Optional[str] = Field(
        default=None, description="Messaging sender id"
    )
    firebase_app_id: Optional[str] = Field(default=None, description="App id")
    firebase_measurement_id: Optional[str] = Field(
        default=None, description="Analytics measurement id"
    )
    identity_base_url: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        description="Identity Toolkit REST endpoint",
    )
    identity_timeout_sec: float = Field(
        default=10.0, gt=0, description="Identity provider request timeout"
    )

    # Analytics settings
    analytics_api_secret: Optional[str] = Field(
        default=None, description="Measurement Protocol API secret"
    )
    analytics_endpoint: str = Field(
        default="https://www.google-analytics.com/mp/collect",
        description="Measurement Protocol collect endpoint",
    )

    # MongoDB settings
    mongo_uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    mongo_db_name: str = Field(
        default="whatcanicook", description="MongoDB database name"
    )
    premium_grant_transactional: bool = Field(
        default=False,
        description="Write premium grants inside a single MongoDB transaction",
    )

    # OpenAI settings
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model: str = Field(default="gpt-3.5-turbo", description="Chat model")
    openai_temperature: float = Field(default=0.9, ge=0, le=2)
    openai_presence_penalty: float = Field(default=0.6, ge=-2, le=2)
    openai_frequency_penalty: float = Field(default=0.6, ge=-2, le=2)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="WhatCanICook API", description="API documentation title"
    )
    api_description: str = Field(
        default="Accounts, premium status and AI recipe generation",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING

    def missing_required(self) -> list[str]:
        """Return the environment variable names of unset required settings"""
        return [name.upper() for name in REQUIRED_SETTINGS if not getattr(self, name)]

    def resolved_auth_domain(self) -> Optional[str]:
        """The production site serves its own auth handler; elsewhere use the
        configured Firebase auth domain."""
        if self.is_production() and self.public_hostname == self.production_hostname:
            return self.public_hostname
        return self.firebase_auth_domain


# Global settings instance
settings = Settings()
