"""
Configuration management using Pydantic Settings.
Loads settings from environment variables and .env files.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CopilotSettings(BaseSettings):
    """GitHub Copilot LLM configuration settings."""

    model_config = SettingsConfigDict(env_prefix="COPILOT_")

    api_url: str = Field(
        default="https://api.githubcopilot.com",
        description="Base URL of the Copilot chat completions API",
    )
    model: str = Field(default="gpt-4o", description="Model used for idea generation")
    system_prompt: str = Field(
        default="You are a helpful assistant.",
        description="System message sent with every idea prompt",
    )
    timeout: int = Field(default=60, description="HTTP request timeout in seconds")


class GitHubSettings(BaseSettings):
    """GitHub REST API configuration settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_")

    api_url: str = Field(default="https://api.github.com", description="GitHub REST API URL")
    public_keys_path: str = Field(
        default="/meta/public_keys/copilot_api",
        description="Endpoint listing the keys Copilot signs agent requests with",
    )
    timeout: int = Field(default=30, description="HTTP request timeout in seconds")
    verify_signatures: bool = Field(
        default=True,
        description="Verify X-GitHub-Public-Key-Signature on inbound requests",
    )


class BrainstormSettings(BaseSettings):
    """Brainstorming dialogue configuration."""

    model_config = SettingsConfigDict(env_prefix="BRAINSTORM_")

    generator_timeout: float = Field(
        default=45.0, description="Upper bound in seconds for a single idea generation"
    )
    issue_labels: list[str] = Field(
        default=["feature-idea", "wacky"],
        description="Labels attached to issues created from a brainstormed idea",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="wacky-pm", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")

    # Sub-settings
    copilot: CopilotSettings = Field(default_factory=CopilotSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    brainstorm: BrainstormSettings = Field(default_factory=BrainstormSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
