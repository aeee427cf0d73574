"""Configuration models using Pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScannerConfig(BaseModel):
    """Page scan configuration."""

    stable_ready_states: list[str] = ["complete"]
    include_hidden: bool = True  # Hidden nodes are still part of the model
    max_elements: int = Field(default=5000, ge=1)
    validate_liveness: bool = False  # Re-resolve every selector after synthesis


class ClassifierConfig(BaseModel):
    """Tunables for the free-text rule of the element classifier.

    The defaults trade recall for precision on noisy text nodes; adjust them
    per site rather than treating them as fixed.
    """

    max_text_length: int = Field(default=100, ge=1)
    text_tags: list[str] = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "span", "div", "label"]
    text_keywords: list[str] = ["title", "heading", "text", "content", "label"]


class ResolverConfig(BaseModel):
    """Element resolver configuration."""

    visibility_timeout: float = Field(default=10.0, gt=0)
    poll_interval: float = Field(default=0.25, gt=0)
    action_tag_selector: str = (
        'button, input[type="submit"], input[type="button"], [role="button"]'
    )


class AuthConfig(BaseModel):
    """Timeouts for navigation and login redirects, in seconds."""

    navigation_timeout: float = Field(default=10.0, gt=0)
    login_redirect_timeout: float = Field(default=30.0, gt=0)
    default_redirect_timeout: float = Field(default=10.0, gt=0)


class LoginSelectors(BaseModel):
    """Caller-supplied selectors tried before the generic fallbacks."""

    username_field: str | None = None
    password_field: str | None = None
    submit_button: str | None = None


class LoginWait(BaseModel):
    """Condition that signals a completed login."""

    type: Literal["url", "selector"]
    value: str


class LoginConfig(BaseModel):
    """Form login parameters."""

    login_url: str
    username: str
    password: SecretStr
    selectors: LoginSelectors = Field(default_factory=LoginSelectors)
    wait_for_login: LoginWait | None = None


class LogConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    structured: bool = True


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAGELENS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    logs: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load configuration from YAML file."""
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open() as f:
            data = yaml.safe_load(f)

        return cls(**data) if data else cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create configuration from dictionary."""
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump()
