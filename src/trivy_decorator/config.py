from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr, conint, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_GITHUB_API_URL, DEFAULT_MAX_TABLE_ROWS


class DecoratorConfig(BaseSettings):
    """Configuration loaded from GitHub Actions inputs."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        frozen=True,
        extra="ignore",
    )

    # Required
    results_file: str = Field(default="", description="Path to the Trivy JSON report")
    github_token: SecretStr = Field(default="", description="GitHub token used for API calls")

    max_table_rows: conint(gt=0) = Field(
        default=DEFAULT_MAX_TABLE_ROWS,
        description="Maximum number of vulnerabilities listed in the comment table",
    )

    # workflow_run (artifact relay) support
    event_file: str = Field(
        default="",
        description="Path to an event payload captured by the triggering workflow",
    )
    event_name: str = Field(default="", description="Event name to use instead of the live one")
    artifact_name: str = Field(default="", description="Artifact containing the scan report")
    event_artifact_name: str = Field(default="", description="Artifact containing the event payload")

    # Commit fallback for push / workflow_call
    sha: str = Field(default="", description="Commit SHA used to look up the associated PR")

    github_api_url: str = Field(
        default=DEFAULT_GITHUB_API_URL,
        validation_alias=AliasChoices("INPUT_GITHUB_API_URL", "GITHUB_API_URL"),
    )

    @field_validator(
        "results_file",
        "event_file",
        "event_name",
        "artifact_name",
        "event_artifact_name",
        "sha",
        "github_api_url",
        mode="before",
    )
    @classmethod
    def _strip(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _validate_required(self) -> "DecoratorConfig":
        errors = []
        if not self.results_file:
            errors.append("results_file input is required")
        if not self.github_token.get_secret_value():
            errors.append("github_token input is required")
        if errors:
            raise ValueError(f"Configuration validation failed: {', '.join(errors)}")
        return self
