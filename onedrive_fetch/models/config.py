"""
Pydantic models for application configuration.
Provides validation for endpoint settings; required inputs are checked by the
pipeline itself so that a missing value fails the run uniformly.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"
DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class Credentials(BaseModel):
    """An application identity registered in Entra ID."""

    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    tenant_id: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id and self.client_secret and self.tenant_id)


class GraphEndpoints(BaseModel):
    """Where to exchange credentials and where to resolve share links."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    authority_host: str = DEFAULT_AUTHORITY_HOST
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL
    scope: str = DEFAULT_GRAPH_SCOPE

    @field_validator("authority_host", "graph_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures endpoints are absolute http(s) URLs without a trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"Endpoint must be an http(s) URL, got: {v!r}")
        return v.rstrip("/")

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        if not v:
            raise ValueError("Scope cannot be empty.")
        return v

    def token_url(self, tenant_id: str) -> str:
        return f"{self.authority_host}/{tenant_id}/oauth2/v2.0/token"

    def graph_url(self, path: str) -> str:
        return f"{self.graph_base_url}/{path.lstrip('/')}"


class FetchConfig(BaseModel):
    """A validated configuration for one pipeline run."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    credentials: Credentials = Field(default_factory=Credentials)
    onedrive_link: str = ""
    endpoints: GraphEndpoints = Field(default_factory=GraphEndpoints)
    output_dir: Path = Field(default_factory=Path.cwd)

    @property
    def has_required_inputs(self) -> bool:
        """True when every input the pipeline needs is non-empty."""
        return self.credentials.is_complete and bool(self.onedrive_link)
