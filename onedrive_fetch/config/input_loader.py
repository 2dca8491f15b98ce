"""
Builds the run configuration from step inputs and command-line options.
"""

import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from onedrive_fetch.exceptions import ConfigurationError
from onedrive_fetch.host.github_actions import get_input
from onedrive_fetch.models.config import Credentials, FetchConfig, GraphEndpoints

log = logging.getLogger(__name__)

REQUIRED_INPUTS = (
    "azure_client_id",
    "azure_client_secret",
    "azure_tenant_id",
    "onedrive_link",
)


class InputLoader:
    """Collects inputs from the environment and turns them into a FetchConfig."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ

    def read_inputs(self) -> dict[str, str]:
        """Reads the step inputs; missing ones come back as empty strings."""
        return {name: get_input(name, self._environ) for name in REQUIRED_INPUTS}

    def load_config(self, cli_options: dict[str, Any] | None = None) -> FetchConfig:
        """
        Loads configuration from step inputs, applies CLI overrides and validates it.

        Args:
            cli_options: Options provided via the command line. Keys are input
                names or endpoint settings; None values are ignored.

        Returns:
            A FetchConfig. Missing required inputs are NOT an error here; the
            pipeline reports them.

        Raises:
            ConfigurationError: If an endpoint or path setting is invalid.
        """
        values: dict[str, Any] = self.read_inputs()
        if cli_options:
            values.update({k: v for k, v in cli_options.items() if v is not None})

        missing = [name for name in REQUIRED_INPUTS if not values.get(name)]
        if missing:
            log.debug(f"Inputs not provided: {', '.join(missing)}")

        endpoint_overrides = {
            key: values[key]
            for key in ("authority_host", "graph_base_url", "scope")
            if values.get(key)
        }

        try:
            config = FetchConfig(
                credentials=Credentials(
                    client_id=values.get("azure_client_id", ""),
                    client_secret=values.get("azure_client_secret", ""),
                    tenant_id=values.get("azure_tenant_id", ""),
                ),
                onedrive_link=values.get("onedrive_link", ""),
                endpoints=GraphEndpoints(**endpoint_overrides),
            )
            if values.get("output_dir"):
                config.output_dir = Path(values["output_dir"])
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        return config
