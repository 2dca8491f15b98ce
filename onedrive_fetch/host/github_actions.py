"""
GitHub Actions runner integration: reading step inputs, setting step outputs
and reporting failure through workflow commands.
"""

import logging
import os
import sys
import uuid
from typing import Mapping, TextIO

log = logging.getLogger(__name__)


def _input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """
    Returns the value of a step input, or an empty string if it is not set.

    Inputs are passed by the runner as INPUT_<NAME> environment variables,
    with the name upper-cased and spaces replaced by underscores.
    """
    environ = os.environ if environ is None else environ
    return environ.get(_input_env_name(name), "").strip()


def escape_data(value: str) -> str:
    """Escapes a workflow command value."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escapes a workflow command property."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(
    command: str,
    message: str = "",
    properties: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Prints a `::command key=value::message` line for the runner."""
    stream = stream or sys.stdout
    props = ""
    if properties:
        props = " " + ",".join(
            f"{key}={escape_property(str(value))}" for key, value in properties.items()
        )
    stream.write(f"::{command}{props}::{escape_data(message)}\n")
    stream.flush()


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    """
    Sets a step output.

    Appends a delimited entry to the file named by GITHUB_OUTPUT; on runners
    without that file the legacy `set-output` command is printed instead.
    """
    environ = os.environ if environ is None else environ
    output_path = environ.get("GITHUB_OUTPUT", "")
    if not output_path:
        log.debug("GITHUB_OUTPUT is not set, falling back to the set-output command")
        sys.stdout.write("\n")
        issue_command("set-output", value, {"name": name})
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError("Unexpected input: value should not contain the delimiter.")
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def error(message: str) -> None:
    """Reports an error annotation."""
    issue_command("error", message)


def set_failed(message: str) -> int:
    """
    Reports the run as failed.

    Returns the process exit code the caller should exit with.
    """
    error(message)
    return 1
