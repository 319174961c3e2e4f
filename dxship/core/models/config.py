"""
Ship configuration — the single immutable value every stage receives.

There is no ambient global state: the CLI builds one ``ShipConfig``
(defaults < dxship.yml < DXSHIP_* env < flags) and passes it down.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

_PROJECT_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")


class ShipConfig(BaseModel):
    """Settings for one scaffold/build/package run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_name: str = "dioxus-test"
    base_path: str = "/dioxus"          # must match the deployment folder name
    app_title: str = "Dioxus Test App"
    dioxus_version: str = "0.7"
    wasm_bindgen_version: str = "0.2.97"
    wasm_target: str = "wasm32-unknown-unknown"
    archive_name: str = "dioxus-deploy.zip"
    archiver: Literal["zip", "builtin"] = "zip"
    strict_base_path: bool = False

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        # Doubles as the Cargo package name and the directory name.
        if not _PROJECT_NAME_RE.match(value):
            raise ValueError(
                f"project_name {value!r} must start with a letter and contain "
                "only letters, digits, '-' or '_'"
            )
        return value

    @field_validator("archive_name")
    @classmethod
    def _check_archive_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError(f"archive_name {value!r} must be a plain file name")
        return value

    @property
    def build_output_rel(self) -> PurePosixPath:
        """Build output directory, relative to the project directory."""
        return PurePosixPath("target", "dx", self.project_name, "release", "web", "public")

    @property
    def deploy_folder(self) -> str:
        """Folder name on the host implied by the base path (``/dioxus`` → ``dioxus``)."""
        return self.base_path.strip().strip("/")


def validate_base_path(base_path: str) -> list[str]:
    """Return the problems with a base path; empty when it looks deployable.

    The value is substituted verbatim into Dioxus.toml either way. These
    checks only catch the mistakes that produce a blank page after upload.
    """
    problems: list[str] = []
    if not base_path:
        problems.append("base_path is empty")
        return problems
    if not base_path.startswith("/"):
        problems.append(f"base_path {base_path!r} should start with '/'")
    if len(base_path) > 1 and base_path.endswith("/"):
        problems.append(f"base_path {base_path!r} should not end with '/'")
    if any(ch.isspace() for ch in base_path):
        problems.append(f"base_path {base_path!r} contains whitespace")
    if '"' in base_path or "\\" in base_path:
        problems.append(f"base_path {base_path!r} contains a quote or backslash")
    return problems
