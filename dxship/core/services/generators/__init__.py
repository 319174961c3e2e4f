"""
Template generators — one module per generated file.

Each generator is a pure function: ShipConfig in, GeneratedFile out.
No I/O happens here; the materializer does the writing.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile
from dxship.core.services.generators.cargo_toml import generate_cargo_toml
from dxship.core.services.generators.deploy_script import generate_deploy_script
from dxship.core.services.generators.dioxus_toml import generate_dioxus_toml
from dxship.core.services.generators.gitignore import generate_gitignore
from dxship.core.services.generators.main_rs import generate_main_rs
from dxship.core.services.generators.readme import generate_readme
from dxship.core.services.generators.workflow import generate_dogfood_workflow


def generate_project_files(config: ShipConfig) -> list[GeneratedFile]:
    """The full template set, in write order."""
    return [
        generate_cargo_toml(config),
        generate_dioxus_toml(config),
        generate_main_rs(),
        generate_readme(config),
        generate_gitignore(),
        generate_deploy_script(config),
    ]


__all__ = [
    "generate_cargo_toml",
    "generate_deploy_script",
    "generate_dioxus_toml",
    "generate_dogfood_workflow",
    "generate_gitignore",
    "generate_main_rs",
    "generate_project_files",
    "generate_readme",
]
