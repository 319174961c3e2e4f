"""
Dioxus.toml generator — app settings, including the deployment base path.

``base_path`` is the one value that decides whether the uploaded bundle
works: every asset URL is prefixed with it, so it must equal the folder
the archive is extracted into on the host.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile


def generate_dioxus_toml(config: ShipConfig) -> GeneratedFile:
    """Render Dioxus.toml with ``base_path = "<base_path>"`` substituted verbatim."""
    content = f"""\
[application]
name = "{config.project_name}"
default_platform = "web"

[web.app]
title = "{config.app_title}"
base_path = "{config.base_path}"

[web.watcher]

[web.resource.dev]

[web.resource.release]
"""
    return GeneratedFile(
        path="Dioxus.toml",
        content=content,
        reason=f"App configuration (base_path = {config.base_path})",
    )
