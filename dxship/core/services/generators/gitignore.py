"""
.gitignore generator for the scaffolded Rust project.
"""

from __future__ import annotations

from dxship.core.models.template import GeneratedFile

_GITIGNORE = """\
/target
Cargo.lock
.DS_Store
*.swp
*~
"""


def generate_gitignore() -> GeneratedFile:
    return GeneratedFile(path=".gitignore", content=_GITIGNORE, reason="Ignore rules")
