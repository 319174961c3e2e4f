"""
GeneratedFile — what each template generator returns.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    path: str                       # POSIX path relative to the project dir
    content: str                    # whole-file content, overwritten on write
    executable: bool = False        # chmod 0755 after writing (deploy.sh)
    reason: str = ""                # shown next to "Created <path>"
