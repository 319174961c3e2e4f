"""
deploy.sh generator — rebuild helper shipped inside the project.

Lets someone with only the generated project (no dxship installed)
rebuild the bundle and get packaging instructions.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile


def generate_deploy_script(config: ShipConfig) -> GeneratedFile:
    build_dir = config.build_output_rel.as_posix()
    folder = config.deploy_folder or "my-app"

    # Doubled braces are literal shell ${...} expansions.
    content = f"""\
#!/bin/bash
# Deployment helper script
set -e

GREEN='\\033[0;32m'
BLUE='\\033[0;34m'
NC='\\033[0m'

echo -e "${{BLUE}}Building for production...${{NC}}"
dx build --release --platform web

BUILD_DIR="{build_dir}"

if [ ! -d "$BUILD_DIR" ]; then
    echo "Error: Build directory not found!"
    exit 1
fi

echo -e "${{GREEN}}✓ Build complete!${{NC}}"
echo ""
echo "Build output location:"
echo "  $BUILD_DIR"
echo ""
echo "Files ready for deployment:"
cd "$BUILD_DIR"
ls -lh
echo ""
echo "To create deployment package:"
echo "  cd $BUILD_DIR"
echo "  zip -r ~/{config.archive_name} ."
echo ""
echo "Then upload to your host in a folder named '{folder}'"
"""
    return GeneratedFile(
        path="deploy.sh",
        content=content,
        executable=True,
        reason="Deployment helper (executable)",
    )
