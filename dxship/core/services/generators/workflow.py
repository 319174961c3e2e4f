"""
Dogfooding workflow generator.

Produces a GitHub Actions workflow that re-runs dxship on every push and
commits the regenerated project back into the repository. Runs never
interact except through the repository itself; ``[skip ci]`` on the
bot commit stops the workflow from triggering itself.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile

WORKFLOW_PATH = ".github/workflows/dogfood.yml"


def generate_dogfood_workflow(config: ShipConfig, branch: str = "main") -> GeneratedFile:
    """Render the workflow. The job runs ``dxship --yes`` so prompts auto-confirm."""
    content = f"""\
name: Dogfood

on:
  push:
    branches: [{branch}]
  workflow_dispatch:

permissions:
  contents: write

concurrency:
  group: dogfood-${{{{ github.ref }}}}
  cancel-in-progress: false

jobs:
  regenerate:
    name: Regenerate {config.project_name}
    runs-on: ubuntu-latest

    steps:
      - uses: actions/checkout@v4

      - name: Set up Rust
        uses: dtolnay/rust-toolchain@stable
        with:
          targets: {config.wasm_target}

      - name: Cache cargo
        uses: Swatinem/rust-cache@v2
        with:
          workspaces: {config.project_name}

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"
          cache: pip

      - name: Install dxship
        run: pip install .

      - name: Install Dioxus CLI
        run: cargo install dioxus-cli --locked

      - name: Scaffold, build and package
        run: dxship --yes --base-path "{config.base_path}" --project-name "{config.project_name}"

      - name: Commit generated project
        run: |
          git config user.name "github-actions[bot]"
          git config user.email "41898282+github-actions[bot]@users.noreply.github.com"
          git add {config.project_name}
          if git diff --cached --quiet; then
            echo "No changes to commit"
          else
            git commit -m "Regenerate {config.project_name} [skip ci]"
            git push
          fi

      - name: Upload deployment archive
        uses: actions/upload-artifact@v4
        with:
          name: {config.archive_name.removesuffix(".zip")}
          path: {config.archive_name}
          if-no-files-found: warn
"""
    return GeneratedFile(
        path=WORKFLOW_PATH,
        content=content,
        reason="Dogfooding workflow (re-runs dxship on every push)",
    )
