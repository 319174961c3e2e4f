"""
Shared test fixtures and configuration.

``FakeToolchain`` stands in for cargo/rustup/dx: a MockAdapter registered
as "shell" answers each action ID, and ``which`` reports what is
"installed". Filesystem and archive adapters are the real ones, pointed
at ``tmp_path``, so every run is headless but touches real files.
"""

from pathlib import Path

import pytest

from dxship.adapters.archive.zip import ZipArchiveAdapter
from dxship.adapters.base import ExecutionContext
from dxship.adapters.mock import MockAdapter
from dxship.adapters.registry import AdapterRegistry
from dxship.adapters.shell.filesystem import FilesystemAdapter
from dxship.core.models.action import Receipt
from dxship.core.models.config import ShipConfig
from dxship.core.observability.progress import RecordingProgress


class FakeToolchain:
    """Scriptable stand-in for the Rust/Dioxus toolchain."""

    def __init__(
        self,
        installed: tuple[str, ...] = ("cargo", "rustup", "dx", "zip"),
        targets: tuple[str, ...] = ("wasm32-unknown-unknown",),
        dx_version: str = "0.7.2",
        build_creates_output: bool = True,
    ):
        self.installed = set(installed)
        self.targets = set(targets)
        self.dx_version = dx_version
        self.build_creates_output = build_creates_output
        self.shell = MockAdapter(adapter_name="shell")

        self.shell.set_output("probe-cargo", "cargo 1.83.0 (5ffbef321 2024-10-29)")
        self.shell.set_handler("probe-wasm-target", self._list_targets)
        self.shell.set_handler("verify-wasm-target", self._list_targets)
        self.shell.set_handler("install-wasm32-unknown-unknown", self._add_target)
        self.shell.set_handler("probe-dx", self._dx_version)
        self.shell.set_handler("verify-dx", self._dx_version)
        self.shell.set_handler("install-dx", self._install_dx)
        self.shell.set_output("build-check", "Finished `dev` profile")
        self.shell.set_handler("build-release", self._build)

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.installed else None

    def _ok(self, ctx: ExecutionContext, output: str = "") -> Receipt:
        return Receipt.success(adapter="shell", action_id=ctx.action.id, output=output)

    def _list_targets(self, ctx: ExecutionContext) -> Receipt:
        return self._ok(ctx, "\n".join(sorted(self.targets)))

    def _add_target(self, ctx: ExecutionContext) -> Receipt:
        self.targets.add(ctx.params["command"][-1])
        return self._ok(ctx)

    def _dx_version(self, ctx: ExecutionContext) -> Receipt:
        return self._ok(ctx, f"dioxus {self.dx_version} (fd0bd2d)")

    def _install_dx(self, ctx: ExecutionContext) -> Receipt:
        self.installed.add("dx")
        return self._ok(ctx)

    def _build(self, ctx: ExecutionContext) -> Receipt:
        if self.build_creates_output:
            project_dir = Path(ctx.params["cwd"])
            public = project_dir / "target" / "dx" / project_dir.name / "release" / "web" / "public"
            (public / "assets").mkdir(parents=True, exist_ok=True)
            (public / "index.html").write_text("<!doctype html><div id=main></div>")
            (public / "assets" / "app.wasm").write_bytes(b"\0asm\x01\0\0\0")
            (public / "assets" / "app.js").write_text("export default 1;")
        return self._ok(ctx, "Build completed")


def make_registry(shell: MockAdapter) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register(shell)
    registry.register(FilesystemAdapter())
    registry.register(ZipArchiveAdapter())
    return registry


def always(answer: bool):
    """Confirmation callback that records prompts and always answers ``answer``."""
    prompts: list[str] = []

    def _confirm(message: str) -> bool:
        prompts.append(message)
        return answer

    _confirm.prompts = prompts  # type: ignore[attr-defined]
    return _confirm


@pytest.fixture
def toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture
def registry(toolchain: FakeToolchain) -> AdapterRegistry:
    return make_registry(toolchain.shell)


@pytest.fixture
def config() -> ShipConfig:
    return ShipConfig(archiver="builtin")


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path
