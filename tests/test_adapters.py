"""
Tests for adapter protocol, registry, mock, shell, filesystem and archive adapters.
"""

import shutil
import sys
import zipfile
from pathlib import Path

import pytest

from dxship.adapters.archive.zip import ZipArchiveAdapter
from dxship.adapters.base import ExecutionContext
from dxship.adapters.mock import MockAdapter
from dxship.adapters.registry import AdapterRegistry
from dxship.adapters.shell.command import ShellCommandAdapter
from dxship.adapters.shell.filesystem import FilesystemAdapter, human_size
from dxship.core.models.action import Action, Receipt

# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_resolve_relative(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="shell"), workdir="/project")
        assert ctx.resolve("Cargo.toml") == "/project/Cargo.toml"

    def test_resolve_absolute(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="shell"), workdir="/project")
        assert ctx.resolve("/etc/hosts") == "/etc/hosts"

    def test_params_come_from_action(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="shell", params={"a": 1}))
        assert ctx.params == {"a": 1}


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="test-mock")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-1", adapter="test-mock")))
        assert receipt.ok
        assert mock.call_count == 1

    def test_set_output(self):
        mock = MockAdapter()
        mock.set_output("op-1", "custom")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        assert receipt.output == "custom"

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure", return_code=101)
        receipt = mock.execute(ExecutionContext(action=Action(id="op-fail", adapter="mock")))
        assert receipt.failed
        assert receipt.return_code == 101
        assert "Intentional failure" in receipt.error

    def test_latest_script_wins(self):
        mock = MockAdapter()
        mock.set_output("op", "fixed")
        mock.set_handler("op", lambda ctx: Receipt.success(adapter="mock", action_id="op", output="computed"))
        receipt = mock.execute(ExecutionContext(action=Action(id="op", adapter="mock")))
        assert receipt.output == "computed"

    def test_called_ids_in_order(self):
        mock = MockAdapter()
        for i in range(3):
            mock.execute(ExecutionContext(action=Action(id=f"op-{i}", adapter="mock")))
        assert mock.called_ids == ["op-0", "op-1", "op-2"]

    def test_reset(self):
        mock = MockAdapter()
        mock.set_failure("op-1")
        mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        mock.reset()
        assert mock.call_count == 0
        assert mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock"))).ok

    def test_is_available(self):
        assert MockAdapter(available=True).is_available()
        assert not MockAdapter(available=False).is_available()


# ── Registry Tests ──────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="test")
        registry.register(mock)
        assert registry.get("test") is mock
        assert "test" in registry

    def test_register_replaces(self):
        registry = AdapterRegistry()
        first, second = MockAdapter(adapter_name="shell"), MockAdapter(adapter_name="shell")
        registry.register(first)
        registry.register(second)
        assert registry.get("shell") is second

    def test_default_registry(self):
        assert AdapterRegistry.default().names == ["archive", "filesystem", "shell"]

    def test_unavailable_adapter_fails(self):
        registry = AdapterRegistry()
        down = MockAdapter(adapter_name="down", available=False)
        registry.register(down)
        receipt = registry.execute_action(Action(id="x", adapter="down"))
        assert receipt.failed
        assert "not available" in receipt.error
        assert down.call_count == 0

    def test_missing_adapter_fails(self):
        receipt = AdapterRegistry().execute_action(Action(id="x", adapter="nonexistent"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_validation_failure_becomes_receipt(self):
        registry = AdapterRegistry()
        registry.register(FilesystemAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="filesystem", params={}))
        assert receipt.failed
        assert "Validation failed" in receipt.error

    def test_raising_adapter_is_contained(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="boom")

        def explode(ctx):
            raise RuntimeError("kaboom")

        mock.set_handler("x", explode)
        registry.register(mock)
        receipt = registry.execute_action(Action(id="x", adapter="boom"))
        assert receipt.failed
        assert "kaboom" in receipt.error

    def test_run_dispatches_to_shell(self, tmp_path: Path):
        registry = AdapterRegistry()
        shell = MockAdapter(adapter_name="shell")
        registry.register(shell)
        registry.run("probe", ["cargo", "--version"], cwd=str(tmp_path), stage="check")
        ctx = shell.call_log[0]
        assert ctx.params["command"] == ["cargo", "--version"]
        assert ctx.action.stage == "check"


# ── Shell Command Adapter Tests ─────────────────────────────────────


class TestShellCommandAdapter:
    def test_name(self):
        assert ShellCommandAdapter().name == "shell"

    def test_validate_missing_command(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="shell", params={}))
        valid, msg = ShellCommandAdapter().validate(ctx)
        assert not valid
        assert "command" in msg

    def test_validate_rejects_string_command(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(id="t", adapter="shell", params={"command": "echo hi", "cwd": str(tmp_path)}),
        )
        valid, msg = ShellCommandAdapter().validate(ctx)
        assert not valid
        assert "argument list" in msg

    def test_validate_bad_cwd(self):
        ctx = ExecutionContext(
            action=Action(id="t", adapter="shell", params={"command": ["echo"], "cwd": "/nonexistent/path"}),
        )
        valid, msg = ShellCommandAdapter().validate(ctx)
        assert not valid
        assert "does not exist" in msg

    def test_validate_unknown_executable(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(
                id="t", adapter="shell",
                params={"command": ["definitely-not-a-real-tool-xyz"], "cwd": str(tmp_path)},
            ),
        )
        valid, msg = ShellCommandAdapter().validate(ctx)
        assert not valid
        assert "Command not found" in msg

    def test_execute_success(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(
                id="t", adapter="shell",
                params={"command": [sys.executable, "-c", "print('hello')"], "cwd": str(tmp_path)},
            ),
        )
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.ok
        assert receipt.output == "hello"
        assert receipt.return_code == 0

    def test_execute_failure_keeps_stderr(self, tmp_path: Path):
        script = "import sys; sys.stderr.write('error[E0425]: cannot find value'); sys.exit(101)"
        ctx = ExecutionContext(
            action=Action(
                id="t", adapter="shell",
                params={"command": [sys.executable, "-c", script], "cwd": str(tmp_path)},
            ),
        )
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.failed
        assert receipt.return_code == 101
        assert receipt.error == "error[E0425]: cannot find value"

    def test_stream_sends_tool_output_to_stderr(self, tmp_path: Path, capfd):
        ctx = ExecutionContext(
            action=Action(
                id="t", adapter="shell",
                params={
                    "command": [sys.executable, "-c", "print('Compiling dioxus-test')"],
                    "cwd": str(tmp_path),
                    "stream": True,
                },
            ),
        )
        receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.ok
        captured = capfd.readouterr()
        assert "Compiling dioxus-test" in captured.err
        assert "Compiling dioxus-test" not in captured.out


# ── Filesystem Adapter Tests ────────────────────────────────────────


def _fs(tmp_path: Path, action_id: str, **params) -> Receipt:
    registry = AdapterRegistry()
    registry.register(FilesystemAdapter())
    return registry.execute_action(
        Action(id=action_id, adapter="filesystem", params=params), workdir=str(tmp_path),
    )


class TestFilesystemAdapter:
    def test_unknown_operation(self, tmp_path: Path):
        receipt = _fs(tmp_path, "x", operation="merge", path="a")
        assert receipt.failed
        assert "Unknown operation" in receipt.error

    def test_write_requires_content(self, tmp_path: Path):
        receipt = _fs(tmp_path, "x", operation="write", path="a.txt")
        assert receipt.failed

    def test_write_creates_parents(self, tmp_path: Path):
        receipt = _fs(tmp_path, "w", operation="write", path="src/main.rs", content="fn main() {}\n")
        assert receipt.ok
        assert (tmp_path / "src" / "main.rs").read_text() == "fn main() {}\n"

    def test_write_overwrites(self, tmp_path: Path):
        (tmp_path / "a.txt").write_text("old content that is longer")
        _fs(tmp_path, "w", operation="write", path="a.txt", content="new")
        assert (tmp_path / "a.txt").read_text() == "new"

    def test_write_executable(self, tmp_path: Path):
        _fs(tmp_path, "w", operation="write", path="deploy.sh", content="#!/bin/bash\n", executable=True)
        assert (tmp_path / "deploy.sh").stat().st_mode & 0o777 == 0o755

    def test_remove_tree(self, tmp_path: Path):
        (tmp_path / "proj" / "src").mkdir(parents=True)
        (tmp_path / "proj" / "src" / "x").write_text("x")
        receipt = _fs(tmp_path, "rm", operation="remove_tree", path="proj")
        assert receipt.ok
        assert not (tmp_path / "proj").exists()

    def test_remove_tree_missing_is_skip(self, tmp_path: Path):
        receipt = _fs(tmp_path, "rm", operation="remove_tree", path="nothing")
        assert receipt.status == "skipped"

    def test_list(self, tmp_path: Path):
        (tmp_path / "assets").mkdir()
        (tmp_path / "index.html").write_text("x" * 2048)
        receipt = _fs(tmp_path, "ls", operation="list", path=".")
        assert receipt.ok
        assert "index.html" in receipt.output
        assert "assets/" in receipt.output
        names = [e["name"] for e in receipt.metadata["entries"]]
        assert names == ["assets", "index.html"]

    def test_list_not_a_directory(self, tmp_path: Path):
        receipt = _fs(tmp_path, "ls", operation="list", path="missing")
        assert receipt.failed


class TestHumanSize:
    @pytest.mark.parametrize(
        "size, expected",
        [(0, "0"), (512, "512"), (2048, "2.0K"), (348_160, "340K"), (5 * 1024 * 1024, "5.0M")],
    )
    def test_format(self, size: int, expected: str):
        assert human_size(size) == expected


# ── Zip Archive Adapter Tests ───────────────────────────────────────


def _make_public(root: Path) -> Path:
    public = root / "public"
    (public / "assets").mkdir(parents=True)
    (public / "index.html").write_text("<html></html>")
    (public / "assets" / "app.wasm").write_bytes(b"\0asm")
    return public


def _archive(tmp_path: Path, source: Path, method: str = "builtin") -> Receipt:
    registry = AdapterRegistry()
    registry.register(ZipArchiveAdapter())
    return registry.execute_action(
        Action(
            id="package-archive",
            adapter="archive",
            params={"source_dir": str(source), "archive_path": str(tmp_path / "out.zip"), "method": method},
        ),
        workdir=str(tmp_path),
    )


class TestZipArchiveAdapter:
    def test_validate_missing_source(self, tmp_path: Path):
        receipt = _archive(tmp_path, tmp_path / "nope")
        assert receipt.failed
        assert "does not exist" in receipt.error

    def test_validate_unknown_method(self, tmp_path: Path):
        public = _make_public(tmp_path)
        receipt = _archive(tmp_path, public, method="rar")
        assert receipt.failed
        assert "Unknown method" in receipt.error

    def test_builtin_flat_layout(self, tmp_path: Path):
        public = _make_public(tmp_path)
        receipt = _archive(tmp_path, public)
        assert receipt.ok
        with zipfile.ZipFile(tmp_path / "out.zip") as zf:
            names = set(zf.namelist())
        assert "index.html" in names
        assert "assets/app.wasm" in names
        assert not any(n.startswith("public/") for n in names)

    def test_builtin_replaces_existing(self, tmp_path: Path):
        with zipfile.ZipFile(tmp_path / "out.zip", "w") as zf:
            zf.writestr("stale.txt", "old build")
        public = _make_public(tmp_path)
        _archive(tmp_path, public)
        with zipfile.ZipFile(tmp_path / "out.zip") as zf:
            assert "stale.txt" not in zf.namelist()

    @pytest.mark.skipif(shutil.which("zip") is None, reason="zip CLI not installed")
    def test_cli_flat_layout(self, tmp_path: Path):
        public = _make_public(tmp_path)
        receipt = _archive(tmp_path, public, method="cli")
        assert receipt.ok
        with zipfile.ZipFile(tmp_path / "out.zip") as zf:
            names = set(zf.namelist())
        assert "index.html" in names
        assert "assets/app.wasm" in names

    @pytest.mark.skipif(shutil.which("zip") is None, reason="zip CLI not installed")
    def test_cli_replaces_existing(self, tmp_path: Path):
        with zipfile.ZipFile(tmp_path / "out.zip", "w") as zf:
            zf.writestr("stale.txt", "old build")
        public = _make_public(tmp_path)
        receipt = _archive(tmp_path, public, method="cli")
        assert receipt.ok
        with zipfile.ZipFile(tmp_path / "out.zip") as zf:
            names = zf.namelist()
        assert "stale.txt" not in names
        assert "index.html" in names
