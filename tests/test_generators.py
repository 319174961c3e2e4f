"""
Tests for the template generators.

Generators are pure: same config in, same bytes out. The interesting
assertions are about what gets substituted where.
"""

from dxship.core.models.config import ShipConfig
from dxship.core.services.generators import (
    generate_cargo_toml,
    generate_deploy_script,
    generate_dioxus_toml,
    generate_dogfood_workflow,
    generate_gitignore,
    generate_main_rs,
    generate_project_files,
    generate_readme,
)


class TestProjectFileSet:
    def test_paths_in_write_order(self):
        paths = [f.path for f in generate_project_files(ShipConfig())]
        assert paths == ["Cargo.toml", "Dioxus.toml", "src/main.rs", "README.md", ".gitignore", "deploy.sh"]

    def test_only_deploy_script_is_executable(self):
        executable = [f.path for f in generate_project_files(ShipConfig()) if f.executable]
        assert executable == ["deploy.sh"]

    def test_deterministic(self):
        config = ShipConfig(base_path="/app")
        first = [f.content for f in generate_project_files(config)]
        second = [f.content for f in generate_project_files(config)]
        assert first == second


class TestDioxusToml:
    def test_base_path_substituted_once(self):
        content = generate_dioxus_toml(ShipConfig(base_path="/my-app")).content
        lines = [line for line in content.splitlines() if line.startswith("base_path")]
        assert lines == ['base_path = "/my-app"']

    def test_sections_and_title(self):
        content = generate_dioxus_toml(ShipConfig(app_title="Shop")).content
        assert "[application]" in content
        assert 'default_platform = "web"' in content
        assert "[web.app]" in content
        assert 'title = "Shop"' in content
        assert "[web.resource.release]" in content

    def test_project_name_used(self):
        content = generate_dioxus_toml(ShipConfig(project_name="shop")).content
        assert 'name = "shop"' in content

    def test_unusual_base_path_is_verbatim(self):
        content = generate_dioxus_toml(ShipConfig(base_path="app/")).content
        assert 'base_path = "app/"' in content


class TestCargoToml:
    def test_dependencies(self):
        content = generate_cargo_toml(ShipConfig()).content
        assert 'dioxus = { version = "0.7", features = ["web"] }' in content
        assert 'wasm-bindgen = "=0.2.97"' in content

    def test_pin_follows_config(self):
        content = generate_cargo_toml(ShipConfig(wasm_bindgen_version="0.2.100")).content
        assert 'wasm-bindgen = "=0.2.100"' in content

    def test_release_profile(self):
        content = generate_cargo_toml(ShipConfig()).content
        assert "[profile.release]" in content
        for setting in ('opt-level = "z"', "lto = true", "codegen-units = 1", 'panic = "abort"', "strip = true"):
            assert setting in content

    def test_package_name(self):
        content = generate_cargo_toml(ShipConfig(project_name="shop")).content
        assert 'name = "shop"' in content
        assert 'edition = "2021"' in content


class TestStaticTemplates:
    def test_main_rs_launches_app(self):
        content = generate_main_rs().content
        assert "use dioxus::prelude::*;" in content
        assert "launch(App)" in content

    def test_gitignore(self):
        content = generate_gitignore().content
        assert "/target" in content.splitlines()
        assert "Cargo.lock" in content


class TestReadme:
    def test_mentions_folder_and_archive(self):
        content = generate_readme(ShipConfig(base_path="/shop", archive_name="shop.zip")).content
        assert "`shop`" in content
        assert "shop.zip" in content

    def test_build_dir_follows_project_name(self):
        content = generate_readme(ShipConfig(project_name="shop")).content
        assert "target/dx/shop/release/web/public/" in content


class TestDeployScript:
    def test_shebang_and_build(self):
        generated = generate_deploy_script(ShipConfig())
        assert generated.content.startswith("#!/bin/bash\n")
        assert "dx build --release --platform web" in generated.content
        assert generated.executable

    def test_shell_expansions_survive(self):
        content = generate_deploy_script(ShipConfig()).content
        assert "${BLUE}" in content
        assert "${{" not in content


class TestDogfoodWorkflow:
    def test_path(self):
        assert generate_dogfood_workflow(ShipConfig()).path == ".github/workflows/dogfood.yml"

    def test_runs_dxship_unattended(self):
        content = generate_dogfood_workflow(ShipConfig(base_path="/shop", project_name="shop")).content
        assert 'dxship --yes --base-path "/shop" --project-name "shop"' in content
        assert "[skip ci]" in content

    def test_branch_and_expressions(self):
        content = generate_dogfood_workflow(ShipConfig(), branch="trunk").content
        assert "branches: [trunk]" in content
        assert "${{ github.ref }}" in content

    def test_installs_toolchain(self):
        content = generate_dogfood_workflow(ShipConfig()).content
        assert "targets: wasm32-unknown-unknown" in content
        assert "cargo install dioxus-cli --locked" in content
        assert "path: dioxus-deploy.zip" in content
