"""Unit tests for render settings and the sandbox they build."""

import dataclasses
import os
from pathlib import Path

import pytest

from pagesnap.contexts.compilation.sandbox import Sandbox
from pagesnap.contexts.rendering.resolution import ResolutionPolicy
from pagesnap.utils.config import RenderSettings, load_render_settings


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("LATEX_COMPILER", raising=False)
    monkeypatch.delenv("RENDER_CONFIG_PATH", raising=False)


@pytest.mark.unit
class TestLoadRenderSettings:
    def test_defaults(self, clean_env):
        settings = load_render_settings()

        assert settings == RenderSettings()
        assert settings.desired_resolution == 1000.0
        assert settings.max_size == 1000.0
        assert settings.tab_width == 2
        assert settings.latex_compiler == "pdflatex"

    def test_env_compiler(self, clean_env, monkeypatch):
        monkeypatch.setenv("LATEX_COMPILER", "xelatex")
        assert load_render_settings().latex_compiler == "xelatex"

    def test_yaml_overrides(self, clean_env, tmp_path):
        config = tmp_path / "render.yaml"
        config.write_text("max_size: 2000.0\nnum_passes: 1\nsearch_paths: [styles, vendor]\n")

        settings = load_render_settings(config)

        assert settings.max_size == 2000.0
        assert settings.num_passes == 1
        assert settings.search_paths == ("styles", "vendor")
        assert settings.desired_resolution == 1000.0

    def test_yaml_from_env(self, clean_env, monkeypatch, tmp_path):
        config = tmp_path / "render.yaml"
        config.write_text("file_name: doc.tex\n")
        monkeypatch.setenv("RENDER_CONFIG_PATH", str(config))

        assert load_render_settings().file_name == "doc.tex"

    def test_unknown_key(self, clean_env, tmp_path):
        config = tmp_path / "render.yaml"
        config.write_text("max_sise: 10\n")

        with pytest.raises(ValueError, match="max_sise"):
            load_render_settings(config)

    def test_empty_yaml(self, clean_env, tmp_path):
        config = tmp_path / "render.yaml"
        config.write_text("")
        assert load_render_settings(config) == RenderSettings()

    def test_builds_policy_and_sandbox(self):
        settings = RenderSettings(max_size=1200.0, latex_compiler="lualatex", search_paths=("a",))

        assert settings.resolution_policy() == ResolutionPolicy(1000.0, 1200.0)
        sandbox = settings.sandbox()
        assert sandbox.compiler == "lualatex"
        assert sandbox.search_paths == (Path("a"),)
        assert sandbox.file_name == "main.tex"


@pytest.mark.unit
class TestSandbox:
    def test_with_source(self):
        world = Sandbox(file_name="doc.tex").with_source("héllo")

        assert world.source.text == "héllo"
        assert world.source.file_id == "doc.tex"
        assert world.source.byte_len() == 6
        assert world.into_source() is world.source

    def test_is_read_only(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Sandbox().compiler = "xelatex"

    def test_environment_without_paths(self, monkeypatch):
        monkeypatch.delenv("TEXINPUTS", raising=False)
        assert "TEXINPUTS" not in Sandbox().environment()

    def test_environment_search_paths(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TEXINPUTS", raising=False)
        env = Sandbox(search_paths=(tmp_path,)).environment()

        assert env["TEXINPUTS"] == f"{tmp_path.resolve()}{os.pathsep}"

    def test_environment_keeps_existing_search_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEXINPUTS", "/opt/tex")
        env = Sandbox(search_paths=(tmp_path,)).environment()

        assert env["TEXINPUTS"] == f"{tmp_path.resolve()}{os.pathsep}/opt/tex"

    def test_environment_font_paths(self, monkeypatch, tmp_path):
        monkeypatch.delenv("OSFONTDIR", raising=False)
        env = Sandbox(font_paths=(tmp_path,)).environment()
        assert env["OSFONTDIR"].startswith(str(tmp_path.resolve()))
