"""
Render settings resolution.

Settings are layered: built-in defaults, then environment variables (loaded from
.env via python-dotenv), then an optional YAML file loaded with OmegaConf.

Examples:
    >>> settings = load_render_settings()
    >>> settings.resolution_policy().scale_for((500.0, 500.0))
    2.0

    # YAML overrides (configs/render.yaml)
    >>> settings = load_render_settings(Path("configs/render.yaml"))
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from pagesnap.contexts.compilation.sandbox import Sandbox
from pagesnap.contexts.rendering.resolution import (
    DESIRED_RESOLUTION,
    MAX_SIZE,
    ResolutionPolicy,
)

load_dotenv()

FILE_NAME = "main.tex"
TAB_WIDTH = 2
DEFAULT_NUM_PASSES = 2


@dataclass(frozen=True)
class RenderSettings:
    """
    Immutable render configuration.

    Attributes:
        desired_resolution: Target linear resolution; pixel budget is its square
        max_size: Largest accepted page dimension in points
        file_name: Logical file name for the source (compile stem and report label)
        tab_width: Columns per tab in diagnostic reports
        latex_compiler: LaTeX engine executable
        num_passes: Engine passes per compile
        search_paths: Extra TeX input directories
        font_paths: Extra font directories
    """

    desired_resolution: float = DESIRED_RESOLUTION
    max_size: float = MAX_SIZE
    file_name: str = FILE_NAME
    tab_width: int = TAB_WIDTH
    latex_compiler: str = "pdflatex"
    num_passes: int = DEFAULT_NUM_PASSES
    search_paths: Tuple[str, ...] = ()
    font_paths: Tuple[str, ...] = ()

    def resolution_policy(self) -> ResolutionPolicy:
        return ResolutionPolicy(desired_resolution=self.desired_resolution, max_size=self.max_size)

    def sandbox(self) -> Sandbox:
        return Sandbox(
            compiler=self.latex_compiler,
            num_passes=self.num_passes,
            search_paths=tuple(Path(p) for p in self.search_paths),
            font_paths=tuple(Path(p) for p in self.font_paths),
            file_name=self.file_name,
        )


def _settings_from_env() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    compiler = os.getenv("LATEX_COMPILER")
    if compiler:
        overrides["latex_compiler"] = compiler
    return overrides


def _settings_from_yaml(config_path: Path) -> Dict[str, Any]:
    raw = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Render config must be a mapping: {config_path}")

    known = {f.name for f in fields(RenderSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown render settings in {config_path}: {', '.join(unknown)}")

    # YAML lists become tuples so settings stay hashable
    return {key: tuple(value) if isinstance(value, list) else value for key, value in raw.items()}


def load_render_settings(config_path: Optional[Path] = None) -> RenderSettings:
    """
    Load render settings from defaults, environment and an optional YAML file.

    Args:
        config_path: YAML file with overrides (defaults to RENDER_CONFIG_PATH env variable)

    Returns:
        RenderSettings with all layers applied
    """
    settings = replace(RenderSettings(), **_settings_from_env())

    if config_path is None and os.getenv("RENDER_CONFIG_PATH"):
        config_path = Path(os.getenv("RENDER_CONFIG_PATH"))

    if config_path is not None:
        settings = replace(settings, **_settings_from_yaml(Path(config_path)))

    return settings
