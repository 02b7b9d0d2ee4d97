"""
Read-only compilation environment.

A Sandbox describes how sources are compiled: which engine, how many passes, and
where TeX looks for inputs and fonts. It is never mutated, so a single instance can
be shared by concurrent renders; each render gets its own World via with_source().
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

from pagesnap.contexts.compilation.document import SourceText


@dataclass(frozen=True)
class Sandbox:
    """
    Shared compilation settings.

    Attributes:
        compiler: LaTeX engine executable (e.g., "pdflatex", "xelatex")
        num_passes: Engine passes per compile (2 resolves cross-references)
        search_paths: Extra directories added to TEXINPUTS
        font_paths: Extra directories added to OSFONTDIR
        file_name: Logical file name the source is compiled and reported under
    """

    compiler: str = "pdflatex"
    num_passes: int = 2
    search_paths: Tuple[Path, ...] = ()
    font_paths: Tuple[Path, ...] = ()
    file_name: str = "main.tex"

    def with_source(self, text: str) -> "World":
        return World(sandbox=self, source=SourceText(text=text, file_id=self.file_name))

    def environment(self) -> Dict[str, str]:
        """
        Subprocess environment for one compile.

        Search paths are prepended; the trailing separator keeps TeX's default
        search path after them.
        """
        env = dict(os.environ)
        if self.search_paths:
            env["TEXINPUTS"] = _search_path(self.search_paths, env.get("TEXINPUTS"))
        if self.font_paths:
            env["OSFONTDIR"] = _search_path(self.font_paths, env.get("OSFONTDIR"))
        return env


def _search_path(paths: Tuple[Path, ...], existing) -> str:
    joined = os.pathsep.join(str(Path(p).resolve()) for p in paths)
    if existing:
        return f"{joined}{os.pathsep}{existing}"
    return f"{joined}{os.pathsep}"


@dataclass(frozen=True)
class World:
    """A Sandbox bound to one source text."""

    sandbox: Sandbox
    source: SourceText

    def into_source(self) -> SourceText:
        return self.source
