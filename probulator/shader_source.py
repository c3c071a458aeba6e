"""Shader source loading with include expansion, and the uniforms shared by all shaders."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

_INCLUDE_DIRECTIVE = "#include"


@dataclass(eq=False)
class CommonShaderUniforms:
    """Per-frame values bound to every shader program."""

    elapsed_time: float = 0.0
    exposure: float = 1.0
    resolution: np.ndarray = field(default_factory=lambda: np.ones(2))
    view_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))
    proj_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))
    view_proj_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))

    def __post_init__(self):
        self.resolution = np.array(self.resolution, dtype=float)
        self.view_matrix = np.array(self.view_matrix, dtype=float)
        self.proj_matrix = np.array(self.proj_matrix, dtype=float)
        self.view_proj_matrix = np.array(self.view_proj_matrix, dtype=float)


def path_from_filename(filename: str) -> str:
    """Directory part of ``filename`` including its trailing separator, or an empty string."""
    pos = max(filename.rfind("/"), filename.rfind("\\"))
    if pos < 0:
        return ""
    return filename[: pos + 1]


def _read_text(filename: str) -> str:
    try:
        with open(filename, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except OSError:
        return ""


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _include_target(line: str) -> str | None:
    starts = [i for i in (line.find('"'), line.find("<")) if i >= 0]
    ends = [i for i in (line.rfind('"'), line.rfind(">")) if i >= 0]
    if not starts or not ends:
        return None
    p0 = min(starts)
    p1 = max(ends)
    if p0 == p1:
        return None
    return line[p0 + 1 : p1]


def preprocess_shader_from_file(filename: str | os.PathLike) -> str:
    """Read a shader and expand ``#include`` directives relative to its directory.

    Each expanded include is followed by a ``#line`` directive so that compiler
    messages keep pointing at the including file's lines. A file that cannot be
    read contributes no text.
    """
    filename = os.fspath(filename)
    shader_path = path_from_filename(filename)
    out: list[str] = []
    current_line = 1
    for line in _lines(_read_text(filename)):
        if line.startswith(_INCLUDE_DIRECTIVE):
            target = _include_target(line)
            if target is not None:
                out.append(preprocess_shader_from_file(shader_path + target) + "\n")
                current_line += 1
                out.append(f"#line {current_line}\n")
        else:
            out.append(line + "\n")
        current_line += 1
    return "".join(out)


def common_uniform_values(uniforms: CommonShaderUniforms) -> dict[str, object]:
    """Uniform names and the values to bind for them, in binding order."""
    return {
        "uElapsedTime": uniforms.elapsed_time,
        "uExposure": uniforms.exposure,
        "uProjMatrix": uniforms.proj_matrix,
        "uResolution": uniforms.resolution,
        "uViewMatrix": uniforms.view_matrix,
        "uViewProjMatrix": uniforms.view_proj_matrix,
    }