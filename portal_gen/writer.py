from __future__ import annotations

from pathlib import Path
from typing import TextIO

from .backends.registry import BackendSpec, RenderConfig
from .diagram import UseCaseDiagram


def write_stream(
    stream: TextIO, backend: BackendSpec, diagram: UseCaseDiagram, cfg: RenderConfig
) -> None:
    """Render generated source into an already-open text sink."""
    backend.render(stream, diagram, cfg)


def write_source(
    path: Path, backend: BackendSpec, diagram: UseCaseDiagram, cfg: RenderConfig
) -> None:
    """Write generated source to a file, creating parent directories.

    The file is opened with newline="\\n" so output is byte-identical across
    platforms.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as fh:
        write_stream(fh, backend, diagram, cfg)
