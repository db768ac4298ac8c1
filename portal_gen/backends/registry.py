from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TextIO

from ..diagram import UseCaseDiagram
from .purescript import generate_module

RenderFn = Callable[[TextIO, UseCaseDiagram, "RenderConfig"], None]


@dataclass(frozen=True)
class RenderConfig:
    module_name: str
    portal_name: str


@dataclass(frozen=True)
class BackendSpec:
    backend_id: str
    title: str
    file_extension: str
    render: RenderFn


def _render_purescript(w: TextIO, diagram: UseCaseDiagram, cfg: RenderConfig) -> None:
    generate_module(w, diagram, cfg.module_name, cfg.portal_name)


BACKENDS: list[BackendSpec] = [
    BackendSpec(
        backend_id="purescript",
        title="PureScript (Butterfly portal)",
        file_extension=".purs",
        render=_render_purescript,
    ),
]


def get_backend(backend_id: str) -> BackendSpec:
    for spec in BACKENDS:
        if spec.backend_id == backend_id:
            return spec
    known = ", ".join(spec.backend_id for spec in BACKENDS)
    raise KeyError(f"unknown backend {backend_id!r} (known: {known})")
