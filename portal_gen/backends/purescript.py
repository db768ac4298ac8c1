# portal_gen/backends/purescript.py
from __future__ import annotations

import io
from typing import TextIO

from ..diagram import UseCaseDiagram
from ..model_view import build_permission_index
from ..purescript_fmt import ps_string

# Runtime support modules the generated portal depends on.
IMPORTS: tuple[str, ...] = (
    "import Prelude",
    "import Data.List as List",
    "import Data.Set as Set",
    "import Butterfly.Actor (Actor (..))",
    "import Butterfly.Portal (Button (..), Portal (..))",
)


def generate_module_header(w: TextIO, name: str) -> None:
    """Generate a module header."""
    w.write(f"module {name} where\n")


def generate_imports(w: TextIO) -> None:
    """Generate the imports needed by the other generated code."""
    for line in IMPORTS:
        w.write(line + "\n")


def generate_portal_definition(w: TextIO, diagram: UseCaseDiagram, name: str) -> None:
    """Generate a PureScript definition for a portal.

    The portal takes a record with one action per use case title and returns
    a Portal holding one Button per use case, in diagram order. Each Button
    carries the set of actors allowed to press it.

    Writes go straight to `w`; any OSError it raises reaches the caller as-is.
    """
    use_cases = list(diagram.use_cases())
    permitted = build_permission_index(diagram)

    w.write(f"{name}\n")
    w.write("  :: ∀ f\n")
    w.write("   . {")
    for i, (_, use_case) in enumerate(use_cases):
        w.write(" " if i == 0 else "\n     , ")
        w.write(f"{ps_string(use_case.title)} :: f Unit")
    w.write(" }\n")
    w.write("  -> Portal f\n")

    w.write(f"{name} actions =\n")
    w.write("  Portal <<< List.fromFoldable $\n")
    w.write("    [")
    for i, (use_case_id, use_case) in enumerate(use_cases):
        w.write(" " if i == 0 else "\n    , ")
        w.write(f"Button {ps_string(use_case.title)}\n")
        w.write("             (Set.fromFoldable\n")
        w.write("                [")
        for j, actor_name in enumerate(permitted[use_case_id]):
            w.write(" " if j == 0 else "\n                , ")
            w.write(f"Actor {ps_string(actor_name)}")
        w.write(" ])\n")
        w.write(f"             actions.{ps_string(use_case.title)}")
    w.write(" ]\n")


def generate_module(
    w: TextIO, diagram: UseCaseDiagram, module_name: str, portal_name: str
) -> None:
    """Generate a complete module: header, imports, then the portal."""
    generate_module_header(w, module_name)
    generate_imports(w)
    generate_portal_definition(w, diagram, portal_name)


def render_module(diagram: UseCaseDiagram, module_name: str, portal_name: str) -> str:
    buf = io.StringIO()
    generate_module(buf, diagram, module_name, portal_name)
    return buf.getvalue()
