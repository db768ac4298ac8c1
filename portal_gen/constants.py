# portal_gen/constants.py
from __future__ import annotations

# Document sections, in the order entities are inserted into a diagram.
DOCUMENT_SECTIONS: tuple[str, ...] = (
    "actors",
    "use_cases",
    "associations",
)

# Keys whose plain scalar values may need quoting before PyYAML accepts them.
TEXT_KEYS: tuple[str, ...] = ("name", "title")

MODULE_NAME_DEFAULT = "ExamplePortal"
PORTAL_NAME_DEFAULT = "portal"
BACKEND_DEFAULT = "purescript"
