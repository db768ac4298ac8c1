from __future__ import annotations

import re

# Value-level identifiers (functions, record values) start lower-case or "_".
PS_IDENT_RE = re.compile(r"^[a-z_][A-Za-z0-9_']*$")

# Module names are dot-separated proper names: Foo, Foo.Bar, Foo.Bar2.
PS_MODULE_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*(\.[A-Z][A-Za-z0-9_']*)*$")

PS_RESERVED = {
    "ado", "case", "class", "data", "derive", "do", "else", "false", "forall",
    "foreign", "if", "import", "in", "infix", "infixl", "infixr", "instance",
    "let", "module", "newtype", "of", "then", "true", "type", "where",
}

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def ps_string(text: str) -> str:
    """Render text as a double-quoted PureScript string literal."""
    out: list[str] = ['"']
    for ch in str(text):
        if ch in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            # Fixed width so a following hex digit is never read as part of the escape.
            out.append(f"\\x{ord(ch):06x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def assert_ps_ident(value: str) -> str:
    if not PS_IDENT_RE.match(value) or value in PS_RESERVED:
        raise ValueError(f"Not a PureScript value identifier: {value!r}")
    return value


def assert_ps_module_name(value: str) -> str:
    if not PS_MODULE_NAME_RE.match(value):
        raise ValueError(f"Not a PureScript module name: {value!r}")
    return value
