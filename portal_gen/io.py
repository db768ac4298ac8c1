# portal_gen/io.py
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import TEXT_KEYS
from .diagram import Actor, ActorId, UseCase, UseCaseDiagram, UseCaseId

_TEXT_LINE_RE = re.compile(
    r"^(\s*(?:-\s*)?(?:" + "|".join(TEXT_KEYS) + r"):\s*)(.+)$"
)


def _sanitize_yaml_for_pyyaml(raw: str) -> tuple[str, list[tuple[int, str, str]]]:
    """Return (sanitized_yaml, changes).

    Each change is (line_number_1_based, original_line, new_line).
    """
    changes: list[tuple[int, str, str]] = []
    out_lines: list[str] = []

    for i, line in enumerate(raw.splitlines(), start=1):
        match = _TEXT_LINE_RE.match(line)
        if not match:
            out_lines.append(line)
            continue

        prefix, value = match.group(1), match.group(2)

        # Already quoted or a block scalar.
        if value.startswith(("'", '"', "|", ">")):
            out_lines.append(line)
            continue

        # PyYAML rejects plain scalars containing ":" followed by whitespace or
        # EOL (e.g. "title: Billing: refund order"). Keep trailing comments.
        body, comment = value, ""
        m = re.match(r"^(.*?)(\s+#.*)$", value)
        if m:
            body, comment = m.group(1), m.group(2)

        if re.search(r":(?=\s|$)", body):
            escaped = body.replace("\\", "\\\\").replace('"', '\\"')
            new_line = f'{prefix}"{escaped}"{comment}'
            out_lines.append(new_line)
            if new_line != line:
                changes.append((i, line, new_line))
        else:
            out_lines.append(line)

    sanitized = "\n".join(out_lines) + ("\n" if raw.endswith("\n") else "")
    return sanitized, changes


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        sanitized, changes = _sanitize_yaml_for_pyyaml(raw)
        try:
            data = yaml.safe_load(sanitized)
        except yaml.YAMLError as e2:
            raise ValueError(f"Failed to parse YAML {path}: {e2}") from e2

        if changes:
            print(
                f"warning: parsed {path} after sanitizing {len(changes)} line(s); "
                "consider quoting values containing ':' followed by whitespace",
                file=sys.stderr,
            )
            for (ln, old, new) in changes[:10]:
                print(f"warning: {path}:{ln}: {old}", file=sys.stderr)
                print(f"warning: {path}:{ln}: {new}", file=sys.stderr)
            if len(changes) > 10:
                print(f"warning: (and {len(changes) - 10} more)", file=sys.stderr)

    # An empty file is an empty diagram.
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def _deep_merge(dst: dict[str, Any], src: dict[str, Any], *, src_path: Path) -> None:
    """Deep-merge `src` into `dst`.

    Merge rules:
      - missing key -> copy
      - list + list -> concatenate (preserve file order)
      - dict + dict -> recursive merge
      - scalar conflicts -> error (unless equal)
    """
    for key, value in src.items():
        if key not in dst:
            dst[key] = value
            continue

        existing = dst[key]
        if isinstance(existing, list) and isinstance(value, list):
            dst[key] = existing + value
            continue

        if isinstance(existing, dict) and isinstance(value, dict):
            _deep_merge(existing, value, src_path=src_path)
            continue

        if existing == value:
            continue

        raise ValueError(
            f"Document merge conflict on key {key!r} from {src_path}: "
            f"existing type={type(existing).__name__}, new type={type(value).__name__}"
        )


def load_document(*paths: Path) -> dict[str, Any]:
    """Load one or more YAML diagram documents, merged in argument order."""
    merged: dict[str, Any] = {}
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(str(path))
        _deep_merge(merged, _load_yaml_mapping(path), src_path=path)
    return merged


@dataclass
class DiagramBuild:
    """A diagram together with the document keys its ids were built from."""

    diagram: UseCaseDiagram
    actor_ids: dict[str, ActorId] = field(default_factory=dict)
    use_case_ids: dict[str, UseCaseId] = field(default_factory=dict)


def _require_str(val: object, *, path: str) -> str:
    if not isinstance(val, str) or not val:
        raise TypeError(f"Expected non-empty string at {path}, got: {val!r}")
    return val


def _mapping_items(document: dict[str, Any], section: str) -> list[tuple[int, dict[str, Any]]]:
    items = document.get(section, []) or []
    if not isinstance(items, list):
        raise TypeError(f"document.{section} must be a list")
    return [(i, item) for i, item in enumerate(items) if isinstance(item, dict)]


def build_diagram(document: dict[str, Any]) -> DiagramBuild:
    """Build a UseCaseDiagram from a loaded document.

    Actors, use cases and associations are inserted in document order.
    Non-mapping items are skipped (the validator reports them). Malformed
    items raise TypeError, and an association naming an undeclared actor or
    use case key raises KeyError.
    """
    build = DiagramBuild(diagram=UseCaseDiagram())

    for i, item in _mapping_items(document, "actors"):
        key = _require_str(item.get("id"), path=f"/actors/{i}/id")
        name = _require_str(item.get("name"), path=f"/actors/{i}/name")
        build.actor_ids[key] = build.diagram.insert_actor(Actor(name=name))

    for i, item in _mapping_items(document, "use_cases"):
        key = _require_str(item.get("id"), path=f"/use_cases/{i}/id")
        title = _require_str(item.get("title"), path=f"/use_cases/{i}/title")
        build.use_case_ids[key] = build.diagram.insert_use_case(UseCase(title=title))

    for i, item in _mapping_items(document, "associations"):
        actor_key = _require_str(item.get("actor"), path=f"/associations/{i}/actor")
        use_case_key = _require_str(
            item.get("use_case"), path=f"/associations/{i}/use_case"
        )
        if actor_key not in build.actor_ids:
            raise KeyError(f"association references unknown actor {actor_key!r}")
        if use_case_key not in build.use_case_ids:
            raise KeyError(f"association references unknown use case {use_case_key!r}")
        build.diagram.insert_association(
            build.actor_ids[actor_key], build.use_case_ids[use_case_key]
        )

    return build
