# portal_gen/validate.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Tuple

from .constants import DOCUMENT_SECTIONS

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Validation configuration.

    `ignore` drops issues by code; `escalate` turns warnings into errors.
    """

    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def validate_document_issues(
    document: dict[str, Any], cfg: Optional[ValidateConfig] = None
) -> list[ValidationIssue]:
    """Return structured validation issues for a diagram document.

    A document without errors always builds; warnings flag content that
    builds but likely renders in a surprising way.
    """

    cfg = cfg or ValidateConfig()
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    def section_items(section: str) -> list[tuple[int, dict[str, Any]]]:
        items = document.get(section, []) or []
        if not isinstance(items, list):
            emit(
                "error",
                "E_SECTION_NOT_LIST",
                f"document.{section} must be a list",
                path=f"/{section}",
            )
            return []

        out: list[tuple[int, dict[str, Any]]] = []
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                emit(
                    "warning",
                    "W_SECTION_ITEM_NOT_MAPPING",
                    f"document.{section} contains a non-mapping item; skipping",
                    path=f"/{section}/{i}",
                )
                continue
            out.append((i, item))
        return out

    def check_text(value: str, what: str, path: str) -> None:
        if "\n" in value or "\r" in value:
            emit(
                "warning",
                "W_TEXT_CONTAINS_NEWLINE",
                f"{what} {value!r} contains a newline",
                path=path,
                hint="Fold the text to a single line",
            )

    items_by_section = {section: section_items(section) for section in DOCUMENT_SECTIONS}

    actor_keys: dict[str, int] = {}
    actor_names: dict[str, str] = {}
    for i, actor in items_by_section["actors"]:
        key = actor.get("id")
        if not isinstance(key, str) or not key:
            emit(
                "error",
                "E_ACTOR_MISSING_ID",
                "document.actors item missing string `id`",
                path=f"/actors/{i}/id",
            )
        elif key in actor_keys:
            emit(
                "error",
                "E_ACTOR_DUPLICATE_ID",
                f"duplicate actor id {key!r} (also in actors[{actor_keys[key]}])",
                path=f"/actors/{i}/id",
            )
        else:
            actor_keys[key] = i

        name = actor.get("name")
        if not isinstance(name, str) or not name:
            emit(
                "error",
                "E_ACTOR_MISSING_NAME",
                f"actor {key!r} missing string `name`",
                path=f"/actors/{i}/name",
            )
            continue

        check_text(name, "actor name", f"/actors/{i}/name")
        if isinstance(key, str) and key:
            actor_names.setdefault(key, name)

    use_case_keys: dict[str, int] = {}
    titles_seen: dict[str, str] = {}
    for i, use_case in items_by_section["use_cases"]:
        key = use_case.get("id")
        if not isinstance(key, str) or not key:
            emit(
                "error",
                "E_USE_CASE_MISSING_ID",
                "document.use_cases item missing string `id`",
                path=f"/use_cases/{i}/id",
            )
        elif key in use_case_keys:
            emit(
                "error",
                "E_USE_CASE_DUPLICATE_ID",
                f"duplicate use case id {key!r} (also in use_cases[{use_case_keys[key]}])",
                path=f"/use_cases/{i}/id",
            )
        else:
            use_case_keys[key] = i

        title = use_case.get("title")
        if not isinstance(title, str) or not title:
            emit(
                "error",
                "E_USE_CASE_MISSING_TITLE",
                f"use case {key!r} missing string `title`",
                path=f"/use_cases/{i}/title",
            )
            continue

        check_text(title, "use case title", f"/use_cases/{i}/title")
        # Titles become record labels in the generated portal.
        if title in titles_seen:
            emit(
                "warning",
                "W_USE_CASE_DUPLICATE_TITLE",
                f"use case title {title!r} is used by both {titles_seen[title]!r} "
                f"and {key!r}; the generated action record will repeat a label",
                path=f"/use_cases/{i}/title",
            )
        else:
            titles_seen[title] = str(key)

    assoc_seen: dict[tuple[str, str], int] = {}
    # use case key -> actor name -> actor key
    names_per_use_case: dict[str, dict[str, str]] = {}
    for i, assoc in items_by_section["associations"]:
        actor_key, use_case_key = assoc.get("actor"), assoc.get("use_case")
        if not (isinstance(actor_key, str) and actor_key) or not (
            isinstance(use_case_key, str) and use_case_key
        ):
            emit(
                "error",
                "E_ASSOC_MISSING_REF",
                "association must name both an `actor` and a `use_case` id",
                path=f"/associations/{i}",
            )
            continue

        known = True
        if actor_key not in actor_keys:
            emit(
                "error",
                "E_ASSOC_UNKNOWN_ACTOR",
                f"association references unknown actor id {actor_key!r}",
                path=f"/associations/{i}/actor",
            )
            known = False
        if use_case_key not in use_case_keys:
            emit(
                "error",
                "E_ASSOC_UNKNOWN_USE_CASE",
                f"association references unknown use case id {use_case_key!r}",
                path=f"/associations/{i}/use_case",
            )
            known = False
        if not known:
            continue

        pair = (actor_key, use_case_key)
        if pair in assoc_seen:
            emit(
                "warning",
                "W_ASSOC_DUPLICATE",
                f"duplicate association {actor_key!r} -> {use_case_key!r} "
                f"(also in associations[{assoc_seen[pair]}])",
                path=f"/associations/{i}",
            )
            continue
        assoc_seen[pair] = i

        name = actor_names.get(actor_key)
        if name is None:
            continue
        by_name = names_per_use_case.setdefault(use_case_key, {})
        if name in by_name and by_name[name] != actor_key:
            emit(
                "warning",
                "W_ACTOR_DUPLICATE_NAME",
                f"actors {by_name[name]!r} and {actor_key!r} share the name {name!r} "
                f"on use case {use_case_key!r}; they collapse into one permitted actor",
                path=f"/associations/{i}",
            )
        else:
            by_name[name] = actor_key

    return issues


def validate_document(document: dict[str, Any]) -> Tuple[list[str], list[str]]:
    """Validate a diagram document, returning (errors, warnings) as messages."""
    issues = validate_document_issues(document)
    errors = [iss.message for iss in issues if iss.severity == "error"]
    warnings = [iss.message for iss in issues if iss.severity == "warning"]
    return errors, warnings
