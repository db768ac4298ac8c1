from pathlib import Path

import pytest

from portal_gen.diagram import ActorId, UseCaseId
from portal_gen.io import _sanitize_yaml_for_pyyaml, build_diagram, load_document


FIXTURE_DIR = Path(__file__).resolve().parents[1] / "fixtures" / "documents"


def write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_single_document():
    document = load_document(FIXTURE_DIR / "example_portal.yaml")

    assert [a["name"] for a in document["actors"]] == ["Administrator", "Subscriber"]
    assert len(document["use_cases"]) == 3
    assert len(document["associations"]) == 5


def test_split_documents_merge_to_the_same_document():
    merged = load_document(FIXTURE_DIR / "actors.yaml", FIXTURE_DIR / "use_cases.yaml")
    single = load_document(FIXTURE_DIR / "example_portal.yaml")

    assert merged == single


def test_lists_concatenate_in_argument_order(tmp_path):
    first = write_yaml(tmp_path / "a.yaml", "actors:\n  - id: a\n    name: A\n")
    second = write_yaml(tmp_path / "b.yaml", "actors:\n  - id: b\n    name: B\n")

    document = load_document(second, first)

    assert [a["id"] for a in document["actors"]] == ["b", "a"]


def test_scalar_conflict_raises(tmp_path):
    first = write_yaml(tmp_path / "a.yaml", "version: 1\n")
    second = write_yaml(tmp_path / "b.yaml", "version: 2\n")

    with pytest.raises(ValueError, match="merge conflict"):
        load_document(first, second)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "nope.yaml")


def test_top_level_must_be_mapping(tmp_path):
    path = write_yaml(tmp_path / "list.yaml", "- id: a\n")

    with pytest.raises(TypeError):
        load_document(path)


def test_empty_file_is_empty_document(tmp_path):
    path = write_yaml(tmp_path / "empty.yaml", "")

    assert load_document(path) == {}


def test_unquoted_colon_in_title_is_sanitized(tmp_path, capsys):
    path = write_yaml(
        tmp_path / "colon.yaml",
        "use_cases:\n  - id: refund\n    title: Billing: refund order  # finance\n",
    )

    document = load_document(path)

    assert document["use_cases"][0]["title"] == "Billing: refund order"
    assert "after sanitizing 1 line(s)" in capsys.readouterr().err


def test_sanitize_leaves_quoted_values_alone():
    raw = 'title: "Billing: refund"\nname: Plain\n'
    sanitized, changes = _sanitize_yaml_for_pyyaml(raw)

    assert sanitized == raw
    assert changes == []


def test_build_diagram_assigns_ids_in_document_order():
    build = build_diagram(load_document(FIXTURE_DIR / "example_portal.yaml"))

    assert build.actor_ids == {"admin": ActorId(0), "subscriber": ActorId(1)}
    assert build.use_case_ids == {
        "ban_subscriber": UseCaseId(0),
        "create_subscriber": UseCaseId(1),
        "post_comment": UseCaseId(2),
    }
    assert list(build.diagram.associations()) == [
        (ActorId(0), UseCaseId(0)),
        (ActorId(0), UseCaseId(1)),
        (ActorId(0), UseCaseId(2)),
        (ActorId(1), UseCaseId(1)),
        (ActorId(1), UseCaseId(2)),
    ]


def test_build_diagram_skips_non_mapping_items():
    build = build_diagram({"actors": ["oops", {"id": "a", "name": "A"}]})

    assert len(build.diagram.actors()) == 1


def test_build_diagram_rejects_unknown_reference():
    document = {
        "actors": [{"id": "a", "name": "A"}],
        "use_cases": [{"id": "u", "title": "U"}],
        "associations": [{"actor": "a", "use_case": "missing"}],
    }

    with pytest.raises(KeyError):
        build_diagram(document)


def test_build_diagram_rejects_missing_name():
    with pytest.raises(TypeError):
        build_diagram({"actors": [{"id": "a"}]})
