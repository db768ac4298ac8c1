from __future__ import annotations

from .diagram import UseCaseDiagram, UseCaseId


def permitted_actor_names(diagram: UseCaseDiagram, use_case_id: UseCaseId) -> list[str]:
    """Names of the actors associated with one use case, without duplicates."""
    names: list[str] = []
    seen: set[str] = set()
    for actor_id, assoc_use_case_id in diagram.associations():
        if assoc_use_case_id != use_case_id:
            continue

        actor = diagram.actor(actor_id)
        assert actor is not None, f"association refers to nonexistent actor {actor_id}"
        if actor.name not in seen:
            names.append(actor.name)
            seen.add(actor.name)

    return names


def build_permission_index(diagram: UseCaseDiagram) -> dict[UseCaseId, list[str]]:
    """Index permitted actor names by use case in a single pass over associations.

    Every use case gets an entry (possibly empty). Names keep association
    order and collapse duplicates, same as permitted_actor_names().
    """
    index: dict[UseCaseId, list[str]] = {uc_id: [] for uc_id, _ in diagram.use_cases()}
    seen: dict[UseCaseId, set[str]] = {uc_id: set() for uc_id in index}

    for actor_id, use_case_id in diagram.associations():
        actor = diagram.actor(actor_id)
        assert actor is not None, f"association refers to nonexistent actor {actor_id}"
        if actor.name not in seen[use_case_id]:
            index[use_case_id].append(actor.name)
            seen[use_case_id].add(actor.name)

    return index
