# portal_gen/diagram.py
from __future__ import annotations

from dataclasses import dataclass
from typing import ItemsView, KeysView, Optional


@dataclass(frozen=True, order=True)
class ActorId:
    """An actor identifier is unique per use case diagram."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"ActorId must be non-negative, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class UseCaseId:
    """A use case identifier is unique per use case diagram."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"UseCaseId must be non-negative, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Actor:
    """An actor of zero or more use cases."""

    name: str


@dataclass(frozen=True)
class UseCase:
    title: str


Association = tuple[ActorId, UseCaseId]


class AssociationError(Exception):
    """An association refers to an actor or use case that does not exist."""


class NonexistentActor(AssociationError):
    def __init__(self, actor_id: ActorId) -> None:
        super().__init__(f"invalid association: nonexistent actor {actor_id}")
        self.actor_id = actor_id


class NonexistentUseCase(AssociationError):
    def __init__(self, use_case_id: UseCaseId) -> None:
        super().__init__(f"invalid association: nonexistent use case {use_case_id}")
        self.use_case_id = use_case_id


class InvariantViolation(AssertionError):
    """Internal consistency failure of a UseCaseDiagram (a bug, never user input)."""


class UseCaseDiagram:
    """A use case diagram is a graph of actors, use cases, and associations.

    The diagram is append-only. Identifiers are handed out monotonically from
    zero and never reused. All collections iterate in insertion order, so
    anything rendered from a diagram is reproducible.
    """

    def __init__(self) -> None:
        self._next_actor_id = 0
        self._next_use_case_id = 0

        self._actors: dict[ActorId, Actor] = {}
        self._use_cases: dict[UseCaseId, UseCase] = {}
        # dict keys double as an insertion-ordered set
        self._associations: dict[Association, None] = {}

        self.check_invariants()

    def __repr__(self) -> str:
        return (
            f"UseCaseDiagram(actors={len(self._actors)}, "
            f"use_cases={len(self._use_cases)}, "
            f"associations={len(self._associations)})"
        )

    def actor(self, actor_id: ActorId) -> Optional[Actor]:
        """Get the actor with the given identifier, or None."""
        return self._actors.get(actor_id)

    def use_case(self, use_case_id: UseCaseId) -> Optional[UseCase]:
        """Get the use case with the given identifier, or None."""
        return self._use_cases.get(use_case_id)

    def actors(self) -> ItemsView[ActorId, Actor]:
        """All actors in this diagram as (ActorId, Actor) pairs."""
        return self._actors.items()

    def use_cases(self) -> ItemsView[UseCaseId, UseCase]:
        """All use cases in this diagram as (UseCaseId, UseCase) pairs."""
        return self._use_cases.items()

    def associations(self) -> KeysView[Association]:
        """All associations in this diagram as (ActorId, UseCaseId) pairs."""
        return self._associations.keys()

    def insert_actor(self, actor: Actor) -> ActorId:
        """Insert a new actor, returning its identifier."""
        actor_id = ActorId(self._next_actor_id)
        self._next_actor_id += 1
        self._actors[actor_id] = actor
        self.check_invariants()
        return actor_id

    def insert_use_case(self, use_case: UseCase) -> UseCaseId:
        """Insert a new use case, returning its identifier."""
        use_case_id = UseCaseId(self._next_use_case_id)
        self._next_use_case_id += 1
        self._use_cases[use_case_id] = use_case
        self.check_invariants()
        return use_case_id

    def insert_association(self, actor_id: ActorId, use_case_id: UseCaseId) -> None:
        """Insert an association between an existing actor and use case.

        Raises NonexistentActor or NonexistentUseCase (checked in that order)
        and leaves the diagram untouched when either side is unknown.
        Inserting an existing association again is a no-op.
        """
        if actor_id not in self._actors:
            raise NonexistentActor(actor_id)
        if use_case_id not in self._use_cases:
            raise NonexistentUseCase(use_case_id)
        self._associations[(actor_id, use_case_id)] = None
        self.check_invariants()

    def check_invariants(self) -> None:
        """Raise InvariantViolation if the diagram is internally inconsistent."""
        for actor_id, use_case_id in self._associations:
            if actor_id not in self._actors:
                raise InvariantViolation(
                    "UseCaseDiagram invariant violation: association refers to "
                    f"nonexistent actor {actor_id}"
                )
            if use_case_id not in self._use_cases:
                raise InvariantViolation(
                    "UseCaseDiagram invariant violation: association refers to "
                    f"nonexistent use case {use_case_id}"
                )

        # Every handed-out id is below the counter, so none can be handed out again.
        for actor_id in self._actors:
            if actor_id.value >= self._next_actor_id:
                raise InvariantViolation(
                    f"UseCaseDiagram invariant violation: actor id {actor_id} "
                    "was not allocated by this diagram"
                )
        for use_case_id in self._use_cases:
            if use_case_id.value >= self._next_use_case_id:
                raise InvariantViolation(
                    f"UseCaseDiagram invariant violation: use case id {use_case_id} "
                    "was not allocated by this diagram"
                )
