"""
Type coercion between Institution, Publisher and Funder.

An entity of one of these kinds can be viewed as another when its Role list
carries the other kind's tag. The check runs against the live Role list on
every call.
"""

from typing import Any, FrozenSet, Iterable, Iterator, Tuple

from models import DispatchError, Entity, EntityKind, expect

ROLE_KINDS: FrozenSet[EntityKind] = frozenset(
    {EntityKind.INSTITUTION, EntityKind.PUBLISHER, EntityKind.FUNDER}
)

COERCIONS: FrozenSet[Tuple[EntityKind, EntityKind]] = frozenset(
    (source, target) for source in ROLE_KINDS for target in ROLE_KINDS if source is not target
)


def has_role(entity: Entity, tag: str) -> bool:
    return any(role.role == tag for role in entity.roles or ())


def can_coerce(entity: Entity, source: EntityKind, target: EntityKind) -> bool:
    return has_role(expect(entity, source), target.role_tag)


def resolve_coercion(
    contexts: Iterable[Any], type_name: str, coerce_to_type: str
) -> Iterator[Tuple[Any, bool]]:
    """Pair every row with whether its active vertex can be viewed as `coerce_to_type`."""
    source = EntityKind.from_name(type_name)
    target = EntityKind.from_name(coerce_to_type)
    if (source, target) not in COERCIONS:
        raise DispatchError(f"Coercion from {source.value} to {target.value} is not defined")
    return _coerce_rows(contexts, source, target)


def _coerce_rows(
    contexts: Iterable[Any], source: EntityKind, target: EntityKind
) -> Iterator[Tuple[Any, bool]]:
    for ctx in contexts:
        vertex = ctx.active_vertex
        yield ctx, (vertex is not None and can_coerce(vertex, source, target))
