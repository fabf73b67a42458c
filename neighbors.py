"""
Neighbor resolution: turns identifiers embedded in an entity into freshly
fetched neighbor entities.

Each edge has one of four expansion policies:

- single:  one optional identifier -> at most one neighbor
- many:    ordered identifier list -> one neighbor per identifier that fetches
- listing: a listing URL -> the first page of results
- by_role: the id of the first Role entry carrying the target kind's tag

Every policy is a generator, so nothing is fetched until the interpreter pulls
from the neighbor iterator, and an abandoned iterator fetches nothing more.
A fetch failure drops that element only; it is logged, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from api_client import FetchError, OpenAlexAPI
from models import DispatchError, Entity, EntityKind, expect

logger = logging.getLogger(__name__)

Expander = Callable[[OpenAlexAPI, Entity], Iterator[Entity]]


@dataclass(frozen=True)
class NeighborEdge:
    target: EntityKind
    expand: Expander


def _fetch_or_log(api: OpenAlexAPI, locator: str, kind: EntityKind) -> Optional[Entity]:
    try:
        return api.fetch_one(locator, kind)
    except FetchError as exc:
        logger.warning("API error when fetching or deserializing %s: %s", exc.locator, exc.cause)
        return None


def role_target(entity: Entity, tag: str) -> Optional[str]:
    """Return the id of the first Role entry tagged `tag`, if any."""
    for role in entity.roles or ():
        if role.role == tag:
            return role.id
    return None


# ----------------------------------------------------------------------
# Expansion policies
# ----------------------------------------------------------------------
def single(locate: Callable[[Entity], Optional[str]], target: EntityKind) -> NeighborEdge:
    def expand(api: OpenAlexAPI, entity: Entity) -> Iterator[Entity]:
        locator = locate(entity)
        if not locator:
            return
        neighbor = _fetch_or_log(api, locator, target)
        if neighbor is not None:
            yield neighbor

    return NeighborEdge(target, expand)


def many(locate: Callable[[Entity], Optional[Iterable[str]]], target: EntityKind) -> NeighborEdge:
    def expand(api: OpenAlexAPI, entity: Entity) -> Iterator[Entity]:
        for locator in locate(entity) or ():
            if not locator:
                continue
            neighbor = _fetch_or_log(api, locator, target)
            if neighbor is not None:
                yield neighbor

    return NeighborEdge(target, expand)


def listing(locate: Callable[[Entity], Optional[str]], target: EntityKind) -> NeighborEdge:
    def expand(api: OpenAlexAPI, entity: Entity) -> Iterator[Entity]:
        url = locate(entity)
        if not url:
            return
        try:
            page = api.fetch_page(url, target)
        except FetchError as exc:
            logger.warning(
                "API error when fetching or deserializing %s: %s", exc.locator, exc.cause
            )
            return
        yield from page.results

    return NeighborEdge(target, expand)


def by_role(target: EntityKind) -> NeighborEdge:
    def expand(api: OpenAlexAPI, entity: Entity) -> Iterator[Entity]:
        locator = role_target(entity, target.role_tag)
        if locator is None:
            logger.debug("%s %s has no linked %s", entity.typename, entity.id, target.role_tag)
            return
        neighbor = _fetch_or_log(api, locator, target)
        if neighbor is not None:
            yield neighbor

    return NeighborEdge(target, expand)


# ----------------------------------------------------------------------
# Locators
# ----------------------------------------------------------------------
def _ref_ids(attr: str) -> Callable[[Entity], List[Optional[str]]]:
    """Ids of a list of dehydrated references"""
    return lambda entity: [ref.id for ref in getattr(entity, attr) or ()]


def _field(attr: str) -> Callable[[Entity], Any]:
    return lambda entity: getattr(entity, attr)


def _authorship_ids(work: Entity) -> List[Optional[str]]:
    return [
        authorship.author.id
        for authorship in work.authorships or ()
        if authorship.author is not None
    ]


def _grant_funder_ids(work: Entity) -> List[Optional[str]]:
    return [grant.funder for grant in work.grants or ()]


def _primary_source_id(work: Entity) -> Optional[str]:
    location = work.primary_location
    if location is None or location.source is None:
        return None
    return location.source.id


def _last_known_institution_id(author: Entity) -> Optional[str]:
    institution = author.last_known_institution
    return None if institution is None else institution.id


NEIGHBOR_TABLES: Dict[EntityKind, Dict[str, NeighborEdge]] = {
    EntityKind.WORK: {
        "Authors": many(_authorship_ids, EntityKind.AUTHOR),
        "Cited_by": listing(_field("cited_by_api_url"), EntityKind.WORK),
        "Concepts": many(_ref_ids("concepts"), EntityKind.CONCEPT),
        "Funders": many(_grant_funder_ids, EntityKind.FUNDER),
        "References": many(_field("referenced_works"), EntityKind.WORK),
        "Related": many(_field("related_works"), EntityKind.WORK),
        "PrimarySource": single(_primary_source_id, EntityKind.SOURCE),
    },
    EntityKind.AUTHOR: {
        "Institution": single(_last_known_institution_id, EntityKind.INSTITUTION),
        "Works": listing(_field("works_api_url"), EntityKind.WORK),
    },
    EntityKind.SOURCE: {
        "Host": single(_field("host_organization"), EntityKind.INSTITUTION),
        "Lineage": many(_field("host_organization_lineage"), EntityKind.INSTITUTION),
        "Works": listing(_field("works_api_url"), EntityKind.WORK),
    },
    EntityKind.CONCEPT: {
        "Ancestors": many(_ref_ids("ancestors"), EntityKind.CONCEPT),
        "Related": many(_ref_ids("related_concepts"), EntityKind.CONCEPT),
        "Works": listing(_field("works_api_url"), EntityKind.WORK),
    },
    EntityKind.INSTITUTION: {
        "Associated": many(_ref_ids("associated_institutions"), EntityKind.INSTITUTION),
        "Repositories": many(_ref_ids("repositories"), EntityKind.SOURCE),
        "Publisher": by_role(EntityKind.PUBLISHER),
        "Funder": by_role(EntityKind.FUNDER),
        "Works": listing(_field("works_api_url"), EntityKind.WORK),
    },
    EntityKind.PUBLISHER: {
        "Lineage": many(_field("lineage"), EntityKind.PUBLISHER),
        "Institution": by_role(EntityKind.INSTITUTION),
        "Funder": by_role(EntityKind.FUNDER),
        "Sources": listing(_field("sources_api_url"), EntityKind.SOURCE),
        "Parent": single(_field("parent_publisher"), EntityKind.PUBLISHER),
    },
    EntityKind.FUNDER: {
        "Institution": by_role(EntityKind.INSTITUTION),
        "Publisher": by_role(EntityKind.PUBLISHER),
    },
}


def neighbor_edge(kind: EntityKind, edge_name: str) -> NeighborEdge:
    try:
        return NEIGHBOR_TABLES[kind][edge_name]
    except KeyError:
        raise DispatchError(f"{kind.value} has no edge {edge_name!r}") from None


def resolve_neighbors(
    api: OpenAlexAPI,
    contexts: Iterable[Any],
    type_name: str,
    edge_name: str,
    parameters: Optional[Mapping[str, Any]] = None,
) -> Iterator[Tuple[Any, Iterator[Entity]]]:
    """
    Pair every row with a lazy iterator over its neighbors along `edge_name`.

    Rows without an active vertex get an empty iterator. No edge currently takes
    parameters; they are accepted for interface compatibility.
    """
    kind = EntityKind.from_name(type_name)
    edge = neighbor_edge(kind, edge_name)
    return _expand_rows(api, contexts, kind, edge)


def _expand_rows(
    api: OpenAlexAPI, contexts: Iterable[Any], kind: EntityKind, edge: NeighborEdge
) -> Iterator[Tuple[Any, Iterator[Entity]]]:
    for ctx in contexts:
        vertex = ctx.active_vertex
        if vertex is None:
            yield ctx, iter(())
        else:
            yield ctx, edge.expand(api, expect(vertex, kind))
