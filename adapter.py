"""
Adapter facade: the single surface a graph query interpreter calls into.

The adapter holds no query state. It only dispatches by kind, field, edge or
target kind to the property, neighbor and coercion resolvers, and turns
starting edges into one-shot gateway calls. All returned sequences are lazy.
"""

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from api_client import FetchError, OpenAlexAPI
from coercion import resolve_coercion
from models import DispatchError, Entity, EntityKind
from neighbors import resolve_neighbors
from properties import resolve_property

logger = logging.getLogger(__name__)

ID_SEARCH_EDGE = "OpenAlexIDSearch"
RANDOM_EDGE = "OpenAlexRandom"
SEARCH_EDGE = "OpenAlexSearch"


def _required(parameters: Mapping[str, Any], name: str, edge_name: str) -> Any:
    value = parameters.get(name)
    if value is None:
        raise DispatchError(f"Starting edge {edge_name} requires parameter {name!r}")
    return value


class OpenAlexAdapter:
    """Resolves graph queries against the OpenAlex API"""

    def __init__(self, api: Optional[OpenAlexAPI] = None):
        """
        Initialize the adapter.

        Args:
            api: Shared gateway; one built from config is used when omitted
        """
        self.api = api if api is not None else OpenAlexAPI()

    # ------------------------------------------------------------------
    # Starting vertices
    # ------------------------------------------------------------------
    def resolve_starting_vertices(
        self,
        edge_name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        resolve_info: Any = None,
    ) -> Iterator[Entity]:
        """
        Produce the vertices a query starts from.

        Supported edges:
            OpenAlexIDSearch[Kind]: look up `id`; without a kind suffix the kind comes
                from the `kind` parameter or the OpenAlex ID prefix
            OpenAlexRandom[Kind]: one random entity; `kind` parameter without suffix
            OpenAlexSearch: first page of a full-text search, params `kind` and `search`

        A fetch failure is logged and yields an empty sequence.
        """
        parameters = parameters or {}

        if edge_name.startswith(ID_SEARCH_EDGE):
            locator = str(_required(parameters, "id", edge_name))
            kind = self._starting_kind(edge_name, ID_SEARCH_EDGE, parameters, locator)
            return self._fetch_single(locator, kind)

        if edge_name.startswith(RANDOM_EDGE):
            kind = self._starting_kind(edge_name, RANDOM_EDGE, parameters)
            return self._fetch_single(self.api.random_url(kind), kind)

        if edge_name == SEARCH_EDGE:
            kind = EntityKind.from_name(_required(parameters, "kind", edge_name))
            text = str(_required(parameters, "search", edge_name))
            return self._fetch_listing(self.api.search_url(kind, text), kind)

        raise DispatchError(f"Unknown starting edge {edge_name!r}")

    def _starting_kind(
        self,
        edge_name: str,
        prefix: str,
        parameters: Mapping[str, Any],
        locator: Optional[str] = None,
    ) -> EntityKind:
        suffix = edge_name[len(prefix):]
        if suffix:
            return EntityKind.from_name(suffix)
        if parameters.get("kind") is not None:
            return EntityKind.from_name(parameters["kind"])
        if locator is not None:
            kind = EntityKind.from_openalex_id(locator)
            if kind is not None:
                return kind
        raise DispatchError(f"Starting edge {edge_name} needs a 'kind' parameter")

    def _fetch_single(self, locator: str, kind: EntityKind) -> Iterator[Entity]:
        try:
            vertex = self.api.fetch_one(locator, kind)
        except FetchError as exc:
            logger.warning("API error when fetching or deserializing %s: %s", exc.locator, exc.cause)
            return
        yield vertex

    def _fetch_listing(self, url: str, kind: EntityKind) -> Iterator[Entity]:
        try:
            page = self.api.fetch_page(url, kind)
        except FetchError as exc:
            logger.warning("API error when fetching or deserializing %s: %s", exc.locator, exc.cause)
            return
        yield from page.results

    # ------------------------------------------------------------------
    # Per-row resolution
    # ------------------------------------------------------------------
    def resolve_property(
        self, contexts: Iterable[Any], type_name: str, field_name: str, resolve_info: Any = None
    ) -> Iterator[Tuple[Any, Any]]:
        return resolve_property(contexts, type_name, field_name)

    def resolve_neighbors(
        self,
        contexts: Iterable[Any],
        type_name: str,
        edge_name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        resolve_info: Any = None,
    ) -> Iterator[Tuple[Any, Iterator[Entity]]]:
        return resolve_neighbors(self.api, contexts, type_name, edge_name, parameters)

    def resolve_coercion(
        self, contexts: Iterable[Any], type_name: str, coerce_to_type: str, resolve_info: Any = None
    ) -> Iterator[Tuple[Any, bool]]:
        return resolve_coercion(contexts, type_name, coerce_to_type)
