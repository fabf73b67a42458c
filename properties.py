"""
Property resolution: extracts field values from already-fetched entities.

Every kind has a fixed table mapping schema field names to getters. Missing
remote data resolves to None; a field name outside the table is a DispatchError.
"""

from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from models import DispatchError, Entity, EntityKind, expect

TYPENAME = "__typename"

PropertyGetter = Callable[[Entity], Any]


def _header(attr: str) -> PropertyGetter:
    return lambda entity: getattr(entity.header, attr)


def _ids(attr: str) -> PropertyGetter:
    def getter(entity: Entity) -> Any:
        ids = entity.header.ids
        return None if ids is None else getattr(ids, attr)

    return getter


def _nested(attr: str, sub: str) -> PropertyGetter:
    """Unwrap an optional sub-object; its absence makes every sub-field absent."""

    def getter(entity: Entity) -> Any:
        value = getattr(entity, attr)
        return None if value is None else getattr(value, sub)

    return getter


def _rendered(attr: str, template: str) -> PropertyGetter:
    """Render each structured list entry through `template`, keeping upstream order."""

    def getter(entity: Entity) -> Optional[list]:
        entries = getattr(entity, attr)
        if entries is None:
            return None
        return [template.format(**vars(entry)) for entry in entries]

    return getter


def _mean_citedness(entity: Entity) -> Optional[float]:
    stats = entity.summary_stats
    if stats is None or stats.two_year_mean_citedness is None:
        return None
    return float(stats.two_year_mean_citedness)


HEADER_PROPERTIES: Dict[str, PropertyGetter] = {
    "id": _header("id"),
    "display_name": _header("display_name"),
    "cited_by_count": _header("cited_by_count"),
    "created_date": _header("created_date"),
    "updated_date": _header("updated_date"),
    "ids_doi": _ids("doi"),
    "ids_mag": _ids("mag"),
    "ids_openalex": _ids("openalex"),
    "ids_pmid": _ids("pmid"),
    "ids_pmcid": _ids("pmcid"),
}

SUMMARY_STATS_PROPERTIES: Dict[str, PropertyGetter] = {
    "summary_stats_mean_citeness": _mean_citedness,
    "summary_stats_h_index": _nested("summary_stats", "h_index"),
    "summary_stats_i10_index": _nested("summary_stats", "i10_index"),
}

WORK_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    "abstract_text": attrgetter("abstract"),
    "apc_list_value": _nested("apc_list", "value"),
    "apc_list_currency": _nested("apc_list", "currency"),
    "apc_list_provenance": _nested("apc_list", "provenance"),
    "apc_list_value_usd": _nested("apc_list", "value_usd"),
    "apc_payment_value": _nested("apc_paid", "value"),
    "apc_payment_currency": _nested("apc_paid", "currency"),
    "apc_payment_provenance": _nested("apc_paid", "provenance"),
    "apc_payment_value_usd": _nested("apc_paid", "value_usd"),
    "best_oa_location_is_oa": _nested("best_oa_location", "is_oa"),
    "best_oa_location_landing_page_url": _nested("best_oa_location", "landing_page_url"),
    "best_oa_location_license": _nested("best_oa_location", "license"),
    "best_oa_location_pdf_url": _nested("best_oa_location", "pdf_url"),
    "best_oa_location_version": _nested("best_oa_location", "version"),
    "biblio_volume": _nested("biblio", "volume"),
    "biblio_issue": _nested("biblio", "issue"),
    "biblio_first_page": _nested("biblio", "first_page"),
    "biblio_last_page": _nested("biblio", "last_page"),
    "doi": attrgetter("doi"),
    "is_paratext": attrgetter("is_paratext"),
    "is_retracted": attrgetter("is_retracted"),
    "language": attrgetter("language"),
    "open_access_is_oa": _nested("open_access", "is_oa"),
    "open_access_oa_status": _nested("open_access", "oa_status"),
    "open_access_oa_url": _nested("open_access", "oa_url"),
    "open_access_fulltext": _nested("open_access", "any_repository_has_fulltext"),
    "publication_date": attrgetter("publication_date"),
    "publication_year": attrgetter("publication_year"),
    "referenced_works": attrgetter("referenced_works"),
    "related_works": attrgetter("related_works"),
    "title": attrgetter("title"),
    "ttype": attrgetter("type"),
    "is_oa": attrgetter("is_oa"),
    "license": attrgetter("license"),
}

AUTHOR_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "display_name_alternatives": attrgetter("display_name_alternatives"),
    "orcid": attrgetter("orcid"),
    "works_count": attrgetter("works_count"),
}

SOURCE_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "abreviated_title": attrgetter("abbreviated_title"),
    "alternative_titles": attrgetter("alternate_titles"),
    "apc_payment": _rendered("apc_prices", "{price} - {currency}"),
    "apc_usd": attrgetter("apc_usd"),
    "country_code": attrgetter("country_code"),
    "homepage_url": attrgetter("homepage_url"),
    "host_organization_name": attrgetter("host_organization_name"),
    "is_in_doaj": attrgetter("is_in_doaj"),
    "is_oa": attrgetter("is_oa"),
    "issn": attrgetter("issn"),
    "issn_l": attrgetter("issn_l"),
    "societies": _rendered("societies", "{url} - {organization}"),
    "ttype": attrgetter("type"),
    "works_api_url": attrgetter("works_api_url"),
    "works_count": attrgetter("works_count"),
}

CONCEPT_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "description": attrgetter("description"),
    "image_thumbnail_url": attrgetter("image_thumbnail_url"),
    "image_url": attrgetter("image_url"),
    "level": attrgetter("level"),
    "wikidata": attrgetter("wikidata"),
    "works_count": attrgetter("works_count"),
}

INSTITUTION_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "country_codes": attrgetter("country_code"),
    "display_name_alternatives": attrgetter("display_name_alternatives"),
    "geo_city": _nested("geo", "city"),
    "geo_geonames_city_id": _nested("geo", "geonames_city_id"),
    "geo_region": _nested("geo", "region"),
    "geo_country_code": _nested("geo", "country_code"),
    "geo_country": _nested("geo", "country"),
    "geo_latitude": _nested("geo", "latitude"),
    "geo_longitude": _nested("geo", "longitude"),
    "homepage_url": attrgetter("homepage_url"),
    "ror": attrgetter("ror"),
    "ttype": attrgetter("type"),
    "works_count": attrgetter("works_count"),
}

PUBLISHER_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "alternative_titles": attrgetter("alternate_titles"),
    "country_codes": attrgetter("country_codes"),
    "hierarchy_level": attrgetter("hierarchy_level"),
    "image_thumbnail_url": attrgetter("image_thumbnail_url"),
    "image_url": attrgetter("image_url"),
    "works_count": attrgetter("works_count"),
}

FUNDER_PROPERTIES: Dict[str, PropertyGetter] = {
    **HEADER_PROPERTIES,
    **SUMMARY_STATS_PROPERTIES,
    "alternative_titles": attrgetter("alternate_titles"),
    "country_code": attrgetter("country_code"),
    "description": attrgetter("description"),
    "grants_count": attrgetter("grants_count"),
    "homepage_url": attrgetter("homepage_url"),
    "image_thumbnail_url": attrgetter("image_thumbnail_url"),
    "image_url": attrgetter("image_url"),
    "works_count": attrgetter("works_count"),
}

PROPERTY_TABLES: Dict[EntityKind, Dict[str, PropertyGetter]] = {
    EntityKind.WORK: WORK_PROPERTIES,
    EntityKind.AUTHOR: AUTHOR_PROPERTIES,
    EntityKind.SOURCE: SOURCE_PROPERTIES,
    EntityKind.CONCEPT: CONCEPT_PROPERTIES,
    EntityKind.INSTITUTION: INSTITUTION_PROPERTIES,
    EntityKind.PUBLISHER: PUBLISHER_PROPERTIES,
    EntityKind.FUNDER: FUNDER_PROPERTIES,
}


def property_getter(kind: EntityKind, field_name: str) -> PropertyGetter:
    try:
        return PROPERTY_TABLES[kind][field_name]
    except KeyError:
        raise DispatchError(f"{kind.value} property {field_name!r} is not defined") from None


def resolve_property(
    contexts: Iterable[Any], type_name: str, field_name: str
) -> Iterator[Tuple[Any, Any]]:
    """
    Pair every row with the value of `field_name` on its active vertex.

    Output rows correspond one-to-one, in order, with input rows. Rows without an
    active vertex get None. Unknown kinds or fields raise DispatchError here,
    before any row is consumed.
    """
    kind = EntityKind.from_name(type_name)
    if field_name == TYPENAME:
        return _map_rows(contexts, lambda vertex: vertex.typename)

    getter = property_getter(kind, field_name)
    return _map_rows(contexts, lambda vertex: getter(expect(vertex, kind)))


def _map_rows(contexts: Iterable[Any], extract: PropertyGetter) -> Iterator[Tuple[Any, Any]]:
    for ctx in contexts:
        vertex = ctx.active_vertex
        yield ctx, (None if vertex is None else extract(vertex))
