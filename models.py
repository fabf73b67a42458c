"""
Data models for OpenAlex entities.

Each of the seven OpenAlex resource types is a dataclass record that mirrors the
JSON returned by the API. Optional remote fields decode to None when the API
omits them; they are never replaced by a default value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Type, TypeVar


class DispatchError(RuntimeError):
    """An unknown kind/field/edge combination or a kind mismatch after dispatch.

    Signals that the query schema and the resolver tables have drifted apart.
    Never caught inside this package.
    """


class EntityKind(str, Enum):
    """The closed set of OpenAlex vertex kinds"""

    WORK = "Work"
    AUTHOR = "Author"
    SOURCE = "Source"
    CONCEPT = "Concept"
    INSTITUTION = "Institution"
    PUBLISHER = "Publisher"
    FUNDER = "Funder"

    @property
    def collection(self) -> str:
        """REST collection path, e.g. 'works'"""
        return self.value.lower() + "s"

    @property
    def id_prefix(self) -> str:
        return self.value[0]

    @property
    def role_tag(self) -> str:
        """Tag naming this kind inside a Role list"""
        return self.value.lower()

    @classmethod
    def from_name(cls, name: str) -> "EntityKind":
        try:
            return cls(name)
        except ValueError:
            raise DispatchError(f"Not a valid vertex kind: {name!r}") from None

    @classmethod
    def from_openalex_id(cls, locator: str) -> Optional["EntityKind"]:
        """Infer the kind from an OpenAlex ID such as 'W2741809807' or its URL form."""
        key = locator.rstrip("/").rsplit("/", 1)[-1]
        if len(key) < 2 or not key[1:].isdigit():
            return None
        for kind in cls:
            if key[0].upper() == kind.id_prefix:
                return kind
        return None


T = TypeVar("T")


def _mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _obj(data: Dict[str, Any], key: str, decoder: Callable[[Dict[str, Any]], T]) -> Optional[T]:
    value = data.get(key)
    if value is None:
        return None
    return decoder(_mapping(value, key))


def _list(
    data: Dict[str, Any], key: str, decoder: Optional[Callable[[Dict[str, Any]], T]] = None
) -> Optional[List[Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"Expected a JSON array for {key}, got {type(value).__name__}")
    if decoder is None:
        return list(value)
    return [decoder(_mapping(entry, key)) for entry in value]


def _required(data: Dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None:
        raise KeyError(key)
    return value


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def reconstruct_abstract(abstract_inverted_index: Optional[Dict[str, List[int]]]) -> Optional[str]:
    """Translate OpenAlex's inverted abstract index into human readable text."""

    if not abstract_inverted_index:
        return None
    abstract_inverted_index = _mapping(abstract_inverted_index, "abstract_inverted_index")

    positions: Dict[int, str] = {}
    for token, indices in abstract_inverted_index.items():
        for idx in indices:
            positions[idx] = token

    return " ".join(positions[index] for index in sorted(positions)) or None


# ----------------------------------------------------------------------
# Shared sub-objects
# ----------------------------------------------------------------------
@dataclass
class IDs:
    """External identifiers bundle"""

    openalex: Optional[str] = None
    doi: Optional[str] = None
    mag: Optional[str] = None
    pmid: Optional[str] = None
    pmcid: Optional[str] = None
    orcid: Optional[str] = None
    ror: Optional[str] = None
    issn_l: Optional[str] = None
    wikidata: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "IDs":
        return cls(
            openalex=data.get("openalex"),
            doi=data.get("doi"),
            mag=_str(data.get("mag")),
            pmid=data.get("pmid"),
            pmcid=data.get("pmcid"),
            orcid=data.get("orcid"),
            ror=data.get("ror"),
            issn_l=data.get("issn_l"),
            wikidata=data.get("wikidata"),
        )


@dataclass
class YearCount:
    year: int
    cited_by_count: Optional[int] = None
    works_count: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "YearCount":
        return cls(
            year=data["year"],
            cited_by_count=data.get("cited_by_count"),
            works_count=data.get("works_count"),
        )


@dataclass
class OpenAlexObject:
    """Header shared by every OpenAlex entity"""

    id: str
    display_name: Optional[str] = None
    ids: Optional[IDs] = None
    cited_by_count: Optional[int] = None
    counts_by_year: Optional[List[YearCount]] = None
    created_date: Optional[str] = None
    updated_date: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OpenAlexObject":
        if not data.get("id"):
            raise ValueError("OpenAlex entity has no id")
        return cls(
            id=data["id"],
            display_name=data.get("display_name"),
            ids=_obj(data, "ids", IDs.from_json),
            cited_by_count=data.get("cited_by_count"),
            counts_by_year=_list(data, "counts_by_year", YearCount.from_json),
            created_date=data.get("created_date"),
            updated_date=data.get("updated_date"),
        )


@dataclass
class SummaryStats:
    two_year_mean_citedness: Optional[float] = None
    h_index: Optional[int] = None
    i10_index: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SummaryStats":
        return cls(
            two_year_mean_citedness=_float(data.get("2yr_mean_citedness")),
            h_index=data.get("h_index"),
            i10_index=data.get("i10_index"),
        )


@dataclass
class Role:
    """One (role-tag, target-identifier) entry of a Role list"""

    role: str
    id: str
    works_count: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Role":
        return cls(role=data["role"], id=data["id"], works_count=data.get("works_count"))


# ----------------------------------------------------------------------
# Dehydrated references
# ----------------------------------------------------------------------
@dataclass
class DehydratedAuthor:
    id: Optional[str] = None
    display_name: Optional[str] = None
    orcid: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DehydratedAuthor":
        return cls(id=data.get("id"), display_name=data.get("display_name"), orcid=data.get("orcid"))


@dataclass
class DehydratedInstitution:
    id: Optional[str] = None
    display_name: Optional[str] = None
    ror: Optional[str] = None
    country_code: Optional[str] = None
    type: Optional[str] = None
    relationship: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DehydratedInstitution":
        return cls(
            id=data.get("id"),
            display_name=data.get("display_name"),
            ror=data.get("ror"),
            country_code=data.get("country_code"),
            type=data.get("type"),
            relationship=data.get("relationship"),
        )


@dataclass
class DehydratedConcept:
    id: Optional[str] = None
    wikidata: Optional[str] = None
    display_name: Optional[str] = None
    level: Optional[int] = None
    score: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DehydratedConcept":
        return cls(
            id=data.get("id"),
            wikidata=data.get("wikidata"),
            display_name=data.get("display_name"),
            level=data.get("level"),
            score=_float(data.get("score")),
        )


@dataclass
class DehydratedSource:
    id: Optional[str] = None
    display_name: Optional[str] = None
    issn_l: Optional[str] = None
    issn: Optional[List[str]] = None
    host_organization: Optional[str] = None
    host_organization_name: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DehydratedSource":
        return cls(
            id=data.get("id"),
            display_name=data.get("display_name"),
            issn_l=data.get("issn_l"),
            issn=_list(data, "issn"),
            host_organization=data.get("host_organization"),
            host_organization_name=data.get("host_organization_name"),
            type=data.get("type"),
        )


# ----------------------------------------------------------------------
# Work sub-objects
# ----------------------------------------------------------------------
@dataclass
class Authorship:
    author: Optional[DehydratedAuthor] = None
    author_position: Optional[str] = None
    institutions: Optional[List[DehydratedInstitution]] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Authorship":
        return cls(
            author=_obj(data, "author", DehydratedAuthor.from_json),
            author_position=data.get("author_position"),
            institutions=_list(data, "institutions", DehydratedInstitution.from_json),
        )


@dataclass
class Payment:
    """Article processing charge (listed or paid)"""

    value: Optional[int] = None
    currency: Optional[str] = None
    provenance: Optional[str] = None
    value_usd: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Payment":
        return cls(
            value=data.get("value"),
            currency=data.get("currency"),
            provenance=data.get("provenance"),
            value_usd=data.get("value_usd"),
        )


@dataclass
class Biblio:
    volume: Optional[str] = None
    issue: Optional[str] = None
    first_page: Optional[str] = None
    last_page: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Biblio":
        return cls(
            volume=data.get("volume"),
            issue=data.get("issue"),
            first_page=data.get("first_page"),
            last_page=data.get("last_page"),
        )


@dataclass
class Grant:
    funder: Optional[str] = None
    funder_display_name: Optional[str] = None
    award_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Grant":
        return cls(
            funder=data.get("funder"),
            funder_display_name=data.get("funder_display_name"),
            award_id=data.get("award_id"),
        )


@dataclass
class Location:
    is_oa: Optional[bool] = None
    landing_page_url: Optional[str] = None
    pdf_url: Optional[str] = None
    license: Optional[str] = None
    version: Optional[str] = None
    source: Optional[DehydratedSource] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            is_oa=data.get("is_oa"),
            landing_page_url=data.get("landing_page_url"),
            pdf_url=data.get("pdf_url"),
            license=data.get("license"),
            version=data.get("version"),
            source=_obj(data, "source", DehydratedSource.from_json),
        )


@dataclass
class Mesh:
    descriptor_ui: Optional[str] = None
    descriptor_name: Optional[str] = None
    qualifier_ui: Optional[str] = None
    qualifier_name: Optional[str] = None
    is_major_topic: Optional[bool] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Mesh":
        return cls(
            descriptor_ui=data.get("descriptor_ui"),
            descriptor_name=data.get("descriptor_name"),
            qualifier_ui=data.get("qualifier_ui"),
            qualifier_name=data.get("qualifier_name"),
            is_major_topic=data.get("is_major_topic"),
        )


@dataclass
class OpenAccess:
    is_oa: Optional[bool] = None
    oa_status: Optional[str] = None
    oa_url: Optional[str] = None
    any_repository_has_fulltext: Optional[bool] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OpenAccess":
        return cls(
            is_oa=data.get("is_oa"),
            oa_status=data.get("oa_status"),
            oa_url=data.get("oa_url"),
            any_repository_has_fulltext=data.get("any_repository_has_fulltext"),
        )


# ----------------------------------------------------------------------
# Source / Institution sub-objects
# ----------------------------------------------------------------------
@dataclass
class Price:
    price: int
    currency: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Price":
        return cls(price=_required(data, "price"), currency=_required(data, "currency"))


@dataclass
class Society:
    url: str
    organization: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Society":
        return cls(url=_required(data, "url"), organization=_required(data, "organization"))


@dataclass
class Geo:
    city: Optional[str] = None
    geonames_city_id: Optional[str] = None
    region: Optional[str] = None
    country_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Geo":
        return cls(
            city=data.get("city"),
            geonames_city_id=_str(data.get("geonames_city_id")),
            region=data.get("region"),
            country_code=data.get("country_code"),
            country=data.get("country"),
            latitude=_float(data.get("latitude")),
            longitude=_float(data.get("longitude")),
        )


# ----------------------------------------------------------------------
# Entities
# ----------------------------------------------------------------------
E = TypeVar("E", bound="Entity")


@dataclass
class Entity:
    """Base for the concrete OpenAlex records; `kind` is the discriminant."""

    kind: ClassVar[EntityKind]

    header: OpenAlexObject

    @property
    def id(self) -> str:
        return self.header.id

    @property
    def display_name(self) -> Optional[str]:
        return self.header.display_name

    @property
    def typename(self) -> str:
        return self.kind.value

    @classmethod
    def from_json(cls: Type[E], data: Dict[str, Any]) -> E:
        data = _mapping(data, cls.kind.value)
        return cls(header=OpenAlexObject.from_json(data), **cls._fields_from_json(data))

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Kind-specific constructor arguments; every subclass supplies its own."""
        raise NotImplementedError


@dataclass
class Work(Entity):
    """Represents an OpenAlex work/publication"""

    kind: ClassVar[EntityKind] = EntityKind.WORK

    abstract: Optional[str] = None
    authorships: Optional[List[Authorship]] = None
    apc_list: Optional[Payment] = None
    apc_paid: Optional[Payment] = None
    best_oa_location: Optional[Location] = None
    primary_location: Optional[Location] = None
    locations: Optional[List[Location]] = None
    biblio: Optional[Biblio] = None
    cited_by_api_url: Optional[str] = None
    concepts: Optional[List[DehydratedConcept]] = None
    corresponding_author_ids: Optional[List[str]] = None
    corresponding_institution_ids: Optional[List[str]] = None
    doi: Optional[str] = None
    grants: Optional[List[Grant]] = None
    is_paratext: Optional[bool] = None
    is_retracted: Optional[bool] = None
    language: Optional[str] = None
    mesh: Optional[List[Mesh]] = None
    open_access: Optional[OpenAccess] = None
    publication_date: Optional[str] = None
    publication_year: Optional[int] = None
    referenced_works: Optional[List[str]] = None
    related_works: Optional[List[str]] = None
    title: Optional[str] = None
    type: Optional[str] = None
    is_oa: Optional[bool] = None
    license: Optional[str] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "abstract": reconstruct_abstract(data.get("abstract_inverted_index")),
            "authorships": _list(data, "authorships", Authorship.from_json),
            "apc_list": _obj(data, "apc_list", Payment.from_json),
            "apc_paid": _obj(data, "apc_paid", Payment.from_json),
            "best_oa_location": _obj(data, "best_oa_location", Location.from_json),
            "primary_location": _obj(data, "primary_location", Location.from_json),
            "locations": _list(data, "locations", Location.from_json),
            "biblio": _obj(data, "biblio", Biblio.from_json),
            "cited_by_api_url": data.get("cited_by_api_url"),
            "concepts": _list(data, "concepts", DehydratedConcept.from_json),
            "corresponding_author_ids": _list(data, "corresponding_author_ids"),
            "corresponding_institution_ids": _list(data, "corresponding_institution_ids"),
            "doi": data.get("doi"),
            "grants": _list(data, "grants", Grant.from_json),
            "is_paratext": data.get("is_paratext"),
            "is_retracted": data.get("is_retracted"),
            "language": data.get("language"),
            "mesh": _list(data, "mesh", Mesh.from_json),
            "open_access": _obj(data, "open_access", OpenAccess.from_json),
            "publication_date": data.get("publication_date"),
            "publication_year": data.get("publication_year"),
            "referenced_works": _list(data, "referenced_works"),
            "related_works": _list(data, "related_works"),
            "title": data.get("title"),
            "type": data.get("type"),
            "is_oa": data.get("is_oa"),
            "license": data.get("license"),
        }


@dataclass
class Author(Entity):
    """Represents an OpenAlex author"""

    kind: ClassVar[EntityKind] = EntityKind.AUTHOR

    display_name_alternatives: Optional[List[str]] = None
    last_known_institution: Optional[DehydratedInstitution] = None
    orcid: Optional[str] = None
    summary_stats: Optional[SummaryStats] = None
    works_api_url: Optional[str] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        institution = _obj(data, "last_known_institution", DehydratedInstitution.from_json)
        if institution is None:
            # Newer API responses carry a list instead of a single institution
            institutions = _list(data, "last_known_institutions", DehydratedInstitution.from_json)
            if institutions:
                institution = institutions[0]
        return {
            "display_name_alternatives": _list(data, "display_name_alternatives"),
            "last_known_institution": institution,
            "orcid": data.get("orcid"),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "works_api_url": data.get("works_api_url"),
            "works_count": data.get("works_count"),
        }


@dataclass
class Source(Entity):
    """Represents an OpenAlex source (journal, repository, conference...)"""

    kind: ClassVar[EntityKind] = EntityKind.SOURCE

    abbreviated_title: Optional[str] = None
    alternate_titles: Optional[List[str]] = None
    apc_prices: Optional[List[Price]] = None
    apc_usd: Optional[int] = None
    country_code: Optional[str] = None
    homepage_url: Optional[str] = None
    host_organization: Optional[str] = None
    host_organization_lineage: Optional[List[str]] = None
    host_organization_name: Optional[str] = None
    is_in_doaj: Optional[bool] = None
    is_oa: Optional[bool] = None
    issn: Optional[List[str]] = None
    issn_l: Optional[str] = None
    societies: Optional[List[Society]] = None
    summary_stats: Optional[SummaryStats] = None
    type: Optional[str] = None
    works_api_url: Optional[str] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "abbreviated_title": data.get("abbreviated_title"),
            "alternate_titles": _list(data, "alternate_titles"),
            "apc_prices": _list(data, "apc_prices", Price.from_json),
            "apc_usd": data.get("apc_usd"),
            "country_code": data.get("country_code"),
            "homepage_url": data.get("homepage_url"),
            "host_organization": data.get("host_organization"),
            "host_organization_lineage": _list(data, "host_organization_lineage"),
            "host_organization_name": data.get("host_organization_name"),
            "is_in_doaj": data.get("is_in_doaj"),
            "is_oa": data.get("is_oa"),
            "issn": _list(data, "issn"),
            "issn_l": data.get("issn_l"),
            "societies": _list(data, "societies", Society.from_json),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "type": data.get("type"),
            "works_api_url": data.get("works_api_url"),
            "works_count": data.get("works_count"),
        }


@dataclass
class Concept(Entity):
    kind: ClassVar[EntityKind] = EntityKind.CONCEPT

    ancestors: Optional[List[DehydratedConcept]] = None
    related_concepts: Optional[List[DehydratedConcept]] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_thumbnail_url: Optional[str] = None
    level: Optional[int] = None
    summary_stats: Optional[SummaryStats] = None
    wikidata: Optional[str] = None
    works_api_url: Optional[str] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "ancestors": _list(data, "ancestors", DehydratedConcept.from_json),
            "related_concepts": _list(data, "related_concepts", DehydratedConcept.from_json),
            "description": data.get("description"),
            "image_url": data.get("image_url"),
            "image_thumbnail_url": data.get("image_thumbnail_url"),
            "level": data.get("level"),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "wikidata": data.get("wikidata"),
            "works_api_url": data.get("works_api_url"),
            "works_count": data.get("works_count"),
        }


@dataclass
class Institution(Entity):
    kind: ClassVar[EntityKind] = EntityKind.INSTITUTION

    associated_institutions: Optional[List[DehydratedInstitution]] = None
    country_code: Optional[str] = None
    display_name_alternatives: Optional[List[str]] = None
    geo: Optional[Geo] = None
    homepage_url: Optional[str] = None
    repositories: Optional[List[DehydratedSource]] = None
    roles: Optional[List[Role]] = None
    ror: Optional[str] = None
    summary_stats: Optional[SummaryStats] = None
    type: Optional[str] = None
    works_api_url: Optional[str] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "associated_institutions": _list(
                data, "associated_institutions", DehydratedInstitution.from_json
            ),
            "country_code": data.get("country_code"),
            "display_name_alternatives": _list(data, "display_name_alternatives"),
            "geo": _obj(data, "geo", Geo.from_json),
            "homepage_url": data.get("homepage_url"),
            "repositories": _list(data, "repositories", DehydratedSource.from_json),
            "roles": _list(data, "roles", Role.from_json),
            "ror": data.get("ror"),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "type": data.get("type"),
            "works_api_url": data.get("works_api_url"),
            "works_count": data.get("works_count"),
        }


@dataclass
class Publisher(Entity):
    kind: ClassVar[EntityKind] = EntityKind.PUBLISHER

    alternate_titles: Optional[List[str]] = None
    country_codes: Optional[List[str]] = None
    hierarchy_level: Optional[int] = None
    image_url: Optional[str] = None
    image_thumbnail_url: Optional[str] = None
    lineage: Optional[List[str]] = None
    parent_publisher: Optional[str] = None
    roles: Optional[List[Role]] = None
    sources_api_url: Optional[str] = None
    summary_stats: Optional[SummaryStats] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        parent = data.get("parent_publisher")
        if isinstance(parent, dict):
            # Some responses embed the parent as a dehydrated object
            parent = parent.get("id")
        return {
            "alternate_titles": _list(data, "alternate_titles"),
            "country_codes": _list(data, "country_codes"),
            "hierarchy_level": data.get("hierarchy_level"),
            "image_url": data.get("image_url"),
            "image_thumbnail_url": data.get("image_thumbnail_url"),
            "lineage": _list(data, "lineage"),
            "parent_publisher": parent,
            "roles": _list(data, "roles", Role.from_json),
            "sources_api_url": data.get("sources_api_url"),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "works_count": data.get("works_count"),
        }


@dataclass
class Funder(Entity):
    kind: ClassVar[EntityKind] = EntityKind.FUNDER

    alternate_titles: Optional[List[str]] = None
    country_code: Optional[str] = None
    description: Optional[str] = None
    grants_count: Optional[int] = None
    homepage_url: Optional[str] = None
    image_url: Optional[str] = None
    image_thumbnail_url: Optional[str] = None
    roles: Optional[List[Role]] = None
    summary_stats: Optional[SummaryStats] = None
    works_count: Optional[int] = None

    @classmethod
    def _fields_from_json(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "alternate_titles": _list(data, "alternate_titles"),
            "country_code": data.get("country_code"),
            "description": data.get("description"),
            "grants_count": data.get("grants_count"),
            "homepage_url": data.get("homepage_url"),
            "image_url": data.get("image_url"),
            "image_thumbnail_url": data.get("image_thumbnail_url"),
            "roles": _list(data, "roles", Role.from_json),
            "summary_stats": _obj(data, "summary_stats", SummaryStats.from_json),
            "works_count": data.get("works_count"),
        }


RECORD_TYPES: Dict[EntityKind, Type[Entity]] = {
    EntityKind.WORK: Work,
    EntityKind.AUTHOR: Author,
    EntityKind.SOURCE: Source,
    EntityKind.CONCEPT: Concept,
    EntityKind.INSTITUTION: Institution,
    EntityKind.PUBLISHER: Publisher,
    EntityKind.FUNDER: Funder,
}


def decode(data: Any, kind: EntityKind) -> Entity:
    """Decode one JSON object into the record type for `kind`.

    Raises:
        ValueError, TypeError, KeyError: the payload does not have the expected shape
    """
    return RECORD_TYPES[kind].from_json(data)


def kind_of(entity: Entity) -> EntityKind:
    return entity.kind


def narrow(entity: Entity, kind: EntityKind) -> Optional[Entity]:
    """Return the entity as a record of `kind`, or None when it is another kind."""
    if entity.kind is kind:
        return entity
    return None


def expect(entity: Entity, kind: EntityKind) -> Entity:
    """Narrow after dispatch; a mismatch here is a resolver bug."""
    record = narrow(entity, kind)
    if record is None:
        raise DispatchError(f"Vertex was not a {kind.value}: got {entity.kind.value}")
    return record


# ----------------------------------------------------------------------
# Listing envelope
# ----------------------------------------------------------------------
@dataclass
class ListingMeta:
    count: Optional[int] = None
    page: Optional[int] = None
    per_page: Optional[int] = None
    next_cursor: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ListingMeta":
        return cls(
            count=data.get("count"),
            page=data.get("page"),
            per_page=data.get("per_page"),
            next_cursor=data.get("next_cursor"),
        )


@dataclass
class ListingPage:
    """One page of a filtered listing: results in upstream order plus pagination metadata"""

    meta: ListingMeta
    results: List[Entity]

    @classmethod
    def from_json(cls, data: Any, kind: EntityKind) -> "ListingPage":
        data = _mapping(data, "listing")
        meta = _obj(data, "meta", ListingMeta.from_json) or ListingMeta()
        results = _list(data, "results", lambda entry: decode(entry, kind))
        if results is None:
            raise ValueError("Listing response has no results collection")
        return cls(meta=meta, results=results)

    def __iter__(self):
        return iter(self.results)

    def __len__(self):
        return len(self.results)
