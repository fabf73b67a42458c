"""Tests for the OpenAlex entity model and its JSON decoding."""

import pytest

from models import (
    Author,
    DispatchError,
    Entity,
    EntityKind,
    Institution,
    ListingPage,
    Publisher,
    Work,
    decode,
    expect,
    kind_of,
    narrow,
    reconstruct_abstract,
)
from samples import PAYLOADS, entity, payload


class TestEntityKind:
    def test_collection_and_tags(self):
        assert EntityKind.WORK.collection == "works"
        assert EntityKind.INSTITUTION.collection == "institutions"
        assert EntityKind.FUNDER.role_tag == "funder"
        assert EntityKind.PUBLISHER.id_prefix == "P"

    def test_from_name(self):
        assert EntityKind.from_name("Concept") is EntityKind.CONCEPT

    def test_from_name_unknown_is_dispatch_error(self):
        with pytest.raises(DispatchError):
            EntityKind.from_name("Topic")

    @pytest.mark.parametrize(
        "locator, expected",
        [
            ("W2741809807", EntityKind.WORK),
            ("https://openalex.org/A5023888391", EntityKind.AUTHOR),
            ("https://api.openalex.org/institutions/I136199984", EntityKind.INSTITUTION),
            ("f4320332161", EntityKind.FUNDER),
            ("https://doi.org/10.7717/peerj.4375", None),
            ("https://orcid.org/0000-0003-1613-5981", None),
            ("X123", None),
        ],
    )
    def test_from_openalex_id(self, locator, expected):
        assert EntityKind.from_openalex_id(locator) is expected


class TestDecode:
    def test_work_fields(self):
        work = decode(payload(EntityKind.WORK), EntityKind.WORK)

        assert isinstance(work, Work)
        assert work.id == "https://openalex.org/W2741809807"
        assert work.title == "The state of OA"
        assert work.abstract == "Despite growing interest"
        assert work.open_access.oa_status == "gold"
        assert [a.author.id for a in work.authorships] == [
            "https://openalex.org/A1",
            "https://openalex.org/A2",
        ]
        assert work.primary_location.source.display_name == "PeerJ"
        assert work.header.ids.mag == "2741809807"
        assert work.header.counts_by_year[0].year == 2023

    def test_optional_fields_stay_absent(self):
        work = decode({"id": "https://openalex.org/W1"}, EntityKind.WORK)

        assert work.title is None
        assert work.referenced_works is None
        assert work.open_access is None
        assert work.abstract is None
        assert work.header.ids is None
        assert work.header.cited_by_count is None

    def test_explicitly_empty_list_is_kept(self):
        work = decode({"id": "https://openalex.org/W1", "referenced_works": []}, EntityKind.WORK)
        assert work.referenced_works == []

    def test_missing_id_raises(self):
        with pytest.raises(ValueError):
            decode({"display_name": "no id"}, EntityKind.AUTHOR)

    def test_non_object_payload_raises(self):
        with pytest.raises(TypeError):
            decode(["not", "an", "object"], EntityKind.WORK)

    def test_wrongly_shaped_list_raises(self):
        with pytest.raises(TypeError):
            decode({"id": "https://openalex.org/W1", "authorships": {"a": 1}}, EntityKind.WORK)

    def test_role_without_tag_raises(self):
        with pytest.raises(KeyError):
            decode(payload(EntityKind.INSTITUTION, roles=[{"id": "x"}]), EntityKind.INSTITUTION)

    def test_author_summary_stats(self):
        author = entity(EntityKind.AUTHOR)
        assert author.summary_stats.two_year_mean_citedness == 1.25
        assert author.summary_stats.h_index == 20

    def test_author_last_known_institutions_list(self):
        data = payload(EntityKind.AUTHOR)
        del data["last_known_institution"]
        data["last_known_institutions"] = [
            {"id": "https://openalex.org/I9", "display_name": "First"},
            {"id": "https://openalex.org/I8", "display_name": "Second"},
        ]

        author = decode(data, EntityKind.AUTHOR)

        assert author.last_known_institution.id == "https://openalex.org/I9"

    def test_publisher_parent_as_object(self):
        publisher = entity(
            EntityKind.PUBLISHER,
            parent_publisher={"id": "https://openalex.org/P0", "display_name": "Holding"},
        )
        assert publisher.parent_publisher == "https://openalex.org/P0"

    def test_institution_geo_and_roles(self):
        institution = entity(EntityKind.INSTITUTION)
        assert isinstance(institution, Institution)
        assert institution.geo.latitude == 49.25
        assert [role.role for role in institution.roles] == ["institution", "funder"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"apc_prices": [{"price": 1395}]},
            {"apc_prices": [{"price": 1395, "currency": None}]},
            {"societies": [{"url": "https://example.org"}]},
        ],
    )
    def test_incomplete_price_or_society_is_malformed(self, overrides):
        with pytest.raises(KeyError):
            decode(payload(EntityKind.SOURCE, **overrides), EntityKind.SOURCE)

    def test_abstract_index_must_be_an_object(self):
        with pytest.raises(TypeError):
            decode(payload(EntityKind.WORK, abstract_inverted_index=["Despite", "growing"]), EntityKind.WORK)


class TestNarrowing:
    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_kind_of_every_kind(self, kind):
        vertex = decode(PAYLOADS[kind], kind)
        assert kind_of(vertex) is kind
        assert vertex.typename == kind.value

    def test_narrow_match(self, author):
        assert narrow(author, EntityKind.AUTHOR) is author

    def test_narrow_mismatch_is_none(self, author):
        assert narrow(author, EntityKind.WORK) is None

    def test_expect_mismatch_is_dispatch_error(self, publisher):
        assert isinstance(publisher, Publisher)
        with pytest.raises(DispatchError, match="not a Funder"):
            expect(publisher, EntityKind.FUNDER)


class TestListingPage:
    def test_envelope(self):
        data = {
            "meta": {"count": 2, "page": 1, "per_page": 25},
            "results": [payload(EntityKind.AUTHOR), payload(EntityKind.AUTHOR, id="https://openalex.org/A2")],
        }

        page = ListingPage.from_json(data, EntityKind.AUTHOR)

        assert page.meta.count == 2
        assert page.meta.per_page == 25
        assert len(page) == 2
        assert all(isinstance(result, Author) for result in page)
        assert [a.id for a in page] == ["https://openalex.org/A1", "https://openalex.org/A2"]

    def test_missing_results_raises(self):
        with pytest.raises(ValueError):
            ListingPage.from_json({"meta": {"count": 0}}, EntityKind.WORK)


def test_reconstruct_abstract_orders_tokens():
    index = {"world": [1], "hello": [0, 2]}
    assert reconstruct_abstract(index) == "hello world hello"
    assert reconstruct_abstract(None) is None
    assert reconstruct_abstract({}) is None


def test_reconstruct_abstract_rejects_non_mapping():
    with pytest.raises(TypeError):
        reconstruct_abstract(["Despite", "growing"])


def test_base_entity_has_no_kind_fields():
    with pytest.raises(NotImplementedError):
        Entity._fields_from_json({"id": "https://openalex.org/W1"})
