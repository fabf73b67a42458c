"""Tests for property resolution."""

import pytest

from context import DataContext
from models import DispatchError, EntityKind, decode
from properties import PROPERTY_TABLES, TYPENAME, resolve_property
from samples import PAYLOADS, entity


def _values(rows, kind, field_name):
    return [value for _, value in resolve_property(rows, kind, field_name)]


class TestTypename:
    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_typename_is_kind_name(self, kind):
        rows = [DataContext(decode(PAYLOADS[kind], kind))]
        assert _values(rows, kind.value, TYPENAME) == [kind.value]

    def test_typename_ignores_content(self):
        rows = [DataContext(decode({"id": "https://openalex.org/F9"}, EntityKind.FUNDER))]
        assert _values(rows, "Funder", TYPENAME) == ["Funder"]

    def test_typename_without_vertex(self):
        assert _values([DataContext()], "Work", TYPENAME) == [None]


class TestRowHandling:
    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_rows_without_vertex_resolve_to_none(self, kind):
        rows = [DataContext(), DataContext()]
        for field_name in PROPERTY_TABLES[kind]:
            assert _values(rows, kind.value, field_name) == [None, None]

    def test_positional_correspondence(self, work):
        other = entity(EntityKind.WORK, id="https://openalex.org/W2", title="Second")
        rows = [DataContext(work), DataContext(), DataContext(other)]

        pairs = list(resolve_property(rows, "Work", "title"))

        assert [ctx for ctx, _ in pairs] == rows
        assert all(ctx is row for (ctx, _), row in zip(pairs, rows))
        assert [value for _, value in pairs] == ["The state of OA", None, "Second"]

    def test_lazy(self, work):
        pulled = []

        def rows():
            for row in [DataContext(work), DataContext(work)]:
                pulled.append(row)
                yield row

        results = resolve_property(rows(), "Work", "title")
        assert pulled == []
        next(results)
        assert len(pulled) == 1


class TestWorkProperties:
    def test_scalar_fields(self, work):
        rows = [DataContext(work)]
        assert _values(rows, "Work", "publication_year") == [2018]
        assert _values(rows, "Work", "ttype") == ["article"]
        assert _values(rows, "Work", "abstract_text") == ["Despite growing interest"]
        assert _values(rows, "Work", "ids_pmid") == ["https://pubmed.ncbi.nlm.nih.gov/29456894"]
        assert _values(rows, "Work", "referenced_works") == [work.referenced_works]

    def test_nested_fields(self, work):
        rows = [DataContext(work)]
        assert _values(rows, "Work", "open_access_oa_status") == ["gold"]
        assert _values(rows, "Work", "open_access_fulltext") == [True]
        assert _values(rows, "Work", "apc_list_value_usd") == [1395]
        assert _values(rows, "Work", "biblio_first_page") == ["e4375"]

    def test_absent_structure_makes_every_sub_field_absent(self):
        bare = entity(EntityKind.WORK, open_access=None, apc_paid=None, best_oa_location=None)
        rows = [DataContext(bare)]
        for field_name in ("open_access_is_oa", "open_access_oa_url", "apc_payment_value"):
            assert _values(rows, "Work", field_name) == [None]
        assert _values(rows, "Work", "best_oa_location_pdf_url") == [None]

    def test_explicit_false_is_not_absent(self):
        closed = entity(EntityKind.WORK, open_access={"is_oa": False})
        rows = [DataContext(closed)]
        assert _values(rows, "Work", "open_access_is_oa") == [False]
        assert _values(rows, "Work", "open_access_oa_url") == [None]

    def test_ids_absent(self):
        rows = [DataContext(decode({"id": "https://openalex.org/W1"}, EntityKind.WORK))]
        assert _values(rows, "Work", "ids_doi") == [None]
        assert _values(rows, "Work", "id") == ["https://openalex.org/W1"]


class TestOtherKinds:
    def test_source_rendered_lists_keep_order(self, source):
        rows = [DataContext(source)]
        assert _values(rows, "Source", "apc_payment") == [["1395 - USD", "1200 - EUR"]]
        assert _values(rows, "Source", "societies") == [["https://example.org - Example Society"]]

    def test_source_rendered_list_absent(self):
        rows = [DataContext(decode({"id": "https://openalex.org/S9"}, EntityKind.SOURCE))]
        assert _values(rows, "Source", "apc_payment") == [None]

    def test_mean_citedness_is_float(self):
        author = entity(EntityKind.AUTHOR, summary_stats={"2yr_mean_citedness": 3, "h_index": 1})
        [value] = _values([DataContext(author)], "Author", "summary_stats_mean_citeness")
        assert isinstance(value, float)
        assert value == 3.0

    def test_mean_citedness_absent_is_none(self):
        author = entity(EntityKind.AUTHOR, summary_stats={"h_index": 4})
        rows = [DataContext(author)]
        assert _values(rows, "Author", "summary_stats_mean_citeness") == [None]
        assert _values(rows, "Author", "summary_stats_h_index") == [4]

    def test_institution_geo(self, institution):
        rows = [DataContext(institution)]
        assert _values(rows, "Institution", "geo_city") == ["Vancouver"]
        assert _values(rows, "Institution", "geo_region") == [None]
        assert _values(rows, "Institution", "country_codes") == ["CA"]

    def test_funder_fields(self, funder):
        assert _values([DataContext(funder)], "Funder", "grants_count") == [1000]


class TestDispatchErrors:
    def test_unknown_field_raises_before_rows_are_pulled(self, work):
        pulled = []

        def rows():
            pulled.append(True)
            yield DataContext(work)

        with pytest.raises(DispatchError):
            resolve_property(rows(), "Work", "grants_count")
        assert pulled == []

    def test_unknown_kind(self):
        with pytest.raises(DispatchError):
            resolve_property([DataContext()], "Topic", "id")

    def test_field_of_another_kind(self):
        with pytest.raises(DispatchError):
            resolve_property([], "Author", "title")

    def test_vertex_of_wrong_kind(self, author):
        results = resolve_property([DataContext(author)], "Work", "title")
        with pytest.raises(DispatchError):
            next(results)
