import pytest
from datetime import date, datetime, timedelta, timezone

from studydocs.models.document import DocumentStatus, DocumentVisibility
from studydocs.schemas.search import SearchRequest, SortOption, SortOrder
from studydocs.search import queries


def _filter_clauses(body):
    return body["query"]["bool"].get("filter", [])


class TestTextQuery:
    def test_boosts_and_fuzziness(self):
        body = queries.build_search_body(SearchRequest(query="đạo hàm"))
        multi_match = body["query"]["bool"]["must"][0]["multi_match"]

        assert multi_match["query"] == "đạo hàm"
        assert multi_match["fields"] == ["title^3", "description^2", "content^1"]
        assert multi_match["fuzziness"] == "AUTO"
        assert multi_match["prefix_length"] == 2

    def test_fuzzy_disabled(self):
        body = queries.build_search_body(SearchRequest(query="matrix", fuzzySearch=False))
        multi_match = body["query"]["bool"]["must"][0]["multi_match"]
        assert "fuzziness" not in multi_match

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_blank_query_matches_all(self, query):
        body = queries.build_search_body(SearchRequest(query=query))
        assert body["query"]["bool"]["must"] == [{"match_all": {}}]


class TestFilters:
    def test_no_filters(self):
        assert _filter_clauses(queries.build_search_body(SearchRequest())) == []

    def test_filters_are_conjoined(self):
        request = SearchRequest(
            statuses=[DocumentStatus.PUBLISHED],
            visibilities=[DocumentVisibility.PUBLIC, DocumentVisibility.SHARED],
            tags=["calculus", "exam"],
            subjectIds=[11],
            authorId=7,
            fileTypes=["pdf"],
            language="vi",
            folderId=3,
            isFeatured=True,
            minRating=4,
        )
        clauses = _filter_clauses(queries.build_search_body(request))

        assert {"terms": {"status": ["PUBLISHED"]}} in clauses
        assert {"terms": {"visibility": ["PUBLIC", "SHARED"]}} in clauses
        assert {"terms": {"tags": ["calculus", "exam"]}} in clauses
        assert {"terms": {"subjectIds": [11]}} in clauses
        assert {"term": {"authorId": 7}} in clauses
        assert {"terms": {"fileType": ["pdf"]}} in clauses
        assert {"term": {"language": "vi"}} in clauses
        assert {"term": {"folderId": 3}} in clauses
        assert {"term": {"isFeatured": True}} in clauses
        assert {"range": {"ratingAverage": {"gte": 4.0}}} in clauses
        assert len(clauses) == 10

    def test_empty_lists_ignored(self):
        clauses = _filter_clauses(queries.build_search_body(SearchRequest(tags=[], fileTypes=[])))
        assert clauses == []

    def test_date_range_inclusive_in_utc(self):
        request = SearchRequest(
            dateFrom=datetime(2024, 1, 1),
            dateTo=datetime(2024, 1, 31, 23, 0, tzinfo=timezone(timedelta(hours=7))),
        )
        clauses = _filter_clauses(queries.build_search_body(request))

        assert clauses == [{"range": {"createdAt": {
            "gte": "2024-01-01T00:00:00+00:00",
            "lte": "2024-01-31T16:00:00+00:00",
        }}}]

    def test_open_ended_date_range(self):
        clauses = _filter_clauses(queries.build_search_body(SearchRequest(dateFrom=datetime(2024, 1, 1))))
        assert clauses[0]["range"]["createdAt"] == {"gte": "2024-01-01T00:00:00+00:00"}

    def test_single_bare_date_covers_whole_day(self):
        request = SearchRequest.model_validate({"dateFrom": "2024-03-01", "dateTo": "2024-03-01"})
        clauses = _filter_clauses(queries.build_search_body(request))

        created = clauses[0]["range"]["createdAt"]
        assert created["gte"] == "2024-03-01T00:00:00+00:00"
        assert created["lte"] == "2024-03-01T23:59:59.999999+00:00"
        # a document created at 08:30 that day falls inside the range
        assert created["gte"] <= "2024-03-01T08:30:00+00:00" <= created["lte"]

    def test_date_object_upper_bound_is_end_of_day(self):
        request = SearchRequest(dateTo=date(2024, 3, 1))
        assert request.date_to == datetime(2024, 3, 1, 23, 59, 59, 999999)

    def test_explicit_time_upper_bound_kept(self):
        request = SearchRequest.model_validate({"dateTo": "2024-03-01T08:00:00"})
        assert request.date_to == datetime(2024, 3, 1, 8, 0)


class TestSortAndPaging:
    def test_relevance_ignores_order(self):
        assert queries.build_sort(SortOption.RELEVANCE, SortOrder.ASC) == [{"_score": {"order": "desc"}}]

    @pytest.mark.parametrize("option,field", [
        (SortOption.DATE, "createdAt"),
        (SortOption.UPDATED, "updatedAt"),
        (SortOption.RATING, "ratingAverage"),
        (SortOption.VIEWS, "viewCount"),
        (SortOption.DOWNLOADS, "downloadCount"),
        (SortOption.FAVORITES, "favouriteCount"),
        (SortOption.TITLE, "title.keyword"),
    ])
    def test_field_sorts(self, option, field):
        sort = queries.build_sort(option, SortOrder.ASC)
        assert list(sort[0]) == [field]
        assert sort[0][field]["order"] == "asc"

    def test_paging(self):
        body = queries.build_search_body(SearchRequest(page=3, size=25))
        assert body["from_"] == 75
        assert body["size"] == 25
        assert body["track_total_hits"] is True
        assert body["source_excludes"] == ["content"]

    @pytest.mark.parametrize("hits,size,pages", [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2)])
    def test_total_pages(self, hits, size, pages):
        assert queries.total_pages(hits, size) == pages


class TestHighlightAndAggregations:
    def test_highlight_settings(self):
        highlight = queries.build_search_body(SearchRequest(query="x"))["highlight"]

        assert highlight["pre_tags"] == ['<em class="highlight">']
        assert highlight["post_tags"] == ["</em>"]
        assert set(highlight["fields"]) == {"title", "description", "content"}
        for field_options in highlight["fields"].values():
            assert field_options == {"number_of_fragments": 3, "fragment_size": 150}

    def test_highlight_disabled(self):
        body = queries.build_search_body(SearchRequest(query="x", highlightResults=False))
        assert "highlight" not in body

    def test_aggregations_only_on_request(self):
        assert "aggs" not in queries.build_search_body(SearchRequest())
        aggs = queries.build_search_body(SearchRequest(includeAggregations=True))["aggs"]
        assert set(aggs) == {"tags", "subjects", "fileTypes", "authors"}


class TestAutocompleteAndSimilarity:
    def test_autocomplete_body(self):
        body = queries.build_autocomplete_body("giải")
        assert body["query"] == {"match_phrase_prefix": {"title.suggest": {"query": "giải"}}}
        assert body["size"] == 10

    def test_more_like_this_body(self):
        body = queries.build_more_like_this_body("documents", 5, 4)
        mlt = body["query"]["more_like_this"]

        assert mlt["fields"] == ["title", "description", "tags"]
        assert mlt["like"] == [{"_index": "documents", "_id": "5"}]
        assert mlt["min_term_freq"] == 1
        assert mlt["max_query_terms"] == 12
        assert body["size"] == 4


class TestSearchRequestValidation:
    def test_date_order_enforced(self):
        with pytest.raises(ValueError):
            SearchRequest(dateFrom=datetime(2024, 2, 1), dateTo=datetime(2024, 1, 1))

    @pytest.mark.parametrize("field,value", [("page", -1), ("size", 0), ("size", 101), ("minRating", 6)])
    def test_bounds(self, field, value):
        with pytest.raises(ValueError):
            SearchRequest(**{field: value})
