import dataclasses

import pytest

from roadsearch_client import (
    CalendarInterval,
    ClientConfig,
    ConfigurationError,
    DateHistogramFacet,
    FacetKind,
    FacetSpec,
    FilterFacet,
    HistogramFacet,
    QueryFacet,
    RangeBoundary,
    RangeFacet,
    RangeQuery,
    StatisticalFacet,
    TermQuery,
    TermsFacet,
    TermsStatsFacet,
)


class TestTermsFacet:
    def test_to_dict(self):
        facet = TermsFacet("user").size(10).order("count")
        assert facet.to_dict() == {
            "terms": {"field": "user", "size": 10, "order": "count"},
        }

    def test_default_size(self):
        assert TermsFacet("user").to_dict()["terms"]["size"] == 10

    def test_default_size_from_config(self):
        spec = TermsFacet("user").build(ClientConfig(default_terms_size=25))
        assert spec.body["size"] == 25

    def test_optional_settings(self):
        facet = TermsFacet("tags").all_terms().exclude("a").exclude("b", "c")
        assert facet.to_dict()["terms"] == {
            "field": "tags",
            "size": 10,
            "order": "count",
            "all_terms": True,
            "exclude": ["a", "b", "c"],
        }

    @pytest.mark.parametrize("order", ["count", "term", "reverse_count", "reverse_term"])
    def test_valid_orders(self, order):
        assert TermsFacet("user").order(order).build().order == order

    @pytest.mark.parametrize("order", ["", "COUNT", "total", None])
    def test_invalid_order_fails_at_build(self, order):
        facet = TermsFacet("user").order(order)
        with pytest.raises(ConfigurationError):
            facet.build()

    @pytest.mark.parametrize("size", [0, -1, True, 2.5])
    def test_invalid_size(self, size):
        with pytest.raises(ConfigurationError):
            TermsFacet("user").size(size).build()

    def test_empty_field(self):
        with pytest.raises(ConfigurationError):
            TermsFacet("").build()

    def test_builder_is_immutable(self):
        base = TermsFacet("user")
        sized = base.size(5)
        assert base.bucket_count is None
        assert sized.bucket_count == 5
        with pytest.raises(dataclasses.FrozenInstanceError):
            base.bucket_count = 3


class TestRangeFacet:
    def test_each_call_appends_a_range(self):
        facet = RangeFacet("retweets").lt(10).between(10, 100).gt(100)
        assert facet.boundaries == (
            RangeBoundary(upper=10),
            RangeBoundary(lower=10, upper=100),
            RangeBoundary(lower=100),
        )
        assert facet.to_dict() == {
            "range": {
                "field": "retweets",
                "ranges": [{"to": 10}, {"from": 10, "to": 100}, {"from": 100}],
            },
        }

    def test_long_form_aliases(self):
        facet = RangeFacet("price").less_than(5).greater_than(5)
        assert facet.to_dict()["range"]["ranges"] == [{"to": 5}, {"from": 5}]

    def test_branching_does_not_alias(self):
        base = RangeFacet("retweets").lt(10)
        left = base.gt(10)
        right = base.between(10, 20)
        assert len(base.boundaries) == 1
        assert left.boundaries[-1] == RangeBoundary(lower=10)
        assert right.boundaries[-1] == RangeBoundary(lower=10, upper=20)

    def test_no_ranges_is_an_error(self):
        with pytest.raises(ConfigurationError):
            RangeFacet("retweets").build()

    def test_key_value_fields_replace_field(self):
        facet = RangeFacet("ignored").key_value_fields("created", "retweets").lt(1)
        assert facet.to_dict()["range"] == {
            "key_field": "created",
            "value_field": "retweets",
            "ranges": [{"to": 1}],
        }


class TestHistogramFacet:
    def test_numeric_interval(self):
        assert HistogramFacet("retweets").interval(100).to_dict() == {
            "histogram": {"field": "retweets", "interval": 100},
        }

    def test_time_interval(self):
        assert HistogramFacet("retweets").time_interval("1m").to_dict() == {
            "histogram": {"field": "retweets", "time_interval": "1m"},
        }

    def test_last_interval_setting_wins(self):
        facet = HistogramFacet("retweets").interval(100).time_interval("1h")
        assert facet.interval_value is None
        assert facet.to_dict()["histogram"] == {"field": "retweets", "time_interval": "1h"}

        facet = facet.interval(5)
        assert facet.time_interval_value is None
        assert facet.to_dict()["histogram"] == {"field": "retweets", "interval": 5}

    def test_missing_interval(self):
        with pytest.raises(ConfigurationError):
            HistogramFacet("retweets").build()

    def test_conflicting_intervals(self):
        facet = HistogramFacet("retweets", interval_value=10, time_interval_value="1m")
        with pytest.raises(ConfigurationError):
            facet.build()

    @pytest.mark.parametrize("interval", [0, -5, True, "10"])
    def test_invalid_interval(self, interval):
        with pytest.raises(ConfigurationError):
            HistogramFacet("retweets").interval(interval).build()

    @pytest.mark.parametrize("duration", ["", "m", "1 m", "1y", "one"])
    def test_invalid_duration(self, duration):
        with pytest.raises(ConfigurationError):
            HistogramFacet("retweets").time_interval(duration).build()


class TestDateHistogramFacet:
    def test_interval(self):
        assert DateHistogramFacet("created").interval("year").to_dict() == {
            "date_histogram": {"field": "created", "interval": "year"},
        }

    def test_interval_enum(self):
        facet = DateHistogramFacet("created").interval(CalendarInterval.WEEK)
        assert facet.to_dict()["date_histogram"]["interval"] == "week"

    def test_key_and_value_fields(self):
        facet = (
            DateHistogramFacet("createdWithKeyValue")
            .interval("year")
            .key_field("created")
            .value_field("retweets")
        )
        assert facet.to_dict() == {
            "date_histogram": {
                "key_field": "created",
                "value_field": "retweets",
                "interval": "year",
            },
        }

    def test_time_zone(self):
        facet = DateHistogramFacet("created").interval("day").time_zone("+02:00")
        assert facet.to_dict()["date_histogram"]["time_zone"] == "+02:00"

    @pytest.mark.parametrize("unit", ["decade", "1d", "", None])
    def test_invalid_interval(self, unit):
        with pytest.raises(ConfigurationError):
            DateHistogramFacet("created").interval(unit).build()

    def test_missing_interval(self):
        with pytest.raises(ConfigurationError):
            DateHistogramFacet("created").build()

    def test_only_key_field_is_an_error(self):
        with pytest.raises(ConfigurationError):
            DateHistogramFacet("created").interval("year").key_field("created").build()

    def test_only_value_field_is_an_error(self):
        with pytest.raises(ConfigurationError):
            DateHistogramFacet("created").interval("year").value_field("retweets").build()


class TestQueryFacet:
    def test_global_query_facet(self):
        facet = QueryFacet(TermQuery(field="user", term="olivere")).order("term").global_(True)
        spec = facet.build()
        assert spec.kind is FacetKind.QUERY
        assert spec.order == "term"
        assert spec.global_scope is True
        assert spec.to_dict() == {
            "query": {"term": {"user": "olivere"}},
            "global": True,
        }

    def test_raw_query_mapping(self):
        facet = QueryFacet({"match_all": {}})
        assert facet.to_dict() == {"query": {"match_all": {}}}

    def test_invalid_order(self):
        with pytest.raises(ConfigurationError):
            QueryFacet(TermQuery(field="user", term="x")).order("reverse_count").build()

    def test_missing_query(self):
        with pytest.raises(ConfigurationError):
            QueryFacet().build()

    def test_global_can_be_cleared(self):
        facet = QueryFacet({"match_all": {}}).global_().global_(False)
        assert "global" not in facet.to_dict()


class TestCommonOptions:
    @pytest.mark.parametrize("builder, kind", [
        (TermsFacet("user"), FacetKind.TERMS),
        (RangeFacet("retweets"), FacetKind.RANGE),
        (HistogramFacet("retweets"), FacetKind.HISTOGRAM),
        (DateHistogramFacet("created"), FacetKind.DATE_HISTOGRAM),
        (QueryFacet(), FacetKind.QUERY),
        (FilterFacet(), FacetKind.FILTER),
        (StatisticalFacet(), FacetKind.STATISTICAL),
        (TermsStatsFacet(), FacetKind.TERMS_STATS),
    ])
    def test_kind_is_fixed_per_builder(self, builder, kind):
        assert builder.kind is kind
        assert builder.global_().kind is kind
        init_fields = {f.name for f in dataclasses.fields(builder) if f.init}
        assert "kind" not in init_fields

    def test_facet_filter(self):
        facet = TermsFacet("user").facet_filter(RangeQuery(field="retweets", gte=10))
        assert facet.to_dict() == {
            "terms": {"field": "user", "size": 10, "order": "count"},
            "facet_filter": {"range": {"retweets": {"gte": 10}}},
        }

    def test_spec_to_dict_returns_copies(self):
        spec = RangeFacet("retweets").lt(10).build()
        rendered = spec.to_dict()
        rendered["range"]["ranges"].append({"from": 1})
        assert spec.to_dict()["range"]["ranges"] == [{"to": 10}]

    def test_spec_body_is_read_only(self):
        spec = TermsFacet("user").build()
        with pytest.raises(TypeError):
            spec.body["size"] = 99

    def test_nested_body_is_read_only(self):
        spec = RangeFacet("retweets").lt(10).build()
        with pytest.raises(AttributeError):
            spec.body["ranges"].append({"from": 999})
        with pytest.raises(TypeError):
            spec.body["ranges"][0]["to"] = 5
        assert spec.to_dict() == {"range": {"field": "retweets", "ranges": [{"to": 10}]}}

    def test_spec_does_not_share_raw_query(self):
        raw = {"term": {"user": "olivere"}}
        spec = QueryFacet(raw).facet_filter(raw).build()
        raw["term"]["user"] = "sandrae"
        assert spec.to_dict() == {
            "query": {"term": {"user": "olivere"}},
            "facet_filter": {"term": {"user": "olivere"}},
        }

    def test_spec_from_raw_body_is_frozen(self):
        body = {"field": "user", "exclude": ["bot"]}
        spec = FacetSpec(kind=FacetKind.TERMS, body=body)
        body["exclude"].append("spam")
        assert spec.body["exclude"] == ("bot",)
        assert spec.to_dict() == {"terms": {"field": "user", "exclude": ["bot"]}}


class TestOtherFacets:
    def test_filter_facet(self):
        facet = FilterFacet(TermQuery(field="user", term="sandrae"))
        assert facet.to_dict() == {"filter": {"term": {"user": "sandrae"}}}

    def test_statistical_single_field(self):
        assert StatisticalFacet("retweets").to_dict() == {
            "statistical": {"field": "retweets"},
        }

    def test_statistical_multiple_fields(self):
        facet = StatisticalFacet().fields("retweets", "likes")
        assert facet.to_dict() == {"statistical": {"fields": ["retweets", "likes"]}}

    def test_statistical_requires_field(self):
        with pytest.raises(ConfigurationError):
            StatisticalFacet().build()

    def test_terms_stats(self):
        facet = TermsStatsFacet("user", "retweets").size(5).order("reverse_total")
        assert facet.to_dict() == {
            "terms_stats": {
                "key_field": "user",
                "value_field": "retweets",
                "size": 5,
                "order": "reverse_total",
            },
        }

    def test_terms_stats_invalid_order(self):
        with pytest.raises(ConfigurationError):
            TermsStatsFacet("user", "retweets").order("average").build()
