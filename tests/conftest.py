import json

import pytest

from roadsearch_client import (
    DateHistogramFacet,
    HistogramFacet,
    MatchAllQuery,
    QueryFacet,
    RangeFacet,
    SearchRequest,
    TermQuery,
    TermsFacet,
)

JAN_2011_MS = 1293840000000
JAN_2012_MS = 1325376000000


def _hit(doc_id, user, retweets, message, created):
    return {
        "_index": "roadsearch-test",
        "_type": "tweet",
        "_id": doc_id,
        "_score": 1.0,
        "_source": {
            "user": user,
            "retweets": retweets,
            "message": message,
            "created": created,
        },
    }


@pytest.fixture
def tweet_facets():
    """Facets the server returns for the three test tweets."""
    return {
        "user": {
            "_type": "terms",
            "missing": 0,
            "total": 3,
            "other": 0,
            "terms": [
                {"term": "olivere", "count": 2},
                {"term": "sandrae", "count": 1},
            ],
        },
        "retweets": {
            "_type": "range",
            "ranges": [
                {"to": 10.0, "count": 1, "min": 0.0, "max": 0.0,
                 "total_count": 1, "total": 0.0, "mean": 0.0},
                {"from": 10.0, "to": 100.0, "count": 1, "min": 12.0, "max": 12.0,
                 "total_count": 1, "total": 12.0, "mean": 12.0},
                {"from": 100.0, "count": 1, "min": 108.0, "max": 108.0,
                 "total_count": 1, "total": 108.0, "mean": 108.0},
            ],
        },
        "retweetsHistogram": {
            "_type": "histogram",
            "entries": [
                {"key": 0, "count": 2},
                {"key": 100, "count": 1},
            ],
        },
        "retweetsTimeHisto": {
            "_type": "histogram",
            "entries": [
                {"key": 0, "count": 3},
            ],
        },
        "dateHisto": {
            "_type": "date_histogram",
            "entries": [
                {"time": JAN_2011_MS, "count": 1},
                {"time": JAN_2012_MS, "count": 2},
            ],
        },
        "createdWithKeyValue": {
            "_type": "date_histogram",
            "entries": [
                {"time": JAN_2011_MS, "count": 1, "min": 12.0, "max": 12.0,
                 "total": 12.0, "total_count": 1, "mean": 12.0},
                {"time": JAN_2012_MS, "count": 2, "min": 0.0, "max": 108.0,
                 "total": 108.0, "total_count": 2, "mean": 54.0},
            ],
        },
        "queryFacet": {
            "_type": "query",
            "total": 2,
        },
    }


@pytest.fixture
def tweet_response(tweet_facets):
    return {
        "took": 4,
        "timed_out": False,
        "_shards": {"total": 1, "successful": 1, "failed": 0},
        "hits": {
            "total": 3,
            "max_score": 1.0,
            "hits": [
                _hit("1", "olivere", 108, "Welcome to Golang and ElasticSearch.", "2012-12-12T17:38:34Z"),
                _hit("2", "olivere", 0, "Another unrelated topic.", "2012-10-10T08:12:03Z"),
                _hit("3", "sandrae", 12, "Cycling is fun.", "2011-11-11T10:58:12Z"),
            ],
        },
        "facets": tweet_facets,
    }


class RecordingTransport:
    """Transport double that records requests and replays a canned response."""

    def __init__(self, response, as_json=False):
        self.response = response
        self.as_json = as_json
        self.requests = []

    def perform_request(self, method, path, body):
        self.requests.append((method, path, json.loads(json.dumps(body))))
        if self.as_json:
            return json.dumps(self.response)
        return self.response


@pytest.fixture
def transport(tweet_response):
    return RecordingTransport(tweet_response)


@pytest.fixture
def tweet_search():
    """The faceted search issued against the test tweets."""
    return (
        SearchRequest()
        .index("roadsearch-test")
        .query(MatchAllQuery())
        .facet("user", TermsFacet("user").size(10).order("count"))
        .facet("retweets", RangeFacet("retweets").lt(10).between(10, 100).gt(100))
        .facet("retweetsHistogram", HistogramFacet("retweets").interval(100))
        .facet("retweetsTimeHisto", HistogramFacet("retweets").time_interval("1m"))
        .facet("dateHisto", DateHistogramFacet("created").interval("year"))
        .facet(
            "createdWithKeyValue",
            DateHistogramFacet("createdWithKeyValue")
            .interval("year")
            .key_field("created")
            .value_field("retweets"),
        )
        .facet(
            "queryFacet",
            QueryFacet(TermQuery(field="user", term="olivere")).order("term").global_(True),
        )
    )
