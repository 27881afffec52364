import threading

import pytest
import requests

from insider_sync.domain.errors import IngestionCancelled
from insider_sync.domain.services import ListingPreference
from insider_sync.infrastructure.lookup.openfigi import OpenFigiTickerLookup, parse_candidates


class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error
        self.text = ""

    def json(self):
        if self._json_error:
            raise ValueError("bad json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.exc:
            raise self.exc
        return self.response


def make_lookup(session, api_key="") -> OpenFigiTickerLookup:
    return OpenFigiTickerLookup(
        url="https://figi.test/v3/mapping",
        api_key=api_key,
        timeout=3,
        preference=ListingPreference(),
        session=session,
    )


def test_request_shape_and_home_listing_choice():
    payload = [
        {
            "data": [
                {"ticker": "ERICA US", "exchCode": "US", "marketSector": "Equity"},
                {"ticker": "ERIC B", "exchCode": "SS", "marketSector": "Equity"},
            ]
        }
    ]
    session = FakeSession(FakeResponse(payload=payload))

    ticker = make_lookup(session, api_key="secret").resolve("SE0000108656")

    assert ticker == "ERIC B"
    sent = session.requests[0]
    assert sent["json"] == [{"idType": "ID_ISIN", "idValue": "SE0000108656"}]
    assert sent["headers"]["X-OPENFIGI-APIKEY"] == "secret"
    assert sent["timeout"] == 3


def test_anonymous_requests_omit_api_key_header():
    session = FakeSession(FakeResponse(payload=[{"data": [{"ticker": "FOO"}]}]))

    assert make_lookup(session).resolve("SE0000000001") == "FOO"
    assert "X-OPENFIGI-APIKEY" not in session.requests[0]["headers"]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(exc=requests.ConnectionError("down")),
        FakeSession(exc=requests.Timeout("slow")),
        FakeSession(FakeResponse(status_code=429)),
        FakeSession(FakeResponse(status_code=500)),
        FakeSession(FakeResponse(json_error=True)),
        FakeSession(FakeResponse(payload={"unexpected": True})),
        FakeSession(FakeResponse(payload=[{"error": "Invalid idValue"}])),
        FakeSession(FakeResponse(payload=[{"warning": "No identifier found."}])),
        FakeSession(FakeResponse(payload=[{"data": [{"ticker": ""}]}])),
    ],
)
def test_failures_resolve_to_none(session):
    assert make_lookup(session).resolve("SE0000000001") is None


def test_cancelled_before_request():
    session = FakeSession(FakeResponse(payload=[{"data": [{"ticker": "FOO"}]}]))
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(IngestionCancelled):
        make_lookup(session).resolve("SE0000000001", cancel)

    assert session.requests == []


def test_parse_candidates_skips_entries_without_ticker():
    candidates = parse_candidates(
        [{"data": [{"ticker": None, "exchCode": "SS"}, {"ticker": "FOO", "exchCode": "GR", "micCode": "XETR"}]}]
    )

    assert [(c.ticker, c.exch_code, c.mic_code) for c in candidates] == [("FOO", "GR", "XETR")]


def test_parse_candidates_ignores_non_text_fields():
    candidates = parse_candidates(
        [
            {
                "data": [
                    {"ticker": 12345, "exchCode": "SS"},
                    {"ticker": "FOO", "exchCode": 7, "micCode": ["XSTO"], "marketSector": "Equity"},
                ]
            }
        ]
    )

    assert [(c.ticker, c.exch_code, c.mic_code, c.market_sector) for c in candidates] == [
        ("FOO", None, None, "Equity")
    ]


def test_malformed_listing_resolves_to_none():
    session = FakeSession(FakeResponse(payload=[{"data": [{"ticker": 12345, "exchCode": "SS"}]}]))

    assert make_lookup(session).resolve("SE0000000001") is None


def test_non_list_job_data_resolves_to_none():
    session = FakeSession(FakeResponse(payload=[{"data": {"ticker": "FOO"}}]))

    assert make_lookup(session).resolve("SE0000000001") is None
