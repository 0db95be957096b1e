import httpx
import pytest
from fastapi.testclient import TestClient

from landmarks.main import create_app
from landmarks.services.wikipedia import build_http_client

NYC_GEOSEARCH = {
    "batchcomplete": "",
    "query": {
        "geosearch": [
            {"pageid": 645042, "ns": 0, "title": "New York City Hall", "lat": 40.712778,
             "lon": -74.005833, "dist": 24.6, "primary": ""},
            {"pageid": 2478221, "ns": 0, "title": "Tweed Courthouse", "lat": 40.713333,
             "lon": -74.005, "dist": 115.8, "primary": ""},
            {"pageid": 1191, "ns": 0, "title": "Brooklyn Bridge", "lat": 40.706, "lon": -73.997, "dist": 1090.2},
            {"pageid": 30150, "ns": 0, "title": "Woolworth Building", "lat": 40.7124, "lon": -74.0081},
        ]
    },
}

CITY_HALL_PAGE = {
    "pageid": 645042,
    "ns": 0,
    "title": "New York City Hall",
    "extract": "New York City Hall is the seat of New York City government.",
    "thumbnail": {
        "source": "https://upload.wikimedia.org/thumb/City_Hall.jpg/400px-City_Hall.jpg",
        "width": 400,
        "height": 267,
    },
    "coordinates": [{"lat": 40.712778, "lon": -74.005833, "primary": "", "globe": "earth"}],
    "fullurl": "https://en.wikipedia.org/wiki/New_York_City_Hall",
    "canonicalurl": "https://en.wikipedia.org/wiki/New_York_City_Hall",
}


class FakeWikipedia:
    """Stands in for the MediaWiki API behind an httpx.MockTransport."""

    def __init__(self):
        self.geosearch = NYC_GEOSEARCH
        self.pages = {"645042": CITY_HALL_PAGE}
        self.status_code = 200
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "upstream down"})

        params = request.url.params
        if params.get("list") == "geosearch":
            return httpx.Response(200, json=self.geosearch)

        pageid = params.get("pageids")
        page = self.pages.get(pageid, {"pageid": int(pageid), "missing": ""})
        return httpx.Response(200, json={"batchcomplete": "", "query": {"pages": {pageid: page}}})

    @property
    def last_params(self):
        return self.requests[-1].url.params


@pytest.fixture
def upstream():
    return FakeWikipedia()


@pytest.fixture
def app(upstream):
    return create_app(
        http_client_factory=lambda s: build_http_client(s, transport=httpx.MockTransport(upstream))
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
