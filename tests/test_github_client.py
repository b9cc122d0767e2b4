from datetime import date

import pytest
import requests

from docs2pdf.github_client import GitHubClient

API = "https://api.github.com/repos/vercel/next.js"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


@pytest.fixture()
def client_with(monkeypatch):
    def _make(routes, token=""):
        client = GitHubClient(API, timeout=7, token=token)
        seen = []

        def fake_get(url, params=None, timeout=None):
            seen.append((url, params, timeout))
            return routes[url.removeprefix(API + "/")]

        monkeypatch.setattr(client._session, "get", fake_get)
        return client, seen

    return _make


def test_latest_release_tag(client_with):
    client, seen = client_with({"releases/latest": FakeResponse(200, {"tag_name": "v13.4.2"})})
    assert client.latest_release_tag() == ("v13.4.2", 200)
    assert seen == [(f"{API}/releases/latest", None, 7)]


def test_latest_release_tag_reports_status_on_failure(client_with):
    client, _ = client_with({"releases/latest": FakeResponse(404, {"message": "Not Found"})})
    assert client.latest_release_tag() == (None, 404)


def test_most_recent_commit_date_is_utc(client_with):
    payload = [{"commit": {"author": {"date": "2023-05-12T23:30:00-02:00"}, "committer": {"date": "2023-05-10T00:00:00Z"}}}]
    client, seen = client_with({"commits": FakeResponse(200, payload)})
    assert client.most_recent_commit_date() == date(2023, 5, 13)
    assert seen[0][1] == {"per_page": 1}


def test_most_recent_commit_date_raises_on_http_error(client_with):
    client, _ = client_with({"commits": FakeResponse(500, {})})
    with pytest.raises(requests.HTTPError):
        client.most_recent_commit_date()


def test_has_path(client_with):
    client, _ = client_with({"contents/docs": FakeResponse(200, []), "contents/missing": FakeResponse(404, {})})
    assert client.has_path("docs") is True
    assert client.has_path("/missing/") is False


def test_token_is_sent_as_bearer():
    assert GitHubClient(API, token="s3cret")._session.headers["Authorization"] == "Bearer s3cret"
    assert "Authorization" not in GitHubClient(API)._session.headers


def test_latest_release_tag_rejects_non_object_body(client_with):
    client, _ = client_with({"releases/latest": FakeResponse(200, [{"tag_name": "v13.4.2"}])})
    with pytest.raises(RuntimeError, match="expected an object"):
        client.latest_release_tag()


@pytest.mark.parametrize("payload", [{"commit": {}}, ["sha"], [{"commit": "sha"}]])
def test_most_recent_commit_date_rejects_malformed_body(client_with, payload):
    client, _ = client_with({"commits": FakeResponse(200, payload)})
    with pytest.raises(RuntimeError):
        client.most_recent_commit_date()
