import json
from unittest.mock import patch

import pytest
import requests

from mechmania.api import MechManiaApiError, MechManiaClient
from mechmania.types import Team


def _response(status_code=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def client(config):
    return MechManiaClient(config)


@pytest.fixture
def team():
    return Team(name="robots", email="r@example.com", token="secret")


class TestLogin:
    def test_success(self, client):
        body = {"name": "robots", "email": "r@example.com"}
        with patch.object(client.session, "request", return_value=_response(200, body)) as mock_request:
            team = client.login("secret")

        assert team == Team(name="robots", email="r@example.com", token="secret")
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://login.mechmania.io")
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}
        assert kwargs["timeout"] == 30

    def test_unauthorized_returns_none(self, client):
        with patch.object(client.session, "request", return_value=_response(401)):
            assert client.login("bad") is None

    def test_server_error(self, client):
        with patch.object(client.session, "request", return_value=_response(503)):
            with pytest.raises(MechManiaApiError, match="unknown error occurred on the server 503"):
                client.login("secret")

    def test_empty_token(self, client):
        with pytest.raises(ValueError):
            client.login("  ")

    def test_connection_error(self, client):
        with patch.object(client.session, "request", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(MechManiaApiError, match="failed"):
                client.login("secret")


class TestRegister:
    def test_success(self, client):
        body = {"name": "robots", "email": "r@example.com", "token": "new-token"}
        with patch.object(client.session, "request", return_value=_response(200, body)) as mock_request:
            team = client.register("robots", "r@example.com")

        assert team.token == "new-token"
        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://localhost:3000")
        assert kwargs["json"] == {"name": "robots", "email": "r@example.com"}

    def test_refused(self, client):
        with patch.object(client.session, "request", return_value=_response(401)):
            assert client.register("robots", "r@example.com") is None

    def test_missing_email(self, client):
        with pytest.raises(ValueError, match="email"):
            client.register("robots", "")


class TestQueries:
    def test_teams(self, client, team):
        body = [
            {"team": {"name": "a", "email": "a@x", "token": "t1"}, "script": {"key": "k1", "url": "u1", "createdAt": "2019-01-01"}},
            {"team": {"name": "b"}, "script": None},
        ]
        with patch.object(client.session, "request", return_value=_response(200, body)) as mock_request:
            entries = client.teams(team)

        assert [entry.team.name for entry in entries] == ["a", "b"]
        assert entries[0].script.key == "k1"
        assert entries[0].script.created_at == "2019-01-01"
        assert entries[1].script is None
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://api.mechmania.io/teams")
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_teams_with_latest_script_key(self, client, team):
        body = {"teams": [{"name": "a", "latestScript": {"key": "k1"}}]}
        with patch.object(client.session, "request", return_value=_response(200, body)):
            entries = client.teams(team)
        assert entries[0].team.name == "a"
        assert entries[0].script.key == "k1"

    def test_stats(self, client, team):
        with patch.object(client.session, "request", return_value=_response(200, {"wins": 4, "losses": 1, "ties": 2})) as mock_request:
            stats = client.stats(team, "k1")
        assert (stats.wins, stats.losses, stats.ties, stats.score) == (4, 1, 2, 14)
        assert mock_request.call_args.args[1] == "https://api.mechmania.io/stats/k1"

    def test_versions(self, client, team):
        body = [{"key": "k1", "createdAt": "monday"}, {"key": "k2", "createdAt": "tuesday"}]
        with patch.object(client.session, "request", return_value=_response(200, body)):
            versions = client.versions(team)
        assert [version.created_at for version in versions] == ["monday", "tuesday"]

    def test_matches(self, client, team):
        body = {"oponentInfo": [{"key": "k2"}], "wins": [3]}
        with patch.object(client.session, "request", return_value=_response(200, body)):
            assert client.matches(team) == body

    def test_http_error(self, client, team):
        with patch.object(client.session, "request", return_value=_response(403, raw=b"forbidden")):
            with pytest.raises(MechManiaApiError, match="403: forbidden"):
                client.teams(team)

    def test_invalid_json(self, client, team):
        with patch.object(client.session, "request", return_value=_response(200, raw=b"<html>")):
            with pytest.raises(MechManiaApiError, match="Invalid JSON"):
                client.versions(team)


class TestPlay:
    def test_success_returns_body(self, client, team):
        with patch.object(client.session, "request", return_value=_response(200, raw=b"engine log")) as mock_request:
            assert client.play(b"\x1f\x8bdata", team=team) == b"engine log"

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.mechmania.io/play")
        assert kwargs["data"] == b"\x1f\x8bdata"
        assert kwargs["headers"]["Content-Type"] == "application/gzip"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] is None

    def test_anonymous(self, client):
        with patch.object(client.session, "request", return_value=_response(200, raw=b"log")) as mock_request:
            client.play(b"payload")
        assert "Authorization" not in mock_request.call_args.kwargs["headers"]

    def test_rejected(self, client):
        with patch.object(client.session, "request", return_value=_response(400, raw=b"no Dockerfile")):
            with pytest.raises(MechManiaApiError, match="no Dockerfile"):
                client.play(b"payload")
