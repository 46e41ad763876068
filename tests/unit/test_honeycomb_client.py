"""Unit tests for the Honeycomb API adapter.

HTTP is faked at the session level: the fake session hands back real
requests.Response objects, so status and JSON handling run unchanged.
"""

from __future__ import annotations

from typing import Any

import pytest
import requests

from honeyfind.adapters.api import HoneycombClient
from honeyfind.adapters.api.honeycomb import CONNECT_TIMEOUT, READ_TIMEOUT, TEAM_HEADER
from honeyfind.core.exceptions import DecodeError, HTTPError, NetworkError
from honeyfind.core.ports import DatasetSource


API_HOST = "https://api.example.test"
UI_HOST = "https://ui.example.test"


def _client(session: Any) -> HoneycombClient:
    return HoneycombClient(api_host=API_HOST, ui_host=UI_HOST, session=session)


@pytest.mark.api
class TestFetchTeam:
    """Tests for fetch_team()."""

    def test_implements_dataset_source(self, make_session: Any) -> None:
        assert isinstance(_client(make_session({})), DatasetSource)

    def test_returns_team_with_ui_host(self, make_session: Any, make_response: Any) -> None:
        session = make_session({"/1/team_slug": make_response(200, {"team_slug": "acme"})})

        team = _client(session).fetch_team("secret-key")

        assert team.slug == "acme"
        assert team.ui_host == UI_HOST

    def test_sends_api_key_header_and_timeouts(
        self, make_session: Any, make_response: Any
    ) -> None:
        session = make_session({"/1/team_slug": make_response(200, {"team_slug": "acme"})})

        _client(session).fetch_team("secret-key")

        call = session.calls[0]
        assert call["url"] == f"{API_HOST}/1/team_slug"
        assert call["headers"] == {TEAM_HEADER: "secret-key"}
        assert call["timeout"] == (CONNECT_TIMEOUT, READ_TIMEOUT)

    @pytest.mark.parametrize(
        "api_host",
        ["https://proxy.example.test/honeycomb", "https://proxy.example.test/honeycomb/"],
    )
    def test_api_host_path_prefix_is_kept(
        self, make_session: Any, make_response: Any, api_host: str
    ) -> None:
        url = "https://proxy.example.test/honeycomb/1/team_slug"
        session = make_session({url: make_response(200, {"team_slug": "acme"})})
        client = HoneycombClient(api_host=api_host, ui_host=UI_HOST, session=session)

        client.fetch_team("secret-key")

        assert session.calls[0]["url"] == url

    @pytest.mark.parametrize("body", [{}, {"team_slug": ""}, {"team_slug": 7}, ["acme"]])
    def test_missing_team_slug_raises_decode_error(
        self, make_session: Any, make_response: Any, body: Any
    ) -> None:
        session = make_session({"/1/team_slug": make_response(200, body)})

        with pytest.raises(DecodeError):
            _client(session).fetch_team("secret-key")


@pytest.mark.api
class TestFetchDatasets:
    """Tests for fetch_datasets()."""

    def test_builds_datasets_for_team(self, make_session: Any, make_response: Any) -> None:
        session = make_session(
            {
                "/1/team_slug": make_response(200, {"team_slug": "acme"}),
                "/1/datasets": make_response(
                    200,
                    [
                        {"name": "Prod Traces", "slug": "prod", "created_at": "2024-01-01"},
                        {"name": "Staging", "slug": "staging"},
                    ],
                ),
            }
        )

        datasets = _client(session).fetch_datasets("secret-key")

        assert [d.name for d in datasets] == ["Prod Traces", "Staging"]
        assert datasets[0].uid == "acme-prod"
        assert datasets[0].url() == f"{UI_HOST}/acme/home/prod"
        assert datasets[0].team is datasets[1].team
        assert [c["url"] for c in session.calls] == [
            f"{API_HOST}/1/team_slug",
            f"{API_HOST}/1/datasets",
        ]

    def test_empty_dataset_list(self, make_session: Any, make_response: Any) -> None:
        session = make_session(
            {
                "/1/team_slug": make_response(200, {"team_slug": "acme"}),
                "/1/datasets": make_response(200, []),
            }
        )

        assert _client(session).fetch_datasets("secret-key") == []

    @pytest.mark.parametrize(
        "body",
        [{"name": "x"}, [{"name": "x"}], [{"slug": "x"}], [{"name": None, "slug": "x"}], ["x"]],
    )
    def test_wrong_shape_raises_decode_error(
        self, make_session: Any, make_response: Any, body: Any
    ) -> None:
        session = make_session(
            {
                "/1/team_slug": make_response(200, {"team_slug": "acme"}),
                "/1/datasets": make_response(200, body),
            }
        )

        with pytest.raises(DecodeError):
            _client(session).fetch_datasets("secret-key")

    def test_team_failure_skips_dataset_call(
        self, make_session: Any, make_response: Any
    ) -> None:
        session = make_session({"/1/team_slug": make_response(401, {"error": "unknown API key"})})

        with pytest.raises(HTTPError):
            _client(session).fetch_datasets("bad-key")
        assert len(session.calls) == 1


@pytest.mark.api
class TestErrors:
    """Tests for translating transport and HTTP failures."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failure_hints_at_set(
        self, make_session: Any, make_response: Any, status: int
    ) -> None:
        session = make_session({"/1/team_slug": make_response(status, {"error": "denied"})})

        with pytest.raises(HTTPError) as exc_info:
            _client(session).fetch_team("bad-key")

        err = exc_info.value
        assert err.status_code == status
        assert err.url == f"{API_HOST}/1/team_slug"
        assert "--set" in err.recovery_hint

    def test_server_error(self, make_session: Any, make_response: Any) -> None:
        session = make_session({"/1/team_slug": make_response(503, "unavailable")})

        with pytest.raises(HTTPError) as exc_info:
            _client(session).fetch_team("secret-key")
        assert exc_info.value.status_code == 503
        assert exc_info.value.recovery_hint is not None

    def test_redirect_is_an_error(self, make_session: Any, make_response: Any) -> None:
        session = make_session({"/1/team_slug": make_response(302, "")})

        with pytest.raises(HTTPError):
            _client(session).fetch_team("secret-key")

    def test_invalid_json_raises_decode_error(
        self, make_session: Any, make_response: Any
    ) -> None:
        session = make_session({"/1/team_slug": make_response(200, "<html>oops</html>")})

        with pytest.raises(DecodeError) as exc_info:
            _client(session).fetch_team("secret-key")
        assert exc_info.value.source == f"{API_HOST}/1/team_slug"

    @pytest.mark.parametrize(
        "error, text",
        [
            (requests.ConnectTimeout("slow"), "Timed out"),
            (requests.ConnectionError("refused"), "Could not connect"),
            (requests.TooManyRedirects("loop"), "failed"),
        ],
    )
    def test_transport_errors_become_network_error(
        self, make_session: Any, error: Exception, text: str
    ) -> None:
        session = make_session({"/1/team_slug": error})

        with pytest.raises(NetworkError, match=text) as exc_info:
            _client(session).fetch_team("secret-key")
        assert exc_info.value.cause is error


@pytest.mark.api
class TestSession:
    """Tests for session ownership."""

    def test_context_manager_closes_session(self, make_session: Any) -> None:
        session = make_session({})

        with _client(session):
            pass

        assert session.closed

    def test_default_session_identifies_client(self) -> None:
        from honeyfind import __version__

        with HoneycombClient() as client:
            headers = client._session.headers

        assert headers["User-Agent"] == f"honeyfind/{__version__}"
        assert headers["Accept"] == "application/json"
