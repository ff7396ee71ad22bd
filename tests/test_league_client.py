import base64
import gzip
import json

import httpx
import pytest

from conftest import BASE_URL, FakeFeed, standings_payload, wire_team
from player_number.clients.league_client import (
    AuthenticationError,
    FetchError,
    LeagueClient,
    ParseError,
    parse_records,
)
from player_number.models.enums import League, RecordKind


class TestParseRecords:

    def test_extracts_nested_array_with_normalized_keys(self):
        body = b'{"fullgameschedule": {"gameentry": [{"ID": "5", "AwayTeam": {"ID": "1"}}]}}'
        assert parse_records(body, RecordKind.GAME_SCHEDULE) == [
            {"id": "5", "awayTeam": {"id": "1"}}
        ]

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_records(b"<html>maintenance</html>", RecordKind.TEAM_STANDINGS)

    @pytest.mark.parametrize(
        "body",
        [
            b"[]",
            b"{}",
            b'{"overallteamstandings": {}}',
            b'{"overallteamstandings": []}',
            b'{"overallteamstandings": {"teamstandingsentry": {"Team": {}}}}',
        ],
    )
    def test_missing_or_wrong_path(self, body):
        with pytest.raises(ParseError):
            parse_records(body, RecordKind.TEAM_STANDINGS)

    def test_each_kind_has_its_own_path(self):
        body = b'{"cumulativeplayerstats": {"playerstatsentry": []}}'
        assert parse_records(body, RecordKind.PLAYER_STATS) == []
        with pytest.raises(ParseError):
            parse_records(body, RecordKind.GAME_SCHEDULE)


class TestLeagueClient:

    @pytest.mark.asyncio
    async def test_fetch_builds_authenticated_gzip_request(self, league_client, feed: FakeFeed):
        feed.serve(League.NHL, RecordKind.TEAM_STANDINGS, standings_payload(wire_team("1", "Metro", "Hawks")))

        records = await league_client.fetch(League.NHL, RecordKind.TEAM_STANDINGS)

        [request] = feed.requests
        assert str(request.url) == f"{BASE_URL}nhl/latest/overall_team_standings.json"
        assert request.method == "GET"
        expected = base64.b64encode(b"feed-user:feed-password-123").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert "gzip" in request.headers["Accept-Encoding"]
        assert records[0]["team"] == {"id": "1", "city": "Metro", "name": "Hawks", "abbreviation": ""}
        assert records[0]["rank"] == "1"

    @pytest.mark.asyncio
    async def test_gzipped_body_is_decoded(self, league_client, feed: FakeFeed):
        body = gzip.compress(json.dumps(standings_payload(wire_team("3"))).encode())
        feed.responses[feed.url(League.NBA, RecordKind.TEAM_STANDINGS)] = lambda: httpx.Response(
            200, content=body, headers={"Content-Encoding": "gzip"}
        )

        records = await league_client.fetch(League.NBA, RecordKind.TEAM_STANDINGS)

        assert records[0]["team"]["id"] == "3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    async def test_error_status_raises_fetch_error(self, league_client, feed: FakeFeed, status):
        feed.fail(League.NHL, RecordKind.GAME_SCHEDULE, status)

        with pytest.raises(FetchError):
            await league_client.fetch(League.NHL, RecordKind.GAME_SCHEDULE)
        assert len(feed.requests) == 1  # no retry by default

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure(self, league_client, feed: FakeFeed, status):
        feed.fail(League.NHL, RecordKind.PLAYER_STATS, status)

        with pytest.raises(AuthenticationError):
            await league_client.fetch(League.NHL, RecordKind.PLAYER_STATS)

    @pytest.mark.asyncio
    async def test_transport_error_raises_fetch_error(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = LeagueClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(FetchError) as exc_info:
            await client.fetch(League.NBA, RecordKind.TEAM_STANDINGS)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_bad_body_raises_parse_error(self, league_client, feed: FakeFeed):
        feed.raw(League.NHL, RecordKind.TEAM_STANDINGS, b"not json")

        with pytest.raises(ParseError):
            await league_client.fetch(League.NHL, RecordKind.TEAM_STANDINGS)

    @pytest.mark.asyncio
    async def test_opt_in_retry_recovers_from_server_error(self, settings, feed: FakeFeed):
        settings.fetch_attempts = 2
        responses = iter(
            [httpx.Response(503, text="busy"), httpx.Response(200, json=standings_payload(wire_team("8")))]
        )
        feed.responses[feed.url(League.NHL, RecordKind.TEAM_STANDINGS)] = lambda: next(responses)
        client = LeagueClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(feed)))

        records = await client.fetch(League.NHL, RecordKind.TEAM_STANDINGS)

        assert records[0]["team"]["id"] == "8"
        assert len(feed.requests) == 2

    @pytest.mark.asyncio
    async def test_close(self, league_client):
        await league_client.close()
        assert league_client.client.is_closed
