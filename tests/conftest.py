"""Shared pytest fixtures for player-number tests."""
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from player_number.clients.league_client import LeagueClient
from player_number.config.settings import AppSettings
from player_number.models.enums import League, RecordKind
from player_number.storage.object_store import ObjectStore, StoreError, StoreNotFoundError

BASE_URL = "https://feeds.test/pull/"


class MemoryObjectStore(ObjectStore):
    """In-memory ObjectStore recording every write in order."""

    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.writes: List[Tuple[str, str]] = []
        self.fail_puts: set = set()
        self.fail_gets: set = set()

    async def get(self, key: str) -> bytes:
        if key in self.fail_gets:
            raise StoreError(f"Injected read failure for {key}")
        if key not in self.objects:
            raise StoreNotFoundError(key)
        return self.objects[key]

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        if key in self.fail_puts:
            raise StoreError(f"Injected write failure for {key}")
        self.objects[key] = body
        self.writes.append((key, content_type))

    def seed(self, key: str, payload: Any) -> None:
        self.objects[key] = json.dumps(payload).encode("utf-8")

    def document(self, key: str) -> Any:
        return json.loads(self.objects[key])


# Feed payload builders, in the upstream PascalCase wire shape
# ─────────────────────────────────────────────────────────────


def wire_team(team_id: str, city: str = "", name: str = "", abbreviation: str = "") -> Dict[str, Any]:
    return {"ID": team_id, "City": city, "Name": name, "Abbreviation": abbreviation}


def standings_payload(*teams: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "overallteamstandings": {
            "lastUpdatedOn": "2023-06-01 10:00:00 AM",
            "teamstandingsentry": [
                {"Team": team, "Rank": str(i + 1)} for i, team in enumerate(teams)
            ],
        }
    }


def schedule_payload(*games: Dict[str, Any]) -> Dict[str, Any]:
    return {"fullgameschedule": {"gameentry": list(games)}}


def wire_game(
    game_id: str, date: str, away_id: str, home_id: str, location: str = "Arena"
) -> Dict[str, Any]:
    return {
        "ID": game_id,
        "Date": date,
        "Time": "7:00PM",
        "Location": location,
        "AwayTeam": {"ID": away_id, "Abbreviation": f"A{away_id}"},
        "HomeTeam": {"ID": home_id, "Abbreviation": f"H{home_id}"},
    }


def player_stats_payload(*entries: Dict[str, Any]) -> Dict[str, Any]:
    return {"cumulativeplayerstats": {"playerstatsentry": list(entries)}}


def wire_player_entry(
    player_id: str, team_id: str, position: str = "C", games_played: str = "82"
) -> Dict[str, Any]:
    return {
        "Player": {
            "ID": player_id,
            "LastName": "Doe",
            "FirstName": "Jon",
            "JerseyNumber": "9",
            "Position": position,
            "Height": "6'1\"",
            "Weight": "190",
            "BirthDate": "1990-01-01",
            "Age": "33",
            "BirthCity": "Toronto",
            "BirthCountry": "Canada",
            "IsRookie": "false",
        },
        "Team": {"ID": team_id, "City": "Ignored", "Name": "Stub"},
        "Stats": {"GamesPlayed": {"@abbreviation": "GP", "#text": games_played}},
    }


class FakeFeed:
    """MockTransport handler serving canned payloads per (league, kind)."""

    PATHS = {
        RecordKind.TEAM_STANDINGS: "/latest/overall_team_standings.json",
        RecordKind.GAME_SCHEDULE: "/latest/full_game_schedule.json",
        RecordKind.PLAYER_STATS: "/latest/cumulative_player_stats.json",
    }

    def __init__(self):
        self.responses: Dict[str, Callable[[], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def url(self, league: League, kind: RecordKind) -> str:
        return f"{BASE_URL}{league.value}{self.PATHS[kind]}"

    def serve(self, league: League, kind: RecordKind, payload: Any) -> None:
        self.responses[self.url(league, kind)] = lambda: httpx.Response(200, json=payload)

    def fail(self, league: League, kind: RecordKind, status: int = 500) -> None:
        self.responses[self.url(league, kind)] = lambda: httpx.Response(status, text="boom")

    def raw(self, league: League, kind: RecordKind, body: bytes) -> None:
        self.responses[self.url(league, kind)] = lambda: httpx.Response(200, content=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        respond = self.responses.get(str(request.url))
        if respond is None:
            return httpx.Response(404, text="no such feed")
        return respond()

    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=BASE_URL,
        api_username="feed-user",
        api_password="feed-password-123",
        supabase_url="https://project.supabase.test",
        supabase_key="service-role-key-abcdef",
        leagues=[League.NHL, League.NBA],
    )


@pytest.fixture
def store() -> MemoryObjectStore:
    return MemoryObjectStore()


@pytest.fixture
def feed() -> FakeFeed:
    return FakeFeed()


@pytest.fixture
def league_client(settings: AppSettings, feed: FakeFeed) -> LeagueClient:
    return LeagueClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(feed)))
