from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from loguru import logger

from player_number.config.settings import AppSettings
from player_number.storage.object_store import ObjectStore
from .cache import (
    ONE_DAY,
    ONE_WEEK,
    ONE_YEAR,
    end_of_games_day,
    expires_after,
    games_day,
    http_date,
)

router = APIRouter(tags=["snapshots"])


def get_store(request: Request) -> ObjectStore:
    return request.app.state.store


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def _resolved_team_id(entry: Any) -> Optional[str]:
    """Team id of a players row; None when the team never resolved."""
    team = entry.get("team") if isinstance(entry, dict) else None
    if not isinstance(team, dict) or team.get("unresolved"):
        return None
    return team.get("id")


@router.get("/teams")
async def list_teams(
    response: Response,
    store: ObjectStore = Depends(get_store),
    settings: AppSettings = Depends(get_app_settings),
    now: datetime = Depends(get_now),
) -> List[Any]:
    """The full teams snapshot."""
    teams = await store.get_json(settings.teams_key)
    response.headers["Expires"] = expires_after(now, ONE_WEEK)
    return teams


@router.get("/players")
async def list_players(
    response: Response,
    team: Optional[str] = Query(None, description="Team id to list players for."),
    store: ObjectStore = Depends(get_store),
    settings: AppSettings = Depends(get_app_settings),
    now: datetime = Depends(get_now),
) -> List[Any]:
    """Players of one team. Without a team the (empty) answer never changes."""
    if not team:
        response.headers["Expires"] = expires_after(now, ONE_YEAR)
        return []

    players = await store.get_json(settings.players_key)
    selected = [p for p in players if _resolved_team_id(p) == team]
    logger.debug(f"{len(selected)} of {len(players)} players belong to team {team}")
    response.headers["Expires"] = expires_after(now, ONE_DAY)
    return selected


@router.get("/games")
async def list_games(
    response: Response,
    store: ObjectStore = Depends(get_store),
    settings: AppSettings = Depends(get_app_settings),
    now: datetime = Depends(get_now),
) -> List[Any]:
    """Games scheduled for today, where today is judged at UTC-8."""
    today = games_day(now).isoformat()
    games = await store.get_json(settings.games_key)
    response.headers["Expires"] = http_date(end_of_games_day(now))
    return [game for game in games if game.get("date") == today]
