import asyncio
from itertools import chain
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from player_number.clients.league_client import LeagueClient, ParseError
from player_number.config.settings import AppSettings
from player_number.models.color import TeamColor
from player_number.models.data_models import FeedModel
from player_number.models.diagnostics import RunDiagnostics
from player_number.models.enums import League, RecordKind
from player_number.models.team import Team
from player_number.normalization.colors import ColorEnricher
from player_number.normalization.normalizer import Normalizer
from player_number.normalization.resolver import TeamResolver
from player_number.storage.object_store import ObjectStore


async def gather_or_raise(*aws) -> List[Any]:
    """Awaits every awaitable, then re-raises the first failure, if any.

    Siblings of a failed task run to completion instead of being orphaned.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        for extra in failures[1:]:
            logger.error(f"Additional failure in the same phase: {extra!r}")
        raise failures[0]
    return results


class IngestionPipeline:
    """One full snapshot refresh: teams first, then games and players.

    Phases fan out per league and join before the next phase starts. The
    teams snapshot is written before any game or player is fetched, and the
    games and players snapshots are written independently of each other, so
    a failure in a later leg leaves the earlier snapshots in place. Fetch,
    parse and store errors are not handled here; they propagate out of
    ``run``.
    """

    def __init__(
        self,
        settings: AppSettings,
        league_client: LeagueClient,
        store: ObjectStore,
        color_enricher: Optional[ColorEnricher] = None,
    ):
        self.settings = settings
        self.league_client = league_client
        self.store = store
        self._color_enricher = color_enricher
        self.diagnostics = RunDiagnostics()
        self.totals: Dict[str, int] = {}

    @property
    def leagues(self) -> List[League]:
        return list(self.settings.leagues)

    async def run(self) -> List[Team]:
        """Runs the pipeline and returns the persisted teams."""
        self.diagnostics = RunDiagnostics()
        self.totals = {}
        normalizer = Normalizer(self.diagnostics)
        enricher = self._color_enricher or ColorEnricher(self.diagnostics)
        logger.info(f"Starting ingestion for leagues: {[league.value for league in self.leagues]}")

        fetched_teams, colors = await gather_or_raise(
            self._fetch_teams(normalizer), self._load_colors()
        )
        teams = enricher.enrich(fetched_teams, colors)
        await self.store.put_json(
            self.settings.teams_key, [team.to_document() for team in teams]
        )
        logger.success(f"Persisted {len(teams)} teams to {self.settings.teams_key}")

        # Phase barrier: both legs resolve against the enriched, persisted teams
        resolver = TeamResolver(teams, league_scoped=self.settings.league_scoped_resolution)
        games, players = await gather_or_raise(
            self._games_leg(normalizer, resolver),
            self._players_leg(normalizer, resolver),
        )
        self.totals = {"teams": len(teams), "games": len(games), "players": len(players)}

        logger.success(
            f"Ingestion complete: {len(teams)} teams, {len(games)} games, "
            f"{len(players)} players. Anomalies: {self.diagnostics.counts()}"
        )
        return teams

    async def _fetch_teams(self, normalizer: Normalizer) -> List[Team]:
        batches = await gather_or_raise(
            *(self._fetch_league_teams(normalizer, league) for league in self.leagues)
        )
        return list(chain.from_iterable(batches))

    async def _fetch_league_teams(self, normalizer: Normalizer, league: League) -> List[Team]:
        entries = await self.league_client.fetch(league, RecordKind.TEAM_STANDINGS)
        return normalizer.teams(league, entries)

    async def _load_colors(self) -> List[TeamColor]:
        document = await self.store.get_json(self.settings.colors_key)
        try:
            colors = [TeamColor.model_validate(entry) for entry in document]
        except (TypeError, ValidationError) as e:
            raise ParseError(f"Malformed colour dataset {self.settings.colors_key}") from e
        logger.info(f"Loaded {len(colors)} team colour entries")
        return colors

    async def _games_leg(
        self, normalizer: Normalizer, resolver: TeamResolver
    ) -> List[FeedModel]:
        games = await self._fetch_all(
            RecordKind.GAME_SCHEDULE,
            lambda league, entries: normalizer.games(league, entries, resolver),
        )
        await self.store.put_json(
            self.settings.games_key, [game.to_document() for game in games]
        )
        logger.success(f"Persisted {len(games)} games to {self.settings.games_key}")
        return games

    async def _players_leg(
        self, normalizer: Normalizer, resolver: TeamResolver
    ) -> List[FeedModel]:
        players = await self._fetch_all(
            RecordKind.PLAYER_STATS,
            lambda league, entries: normalizer.players(league, entries, resolver),
        )
        await self.store.put_json(
            self.settings.players_key, [entry.to_document() for entry in players]
        )
        logger.success(f"Persisted {len(players)} players to {self.settings.players_key}")
        return players

    async def _fetch_all(self, kind: RecordKind, transform) -> List[Any]:
        async def fetch_league(league: League) -> List[Any]:
            entries: List[Dict[str, Any]] = await self.league_client.fetch(league, kind)
            return transform(league, entries)

        batches = await gather_or_raise(*(fetch_league(league) for league in self.leagues))
        return list(chain.from_iterable(batches))
