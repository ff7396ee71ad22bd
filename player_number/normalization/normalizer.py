from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from player_number.models.data_models import FeedModel
from player_number.models.diagnostics import RunDiagnostics
from player_number.models.enums import AnomalyKind, League
from player_number.models.game import Game
from player_number.models.player import PlayerEntry
from player_number.models.team import Team, TeamRef
from player_number.normalization.positions import PositionTranslator
from player_number.normalization.resolver import TeamResolver


class Normalizer:
    """Turns key-normalized feed records into snapshot records.

    Every record is tagged with the league it was fetched for; whatever
    league the feed itself reports is overwritten. A record that does not fit
    its model is recorded as a malformed-record anomaly and persisted as it
    came, so one bad entry never stops a run.
    """

    def __init__(
        self,
        diagnostics: Optional[RunDiagnostics] = None,
        translator: Optional[PositionTranslator] = None,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else RunDiagnostics()
        self.translator = translator or PositionTranslator(self.diagnostics)

    def teams(self, league: League, entries: List[Dict[str, Any]]) -> List[Team]:
        """Standings entries -> teams. Each entry wraps its team under 'team'.

        Entries without a usable team are skipped: nothing could refer to them.
        """
        teams = []
        for entry in entries:
            raw_team = entry.get("team") if isinstance(entry, dict) else None
            if not isinstance(raw_team, dict):
                self._malformed(league, "Standings entry without a team object", entry)
                continue
            try:
                teams.append(Team.model_validate({**raw_team, "league": league}))
            except ValidationError as e:
                self._malformed(
                    league, f"Unusable standings team: {e.error_count()} errors", raw_team
                )
        logger.debug(f"Normalized {len(teams)} {league.value} teams")
        return teams

    def games(
        self, league: League, entries: List[Dict[str, Any]], resolver: TeamResolver
    ) -> List[FeedModel]:
        games = []
        for entry in entries:
            if not isinstance(entry, dict):
                self._malformed(league, "Game entry is not an object", entry)
                continue
            away = self._resolve(league, entry.get("awayTeam"), resolver, "game")
            home = self._resolve(league, entry.get("homeTeam"), resolver, "game")
            data = {**entry, "league": league, "awayTeam": away, "homeTeam": home}
            game = self._build(Game, data, league)
            if isinstance(game, Game) and game.date is None:
                self._malformed(league, f"Game {game.id} has no date", entry)
            games.append(game)
        logger.debug(f"Normalized {len(games)} {league.value} games")
        return games

    def players(
        self, league: League, entries: List[Dict[str, Any]], resolver: TeamResolver
    ) -> List[FeedModel]:
        players = []
        for entry in entries:
            if not isinstance(entry, dict):
                self._malformed(league, "Player entry is not an object", entry)
                continue
            raw_player = entry.get("player")
            if isinstance(raw_player, dict):
                raw_player = self._player_fields(league, entry, raw_player)
            team = self._resolve(league, entry.get("team"), resolver, "player")
            # Everything except the stats container is carried over
            extra = {k: v for k, v in entry.items() if k not in ("player", "team", "stats")}
            player = self._build(
                PlayerEntry, {**extra, "player": raw_player, "team": team}, league
            )
            if isinstance(player, PlayerEntry) and player.player.id is None:
                self._malformed(league, "Player without an id", raw_player)
            players.append(player)
        logger.debug(f"Normalized {len(players)} {league.value} players")
        return players

    def _player_fields(
        self, league: League, entry: Dict[str, Any], raw_player: Dict[str, Any]
    ) -> Dict[str, Any]:
        fields = {**raw_player, "league": league}
        games_played = self._games_played(entry)
        if games_played is not None:
            fields["gamesPlayed"] = games_played
        code = fields.get("position")
        if code is not None:
            fields["position"] = self.translator.translate(league, code, fields)
        return fields

    def _resolve(self, league: League, raw_stub: Any, resolver: TeamResolver, owner: str) -> Any:
        """Full team for a stub; a placeholder when nothing matches.

        A stub without a usable id cannot be looked up and is kept as is.
        """
        try:
            stub = TeamRef.model_validate(raw_stub)
        except ValidationError:
            self._malformed(league, f"{owner.capitalize()} team reference without an id", raw_stub)
            return raw_stub
        team = resolver.resolve(league, stub)
        if team is not None:
            return team
        self.diagnostics.record(
            AnomalyKind.RESOLUTION_MISS,
            f"No {league.value} team with id {stub.id} for {owner}",
            league=league,
            record=raw_stub,
        )
        return Team.unknown(stub, league)

    def _build(self, model, data: Dict[str, Any], league: League) -> FeedModel:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self._malformed(
                league, f"Malformed {model.__name__} record: {e.error_count()} errors", data
            )
        passthrough = {
            k: v.to_document() if isinstance(v, FeedModel) else v for k, v in data.items()
        }
        return FeedModel.model_validate(passthrough)

    def _malformed(self, league: League, detail: str, record: Any) -> None:
        self.diagnostics.record(
            AnomalyKind.MALFORMED_RECORD,
            detail,
            league=league,
            record=record if isinstance(record, dict) else {"value": record},
        )

    @staticmethod
    def _games_played(entry: Dict[str, Any]) -> Optional[str]:
        stats = entry.get("stats")
        games_played = stats.get("gamesPlayed") if isinstance(stats, dict) else None
        if isinstance(games_played, dict):
            return games_played.get("#text")
        return games_played
