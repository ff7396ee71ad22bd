from typing import Dict, Iterable, Optional, Tuple

from player_number.models.enums import League
from player_number.models.team import Team, TeamRef


def find_team(teams: Iterable[Team], stub: TeamRef) -> Optional[Team]:
    """Returns the first team whose id equals the stub's id, or None.

    Ids are only unique within a league. When two leagues share an id the
    first team in iteration order wins, whatever league the stub came from.
    """
    return next((team for team in teams if team.id == stub.id), None)


class TeamIndex:
    """Teams of one run indexed by (league, id)."""

    def __init__(self, teams: Iterable[Team]):
        self._by_key: Dict[Tuple[Optional[League], str], Team] = {}
        for team in teams:
            # Keep the first occurrence, same as find_team
            self._by_key.setdefault((team.league, team.id), team)

    def __len__(self) -> int:
        return len(self._by_key)

    def resolve(self, league: League, stub: TeamRef) -> Optional[Team]:
        return self._by_key.get((league, stub.id))


class TeamResolver:
    """Resolves stubs against the finalized teams of a run."""

    def __init__(self, teams: Iterable[Team], league_scoped: bool = True):
        self.teams = list(teams)
        self.league_scoped = league_scoped
        self._index = TeamIndex(self.teams) if league_scoped else None

    def resolve(self, league: League, stub: TeamRef) -> Optional[Team]:
        if self._index is not None:
            return self._index.resolve(league, stub)
        return find_team(self.teams, stub)
