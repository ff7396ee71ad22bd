from typing import Optional, Union

from .data_models import FeedModel
from .enums import League
from .team import Team


class Player(FeedModel):
    """Player details, with position translated and games played hoisted."""

    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[str] = None
    birth_city: Optional[str] = None
    birth_country: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    jersey_number: Optional[str] = None
    is_rookie: Optional[Union[bool, str]] = None
    age: Optional[str] = None
    league: League
    position: Optional[str] = None
    games_played: Optional[str] = None


class PlayerEntry(FeedModel):
    """One row of the players snapshot."""

    player: Player
    team: Team
