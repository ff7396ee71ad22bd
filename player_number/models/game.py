from typing import Optional

from .data_models import FeedModel
from .enums import League
from .team import Team


class Game(FeedModel):
    """A scheduled game with both sides resolved to full teams."""

    id: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None
    location: Optional[str] = None
    league: League
    away_team: Team
    home_team: Team
