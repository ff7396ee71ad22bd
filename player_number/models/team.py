from typing import Optional

from .data_models import FeedModel
from .enums import League

UNKNOWN_TEAM_NAME = "Unknown Team"


class TeamRef(FeedModel):
    """Partial team identity embedded in game and player records."""

    id: str


class Team(FeedModel):
    """A team as published in the teams snapshot."""

    id: str
    city: Optional[str] = None
    name: Optional[str] = None
    abbreviation: Optional[str] = None
    league: Optional[League] = None
    colour: Optional[str] = None  # Six hex digits, no leading '#'
    unresolved: Optional[bool] = None  # Only set on placeholders

    @property
    def display_name(self) -> str:
        return f"{self.city or ''} {self.name or ''}"

    @classmethod
    def unknown(cls, ref: TeamRef, league: League) -> "Team":
        """Placeholder stored when a stub matches no fetched team."""
        fields = {"id": ref.id, "league": league, "name": UNKNOWN_TEAM_NAME}
        abbreviation = (ref.model_extra or {}).get("abbreviation")
        if abbreviation is not None:
            fields["abbreviation"] = abbreviation
        return cls(**fields, unresolved=True)
