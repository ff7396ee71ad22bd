from typing import Any, Dict, Mapping, Optional

from player_number.models.diagnostics import RunDiagnostics
from player_number.models.enums import AnomalyKind, League

# "<league>-<feed position code>" -> display name
POSITIONS: Dict[str, str] = {
    # NHL
    "nhl-C": "Centre",
    "nhl-LW": "Left Wing",
    "nhl-RW": "Right Wing",
    "nhl-F": "Forward",
    "nhl-D": "Defence",
    "nhl-G": "Goaltender",
    # NBA
    "nba-PG": "Point Guard",
    "nba-SG": "Shooting Guard",
    "nba-G": "Guard",
    "nba-SF": "Small Forward",
    "nba-PF": "Power Forward",
    "nba-F": "Forward",
    "nba-C": "Center",
    # NFL offense
    "nfl-QB": "Quarterback",
    "nfl-RB": "Running Back",
    "nfl-FB": "Fullback",
    "nfl-WR": "Wide Receiver",
    "nfl-TE": "Tight End",
    "nfl-OL": "Offensive Lineman",
    "nfl-OT": "Offensive Tackle",
    "nfl-T": "Tackle",
    "nfl-OG": "Offensive Guard",
    "nfl-G": "Guard",
    "nfl-C": "Center",
    # NFL defense
    "nfl-DL": "Defensive Lineman",
    "nfl-DE": "Defensive End",
    "nfl-DT": "Defensive Tackle",
    "nfl-NT": "Nose Tackle",
    "nfl-LB": "Linebacker",
    "nfl-ILB": "Inside Linebacker",
    "nfl-OLB": "Outside Linebacker",
    "nfl-MLB": "Middle Linebacker",
    "nfl-DB": "Defensive Back",
    "nfl-CB": "Cornerback",
    "nfl-S": "Safety",
    "nfl-SS": "Strong Safety",
    "nfl-FS": "Free Safety",
    # NFL special teams
    "nfl-K": "Kicker",
    "nfl-P": "Punter",
    "nfl-LS": "Long Snapper",
    "nfl-KR": "Kick Returner",
    "nfl-PR": "Punt Returner",
    # MLB
    "mlb-P": "Pitcher",
    "mlb-SP": "Starting Pitcher",
    "mlb-RP": "Relief Pitcher",
    "mlb-C": "Catcher",
    "mlb-1B": "First Base",
    "mlb-2B": "Second Base",
    "mlb-3B": "Third Base",
    "mlb-SS": "Shortstop",
    "mlb-LF": "Left Field",
    "mlb-CF": "Center Field",
    "mlb-RF": "Right Field",
    "mlb-OF": "Outfield",
    "mlb-DH": "Designated Hitter",
}


class PositionTranslator:
    """Maps league-specific position codes to display names."""

    def __init__(
        self,
        diagnostics: Optional[RunDiagnostics] = None,
        table: Optional[Mapping[str, str]] = None,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else RunDiagnostics()
        self.table = POSITIONS if table is None else table

    def translate(
        self, league: League, code: str, record: Optional[Dict[str, Any]] = None
    ) -> str:
        """Returns the display name, or the code itself when it is unknown."""
        position = self.table.get(f"{league.value}-{code}")
        if position is not None:
            return position
        self.diagnostics.record(
            AnomalyKind.TRANSLATION_MISS,
            f"No position mapping for {league.value}-{code}",
            league=league,
            record=record,
        )
        return code
