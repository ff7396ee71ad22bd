from enum import Enum


class League(str, Enum):
    NHL = "nhl"
    NBA = "nba"
    NFL = "nfl"
    MLB = "mlb"


class RecordKind(str, Enum):
    TEAM_STANDINGS = "team_standings"
    GAME_SCHEDULE = "game_schedule"
    PLAYER_STATS = "player_stats"


class AnomalyKind(str, Enum):
    RESOLUTION_MISS = "resolution_miss"
    TRANSLATION_MISS = "translation_miss"
    COLOR_EXTRACTION = "color_extraction"
    MALFORMED_RECORD = "malformed_record"
