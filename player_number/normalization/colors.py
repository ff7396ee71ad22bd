from typing import Dict, Iterable, List, Optional

from loguru import logger

from player_number.models.color import ColorSpec, TeamColor
from player_number.models.diagnostics import RunDiagnostics
from player_number.models.enums import AnomalyKind
from player_number.models.team import Team
from player_number.utils.misc_utils import name_match_key


class ColorExtractionError(ValueError):
    """Colour entry carries no usable hex or rgb value."""

    pass


def rgb_to_hex(rgb: str) -> str:
    """'26 43 60' -> '1a2b3c'."""
    parts = rgb.split()
    if len(parts) != 3:
        raise ColorExtractionError(f"Expected three rgb components, got {rgb!r}")
    try:
        channels = [int(part, 10) for part in parts]
    except ValueError as e:
        raise ColorExtractionError(f"Non-integer rgb component in {rgb!r}") from e
    if any(not 0 <= c <= 255 for c in channels):
        raise ColorExtractionError(f"rgb component out of range in {rgb!r}")
    return "".join(f"{c:02x}" for c in channels)


def extract_hex(colors: ColorSpec) -> str:
    if colors.hex:
        return colors.hex[0]
    if colors.rgb:
        return rgb_to_hex(colors.rgb[0])
    raise ColorExtractionError("Colour entry has neither hex nor rgb values")


class ColorEnricher:
    """Attaches a colour to each team found in the colour dataset."""

    def __init__(self, diagnostics: Optional[RunDiagnostics] = None):
        self.diagnostics = diagnostics if diagnostics is not None else RunDiagnostics()

    def enrich(self, teams: Iterable[Team], colors: Iterable[TeamColor]) -> List[Team]:
        by_name: Dict[str, TeamColor] = {}
        for entry in colors:
            by_name.setdefault(name_match_key(entry.name), entry)

        enriched = [self._enrich_team(team, by_name) for team in teams]
        coloured = sum(1 for team in enriched if team.colour)
        logger.info(f"Coloured {coloured} of {len(enriched)} teams.")
        return enriched

    def _enrich_team(self, team: Team, by_name: Dict[str, TeamColor]) -> Team:
        entry = by_name.get(name_match_key(team.display_name))
        if entry is None:
            logger.debug(f"No colour entry for {team.display_name!r}")
            return team
        try:
            colour = extract_hex(entry.colors)
        except ColorExtractionError as e:
            self.diagnostics.record(
                AnomalyKind.COLOR_EXTRACTION,
                f"{entry.name}: {e}",
                league=team.league,
                record=entry.to_document(),
            )
            return team
        return team.model_copy(update={"colour": colour})
