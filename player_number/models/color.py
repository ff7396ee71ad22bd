from typing import List, Optional

from pydantic import Field

from .data_models import FeedModel


class ColorSpec(FeedModel):
    hex: Optional[List[str]] = None
    rgb: Optional[List[str]] = None  # e.g. ["26 43 60"]


class TeamColor(FeedModel):
    """Entry of the auxiliary team colour dataset."""

    name: str
    league: Optional[str] = None
    colors: ColorSpec = Field(default_factory=ColorSpec)
