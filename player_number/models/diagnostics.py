from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from .enums import AnomalyKind, League


class Anomaly(BaseModel):
    """A soft failure: recorded and logged, never raised."""

    kind: AnomalyKind
    league: Optional[League] = None
    detail: str
    record: Dict[str, Any] = Field(default_factory=dict)


class RunDiagnostics(BaseModel):
    """Data-quality signals collected during one ingestion run."""

    started_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    anomalies: List[Anomaly] = Field(default_factory=list)

    def record(
        self,
        kind: AnomalyKind,
        detail: str,
        league: Optional[League] = None,
        record: Optional[Dict[str, Any]] = None,
    ) -> Anomaly:
        anomaly = Anomaly(kind=kind, league=league, detail=detail, record=record or {})
        self.anomalies.append(anomaly)
        logger.bind(
            league=league.value if league else None, record=anomaly.record
        ).warning(f"{kind.value}: {detail}")
        return anomaly

    def of_kind(self, kind: AnomalyKind) -> List[Anomaly]:
        return [a for a in self.anomalies if a.kind == kind]

    def counts(self) -> Dict[str, int]:
        """Number of anomalies per kind, zero-filled."""
        counter = Counter(a.kind for a in self.anomalies)
        return {kind.value: counter.get(kind, 0) for kind in AnomalyKind}
