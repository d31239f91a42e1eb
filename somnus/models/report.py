from enum import Enum

from pydantic import ConfigDict, Field

from somnus.models.sleep import CamelModel


class QualityLabel(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    CRITICAL = "Critical"


class Pillar(str, Enum):
    # declaration order is the tie-break order for the weakest pillar
    EFFICIENCY = "efficiency"
    CONSISTENCY = "consistency"
    ENVIRONMENT = "environment"
    LIFESTYLE = "lifestyle"


class Breakdown(CamelModel):
    model_config = ConfigDict(frozen=True)

    efficiency: int = Field(..., ge=0, le=100)
    consistency: int = Field(..., ge=0, le=100)
    environment: int = Field(..., ge=0, le=100)
    lifestyle: int = Field(..., ge=0, le=100)

    def pillar_scores(self) -> list[tuple[Pillar, int]]:
        return [(pillar, getattr(self, pillar.value)) for pillar in Pillar]


class SleepReport(CamelModel):
    """
    Scored, labelled and explained result for one SleepInput.

    Same JSON shape whether it came from the local engine or the remote model.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    quality_label: QualityLabel
    breakdown: Breakdown
    summary: str = Field(..., min_length=1)
    recommendations: tuple[str, ...] = Field(..., min_length=1, max_length=4)
    scientific_insights: tuple[str, ...] = Field(..., min_length=3, max_length=3)
