# somnus/api/v1/analysis.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from somnus.core.config import settings
from somnus.core.errors import AnalysisError
from somnus.core.providers import AnalysisProvider, ProviderName, get_provider
from somnus.models.report import SleepReport
from somnus.models.sleep import CaffeineIntake, CamelModel, SleepInput, Temperature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


# ---------- Pydantic schemas ----------

class EnvironmentIn(CamelModel):
    noise: int = Field(2, ge=1, le=10, description="1 = silent, 10 = loud")
    light: int = Field(1, ge=1, le=10, description="1 = pitch dark, 10 = bright")
    temperature: Temperature = Temperature.OPTIMAL


class SleepIn(CamelModel):
    """
    Assessment form payload. Defaults are the form's starting values.
    """

    # Core sleep metrics
    duration: float = Field(7.0, ge=3, le=14, multiple_of=0.5, description="Hours asleep")
    latency: int = Field(15, ge=0, le=300, description="Minutes to fall asleep")
    awakenings: int = Field(0, ge=0, le=20)

    # Habits & lifestyle
    stress_level: int = Field(3, ge=1, le=10)
    caffeine_intake: CaffeineIntake = CaffeineIntake.NONE
    blue_light_exposure: float = Field(1.0, ge=0, le=8, multiple_of=0.5, description="Hours before bed")
    consistency: int = Field(7, ge=1, le=10, description="How regular the sleep schedule is")

    # Sleep environment
    environment: EnvironmentIn = Field(default_factory=EnvironmentIn)

    def to_input(self) -> SleepInput:
        return SleepInput.model_validate(self.model_dump())


def get_analysis_provider(
    provider: ProviderName | None = Query(None, description="Override the configured provider"),
) -> AnalysisProvider:
    name = provider or settings.ANALYSIS_PROVIDER
    try:
        return get_provider(name, settings)
    except ValueError:
        raise HTTPException(500, f"Unknown ANALYSIS_PROVIDER: {name}")


# ---------- Endpoints ----------

@router.get("/defaults", response_model=SleepIn)
def get_defaults():
    return SleepIn()


@router.post("", response_model=SleepReport)
def analyze_sleep(payload: SleepIn, provider: AnalysisProvider = Depends(get_analysis_provider)):
    """
    Score one night of sleep with the selected provider.
    """
    try:
        report = provider.analyze(payload.to_input())
    except AnalysisError as e:
        raise HTTPException(503, e.user_message)

    logger.info("Sleep analysis via %s: score=%s (%s)", provider.name, report.score, report.quality_label.value)
    return report
