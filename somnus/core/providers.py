import logging
from enum import Enum
from typing import Protocol

from somnus.core.config import Settings
from somnus.core.errors import AnalysisError
from somnus.core.remote import GeminiAnalysisClient
from somnus.core.scoring import compute_sleep_report
from somnus.models.report import SleepReport
from somnus.models.sleep import SleepInput

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    LOCAL = "local"
    GEMINI = "gemini"


class AnalysisProvider(Protocol):
    name: str

    def analyze(self, data: SleepInput) -> SleepReport:
        ...


class LocalAnalysisProvider:
    """Deterministic scoring engine, no I/O."""

    name = ProviderName.LOCAL.value

    def analyze(self, data: SleepInput) -> SleepReport:
        return compute_sleep_report(data)


class GeminiAnalysisProvider:
    """
    Remote generative analysis. With fallback enabled, a failed remote call is
    logged and answered by the local engine instead of raising.
    """

    name = ProviderName.GEMINI.value

    def __init__(self, client: GeminiAnalysisClient, fallback: LocalAnalysisProvider | None = None):
        self.client = client
        self.fallback = fallback

    def analyze(self, data: SleepInput) -> SleepReport:
        try:
            return self.client.analyze(data)
        except AnalysisError as e:
            if self.fallback is None:
                logger.error("Remote sleep analysis failed: %s", e.message, exc_info=e.cause)
                raise
            logger.warning("Remote sleep analysis failed, using local engine: %s", e.message)
            return self.fallback.analyze(data)


def get_provider(name: ProviderName | str, settings: Settings) -> AnalysisProvider:
    """
    Build the SleepReport producer for `name`.

    Raises ValueError for an unknown provider name.
    """
    provider = ProviderName(name)

    if provider is ProviderName.LOCAL:
        return LocalAnalysisProvider()

    client = GeminiAnalysisClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        api_base=settings.GEMINI_API_BASE,
        timeout=settings.GEMINI_TIMEOUT_SECONDS,
    )
    fallback = LocalAnalysisProvider() if settings.ANALYSIS_FALLBACK_TO_LOCAL else None
    return GeminiAnalysisProvider(client, fallback=fallback)
