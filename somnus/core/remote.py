import json
import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import Field, ValidationError

from somnus.core.errors import RemoteConfigurationError, RemotePayloadError, RemoteRequestError
from somnus.core.scoring import MAX_RECOMMENDATIONS, normalize_score, quality_label_for
from somnus.models.report import SleepReport
from somnus.models.sleep import CamelModel, SleepInput

logger = logging.getLogger(__name__)

PROVIDER_NAME = "gemini"


# ---------- Response schema sent to the model ----------
# Plain NUMBERs and unbounded lists; parse_report clamps, rounds and truncates them
# into the SleepReport contract.

class RemoteBreakdown(CamelModel):
    efficiency: float = Field(..., description="Score 0-100")
    consistency: float = Field(..., description="Score 0-100")
    environment: float = Field(..., description="Score 0-100")
    lifestyle: float = Field(..., description="Score 0-100")


class RemoteReport(CamelModel):
    score: float = Field(..., description="Overall sleep quality score from 0 to 100")
    quality_label: str = Field(..., description="One of: Excellent, Good, Fair, Poor, Critical")
    breakdown: RemoteBreakdown
    summary: str = Field(..., description="A brief 2-3 sentence summary of the sleep quality")
    recommendations: list[str] = Field(..., description="Actionable tips for improvement")
    scientific_insights: list[str] = Field(
        ...,
        description="Exactly three interesting scientific facts relevant to the user's specific data",
    )


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def build_prompt(data: SleepInput) -> str:
    env = data.environment
    return (
        "Analyze the following sleep data for a single night/pattern and provide a comprehensive evaluation:\n"
        f"- Sleep Duration: {data.duration:g} hours\n"
        f"- Time to fall asleep: {data.latency} minutes\n"
        f"- Number of awakenings: {data.awakenings}\n"
        f"- Stress Level (1-10): {data.stress_level}\n"
        f"- Caffeine Intake: {_enum_value(data.caffeine_intake)}\n"
        f"- Blue light exposure: {data.blue_light_exposure:g} hours before bed\n"
        f"- Consistency: {data.consistency}/10\n"
        f"- Environment: Noise level {env.noise}/10, Light level {env.light}/10, "
        f"Temperature: {_enum_value(env.temperature)}\n"
        "\n"
        "Provide a professional, medically-informed (but non-diagnostic) analysis."
    )


def _to_score(value: Any) -> Any:
    # numeric strings count as numbers; anything else is left for validation to reject
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return normalize_score(value)
    return value


def parse_report(payload: Any) -> SleepReport:
    """
    Turn the model's JSON answer into a SleepReport.

    Numbers are clamped and rounded like the local engine's, recommendations are
    truncated to the local maximum, and the label is re-derived from the score.
    """
    if not isinstance(payload, dict):
        raise RemotePayloadError(
            "Remote analysis payload is not a JSON object",
            provider=PROVIDER_NAME,
            context={"type": type(payload).__name__},
        )

    coerced = dict(payload)
    coerced["score"] = _to_score(coerced.get("score"))

    breakdown = coerced.get("breakdown")
    if isinstance(breakdown, dict):
        coerced["breakdown"] = {key: _to_score(value) for key, value in breakdown.items()}

    recommendations = coerced.get("recommendations")
    if isinstance(recommendations, list):
        coerced["recommendations"] = recommendations[:MAX_RECOMMENDATIONS]

    remote_label = coerced.get("qualityLabel")
    if isinstance(coerced["score"], int):
        label = quality_label_for(coerced["score"])
        if remote_label != label.value:
            logger.debug("Remote label %r does not match score %s, using %s", remote_label, coerced["score"], label.value)
        coerced["qualityLabel"] = label.value

    try:
        return SleepReport.model_validate(coerced)
    except ValidationError as e:
        raise RemotePayloadError(
            f"Remote analysis payload failed validation: {e.error_count()} error(s)",
            provider=PROVIDER_NAME,
            context={"errors": e.errors(include_url=False)},
            cause=e,
        )


class GeminiAnalysisClient:
    """
    Produces a SleepReport by asking a Gemini model for structured JSON output.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str | None = None,
        timeout: float = 30.0,
        client: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base or None
        self.timeout = timeout
        self._client = client

    def _get_client(self):
        if self._client is None:
            http_options = types.HttpOptions(
                base_url=self.api_base,
                timeout=int(self.timeout * 1000),  # milliseconds
            )
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    def _config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RemoteReport,
        )

    def analyze(self, data: SleepInput) -> SleepReport:
        if not self.api_key:
            raise RemoteConfigurationError(
                "GEMINI_API_KEY is not set",
                provider=PROVIDER_NAME,
            )

        logger.info("Requesting remote sleep analysis from %s", self.model)
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=build_prompt(data),
                config=self._config(),
            )
        except genai_errors.APIError as e:
            raise RemoteRequestError(
                f"Remote analysis returned an API error: {e}",
                provider=PROVIDER_NAME,
                context={"model": self.model, "status_code": e.code},
                cause=e,
            )
        except httpx.HTTPError as e:
            raise RemoteRequestError(
                f"Remote analysis request failed: {e}",
                provider=PROVIDER_NAME,
                context={"model": self.model},
                cause=e,
            )

        text = response.text
        if not text or not text.strip():
            raise RemotePayloadError("Remote analysis response text is empty", provider=PROVIDER_NAME)

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise RemotePayloadError(
                "Remote analysis text is not valid JSON",
                provider=PROVIDER_NAME,
                context={"text": text[:500]},
                cause=e,
            )

        return parse_report(payload)
