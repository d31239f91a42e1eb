"""Tests for the Gemini remote analysis client (fake google-genai client, no network)"""
import json
from types import SimpleNamespace

import httpx
import pytest
from google import genai
from google.genai import errors as genai_errors

from somnus.core.errors import (
    GENERIC_USER_MESSAGE,
    RemoteConfigurationError,
    RemotePayloadError,
    RemoteRequestError,
)
from somnus.core.remote import GeminiAnalysisClient, RemoteReport, build_prompt, parse_report
from somnus.models.report import QualityLabel


def remote_payload(**overrides):
    payload = {
        "score": 72.4,
        "qualityLabel": "Fair",
        "breakdown": {"efficiency": 80.6, "consistency": 70, "environment": 65.2, "lifestyle": 60},
        "summary": "Decent night with room to improve your wind-down routine.",
        "recommendations": ["a", "b", "c", "d", "e"],
        "scientificInsights": ["one", "two", "three"],
    }
    payload.update(overrides)
    return payload


class FakeModels:
    """Records generate_content calls; answers with text or raises"""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return SimpleNamespace(text=self.outcome)


class FakeGenaiClient:
    def __init__(self, outcome):
        self.models = FakeModels(outcome)


def make_client(outcome, api_key="test-key") -> GeminiAnalysisClient:
    return GeminiAnalysisClient(
        api_key=api_key,
        model="gemini-test",
        timeout=5.0,
        client=FakeGenaiClient(outcome),
    )


# ============================================================================
# PROMPT
# ============================================================================

class TestBuildPrompt:
    """Natural-language description of every field"""

    def test_mentions_every_field(self, make_input):
        prompt = build_prompt(make_input(duration=7.5, caffeine_intake="high", temperature="hot", noise=4))
        assert "Sleep Duration: 7.5 hours" in prompt
        assert "Time to fall asleep: 10 minutes" in prompt
        assert "Number of awakenings: 0" in prompt
        assert "Stress Level (1-10): 3" in prompt
        assert "Caffeine Intake: high" in prompt
        assert "Blue light exposure: 0 hours before bed" in prompt
        assert "Consistency: 10/10" in prompt
        assert "Noise level 4/10, Light level 1/10, Temperature: hot" in prompt


# ============================================================================
# PAYLOAD PARSING
# ============================================================================

class TestParseReport:
    """Remote JSON coerced into the SleepReport contract"""

    def test_numbers_rounded_and_label_rederived(self):
        report = parse_report(remote_payload())
        assert report.score == 72
        assert report.quality_label == QualityLabel.GOOD
        assert report.breakdown.efficiency == 81
        assert report.breakdown.environment == 65

    def test_recommendations_truncated(self):
        report = parse_report(remote_payload())
        assert list(report.recommendations) == ["a", "b", "c", "d"]

    def test_out_of_range_score_clamped(self):
        report = parse_report(remote_payload(score=130))
        assert report.score == 100
        assert report.quality_label == QualityLabel.EXCELLENT

    def test_missing_field_rejected(self):
        payload = remote_payload()
        del payload["summary"]
        with pytest.raises(RemotePayloadError):
            parse_report(payload)

    def test_empty_recommendations_rejected(self):
        with pytest.raises(RemotePayloadError):
            parse_report(remote_payload(recommendations=[]))

    def test_non_object_rejected(self):
        with pytest.raises(RemotePayloadError):
            parse_report(["not", "a", "report"])

    def test_string_score_rejected(self):
        with pytest.raises(RemotePayloadError):
            parse_report(remote_payload(score="high"))

    def test_numeric_string_score_gets_derived_label(self):
        report = parse_report(remote_payload(score="40", qualityLabel="Excellent"))
        assert report.score == 40
        assert report.quality_label == QualityLabel.POOR

    def test_numeric_string_breakdown_rounded(self):
        report = parse_report(remote_payload(breakdown={
            "efficiency": "80.6", "consistency": 70, "environment": 65.2, "lifestyle": 60,
        }))
        assert report.breakdown.efficiency == 81

    @pytest.mark.parametrize("insights", [["one"], ["one", "two", "three", "four"]])
    def test_insight_count_must_be_three(self, insights):
        with pytest.raises(RemotePayloadError):
            parse_report(remote_payload(scientificInsights=insights))


# ============================================================================
# GENERATE CONTENT
# ============================================================================

class TestGeminiAnalysisClient:
    """generate_content call and failure mapping"""

    def test_success(self, rested_night):
        client = make_client(json.dumps(remote_payload()))
        report = client.analyze(rested_night)

        assert report.score == 72
        call = client._client.models.calls[0]
        assert call["model"] == "gemini-test"
        assert "Sleep Duration: 7 hours" in call["contents"]
        assert call["config"].response_mime_type == "application/json"
        assert call["config"].response_schema is RemoteReport

    def test_response_schema_is_camel_case(self):
        properties = RemoteReport.model_json_schema(by_alias=True)["properties"]
        assert set(properties) == {
            "score", "qualityLabel", "breakdown", "summary", "recommendations", "scientificInsights",
        }

    def test_builds_sdk_client(self):
        client = GeminiAnalysisClient(api_key="test-key", model="gemini-test", timeout=5.0)
        assert isinstance(client._get_client(), genai.Client)

    def test_missing_api_key(self, rested_night):
        client = make_client(json.dumps(remote_payload()), api_key="")
        with pytest.raises(RemoteConfigurationError) as exc_info:
            client.analyze(rested_night)
        assert exc_info.value.user_message == GENERIC_USER_MESSAGE
        assert client._client.models.calls == []

    def test_api_error(self, rested_night):
        error = genai_errors.ServerError(
            500, {"error": {"code": 500, "message": "upstream exploded", "status": "INTERNAL"}}
        )
        with pytest.raises(RemoteRequestError) as exc_info:
            make_client(error).analyze(rested_night)
        assert exc_info.value.context["status_code"] == 500
        assert exc_info.value.cause is error

    def test_transport_error(self, rested_night):
        request = httpx.Request("POST", "https://generativelanguage.googleapis.com")
        error = httpx.ConnectError("connection refused", request=request)
        with pytest.raises(RemoteRequestError) as exc_info:
            make_client(error).analyze(rested_night)
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_empty_text(self, rested_night):
        with pytest.raises(RemotePayloadError):
            make_client(None).analyze(rested_night)

    def test_text_not_json(self, rested_night):
        with pytest.raises(RemotePayloadError):
            make_client("Your sleep looks great!").analyze(rested_night)

    def test_error_serializes(self, rested_night):
        error = genai_errors.ServerError(503, {"error": {"code": 503, "message": "busy", "status": "UNAVAILABLE"}})
        with pytest.raises(RemoteRequestError) as exc_info:
            make_client(error).analyze(rested_night)
        data = exc_info.value.to_dict()
        assert data["error"] == "RemoteRequestError"
        assert data["provider"] == "gemini"
        assert data["user_message"] == GENERIC_USER_MESSAGE
