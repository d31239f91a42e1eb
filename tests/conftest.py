"""Shared fixtures for Somnus tests"""
import pytest

from somnus.models.sleep import SleepInput


# ============================================================================
# Input builders
# ============================================================================

RESTED_NIGHT = {
    "duration": 7,
    "latency": 10,
    "awakenings": 0,
    "stress_level": 3,
    "caffeine_intake": "none",
    "blue_light_exposure": 0,
    "consistency": 10,
    "environment": {"noise": 1, "light": 1, "temperature": "optimal"},
}

WORST_NIGHT = {
    "duration": 3,
    "latency": 300,
    "awakenings": 20,
    "stress_level": 10,
    "caffeine_intake": "high",
    "blue_light_exposure": 8,
    "consistency": 1,
    "environment": {"noise": 10, "light": 10, "temperature": "hot"},
}


def build_input(base: dict, **overrides) -> SleepInput:
    """Copy `base`, apply overrides (environment keys may be given flat) and validate"""
    data = dict(base)
    env = dict(base["environment"])
    for key, value in overrides.items():
        if key in ("noise", "light", "temperature"):
            env[key] = value
        else:
            data[key] = value
    data["environment"] = env
    return SleepInput(**data)


@pytest.fixture
def rested_night():
    """Best-case night: only the stress level costs points"""
    return build_input(RESTED_NIGHT)


@pytest.fixture
def worst_night():
    """Every field at its most adverse bound"""
    return build_input(WORST_NIGHT)


@pytest.fixture
def make_input():
    """Factory: make_input(stress_level=8, noise=4) starts from the rested night"""
    def _make(**overrides) -> SleepInput:
        return build_input(RESTED_NIGHT, **overrides)
    return _make


@pytest.fixture
def rested_payload():
    """Rested night as the camelCase JSON body the form sends"""
    return {
        "duration": 7,
        "latency": 10,
        "awakenings": 0,
        "stressLevel": 3,
        "caffeineIntake": "none",
        "blueLightExposure": 0,
        "consistency": 10,
        "environment": {"noise": 1, "light": 1, "temperature": "optimal"},
    }
