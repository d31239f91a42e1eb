import math
from enum import Enum
from typing import TypeVar

from somnus.models.report import Breakdown, Pillar, QualityLabel, SleepReport
from somnus.models.sleep import CaffeineIntake, SleepInput, Temperature

E = TypeVar("E", bound=Enum)


# ----- Input domains (lower, upper) -----

DURATION_RANGE = (3.0, 14.0)
LATENCY_RANGE = (0, 300)
AWAKENINGS_RANGE = (0, 20)
STRESS_RANGE = (1, 10)
BLUE_LIGHT_RANGE = (0.0, 8.0)
CONSISTENCY_RANGE = (1, 10)
NOISE_RANGE = (1, 10)
LIGHT_RANGE = (1, 10)

# ----- Pillar constants -----

PILLAR_BASELINE = 100.0

# efficiency
DURATION_TARGET_MIN = 7.0
DURATION_TARGET_MAX = 9.0
SHORT_SLEEP_PENALTY_PER_HOUR = 15.0
LONG_SLEEP_PENALTY_PER_HOUR = 10.0
LATENCY_GRACE_MIN = 20.0
LATENCY_PENALTY_DIVISOR = 2.0
AWAKENING_PENALTY = 8.0

# consistency
CONSISTENCY_SCALE = 10.0
HIGH_STRESS_THRESHOLD = 7
HIGH_STRESS_CONSISTENCY_PENALTY = 10.0

# environment
NOISE_PENALTY_PER_LEVEL = 8.0
LIGHT_PENALTY_PER_LEVEL = 8.0
TEMPERATURE_PENALTY = 15.0

# lifestyle
CAFFEINE_PENALTY: dict[CaffeineIntake, float] = {
    CaffeineIntake.NONE: 0.0,
    CaffeineIntake.LOW: 10.0,
    CaffeineIntake.MODERATE: 25.0,
    CaffeineIntake.HIGH: 40.0,
}
BLUE_LIGHT_PENALTY_PER_HOUR = 12.0
STRESS_PENALTY_PER_LEVEL = 4.0

PILLAR_WEIGHTS: dict[Pillar, float] = {
    Pillar.EFFICIENCY: 0.4,
    Pillar.CONSISTENCY: 0.2,
    Pillar.ENVIRONMENT: 0.2,
    Pillar.LIFESTYLE: 0.2,
}

# (minimum score, label), evaluated top-down
QUALITY_BANDS: list[tuple[int, QualityLabel]] = [
    (85, QualityLabel.EXCELLENT),
    (70, QualityLabel.GOOD),
    (50, QualityLabel.FAIR),
    (30, QualityLabel.POOR),
]

PILLAR_PHRASES: dict[Pillar, str] = {
    Pillar.EFFICIENCY: "sleep efficiency",
    Pillar.CONSISTENCY: "schedule consistency",
    Pillar.ENVIRONMENT: "sleep environment",
    Pillar.LIFESTYLE: "lifestyle habits",
}

# ----- Recommendations -----

BLUE_LIGHT_THRESHOLD_HOURS = 1.0
LATENCY_THRESHOLD_MIN = 30

MIN_RECOMMENDATIONS = 2
MAX_RECOMMENDATIONS = 4

GENERIC_RECOMMENDATIONS = [
    "Keep the same wake-up time every day, weekends included, to anchor your circadian rhythm.",
    "Get 10-15 minutes of daylight soon after waking to reinforce healthy melatonin timing.",
]


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def _coerce_enum(value: object, enum_cls: type[E], default: E) -> E:
    # unrecognised values fall back to the lowest-penalty member
    try:
        return enum_cls(value)
    except ValueError:
        return default


def normalize_score(value: float) -> int:
    """
    Clamp to [0, 100] and round half up (ties go away from zero on this range).

    Python's round() rounds half to even, which would turn 92.5 into 92.
    """
    clamped = _clamp(value, (0.0, 100.0))
    return int(math.floor(clamped + 0.5))


def quality_label_for(score: int) -> QualityLabel:
    for minimum, label in QUALITY_BANDS:
        if score >= minimum:
            return label
    return QualityLabel.CRITICAL


def weakest_pillar(breakdown: Breakdown) -> Pillar:
    # min() keeps the first of equal values, so Pillar order breaks ties
    pillar, _ = min(breakdown.pillar_scores(), key=lambda item: item[1])
    return pillar


# ----- Pillars -----

def _efficiency(duration: float, latency: float, awakenings: float) -> float:
    score = PILLAR_BASELINE
    if duration < DURATION_TARGET_MIN:
        score -= (DURATION_TARGET_MIN - duration) * SHORT_SLEEP_PENALTY_PER_HOUR
    if duration > DURATION_TARGET_MAX:
        score -= (duration - DURATION_TARGET_MAX) * LONG_SLEEP_PENALTY_PER_HOUR
    score -= max(0.0, (latency - LATENCY_GRACE_MIN) / LATENCY_PENALTY_DIVISOR)
    score -= awakenings * AWAKENING_PENALTY
    return score


def _consistency(consistency: float, stress_level: float) -> float:
    score = consistency * CONSISTENCY_SCALE
    if stress_level > HIGH_STRESS_THRESHOLD:
        score -= HIGH_STRESS_CONSISTENCY_PENALTY
    return score


def _environment(noise: float, light: float, temperature: Temperature) -> float:
    score = PILLAR_BASELINE
    score -= (noise - 1) * NOISE_PENALTY_PER_LEVEL
    score -= (light - 1) * LIGHT_PENALTY_PER_LEVEL
    if temperature is not Temperature.OPTIMAL:
        score -= TEMPERATURE_PENALTY
    return score


def _lifestyle(caffeine: CaffeineIntake, blue_light: float, stress_level: float) -> float:
    score = PILLAR_BASELINE
    score -= CAFFEINE_PENALTY[caffeine]
    score -= blue_light * BLUE_LIGHT_PENALTY_PER_HOUR
    score -= stress_level * STRESS_PENALTY_PER_LEVEL
    return score


# ----- Narrative -----

def _format_number(value: float) -> str:
    # 15.0 -> "15", 7.5 -> "7.5"
    return f"{value:g}"


def _build_recommendations(
    duration: float,
    latency: float,
    caffeine: CaffeineIntake,
    blue_light: float,
    temperature: Temperature,
) -> list[str]:
    recommendations: list[str] = []

    if blue_light > BLUE_LIGHT_THRESHOLD_HOURS:
        recommendations.append(
            "Enable 'Night Shift' or stop screen use 90 mins before bed to protect melatonin production."
        )
    if temperature is not Temperature.OPTIMAL:
        recommendations.append(
            f"Your room is {temperature.value}; aim for 65°F (18°C) for core temperature drop."
        )
    if caffeine in (CaffeineIntake.MODERATE, CaffeineIntake.HIGH):
        recommendations.append(
            "Caffeine has a 6-hour half-life; try a strict 'No Caffeine after 2 PM' rule."
        )
    if latency > LATENCY_THRESHOLD_MIN:
        recommendations.append(
            "Try the 4-7-8 breathing technique or Progressive Muscle Relaxation to reduce sleep latency."
        )
    if duration < DURATION_TARGET_MIN:
        recommendations.append(
            "Prioritize a 'Sleep Buffer' by getting into bed 30 minutes earlier than your goal time."
        )

    for generic in GENERIC_RECOMMENDATIONS:
        if len(recommendations) >= MIN_RECOMMENDATIONS:
            break
        recommendations.append(generic)

    return recommendations[:MAX_RECOMMENDATIONS]


def _build_insights(stress_level: float, latency: float, blue_light: float, noise: float) -> list[str]:
    if blue_light > BLUE_LIGHT_THRESHOLD_HOURS:
        latency_cause = "circadian rhythm is delayed by blue light"
    else:
        latency_cause = "nervous system may be in a state of hyperarousal"

    return [
        f"With a stress level of {_format_number(stress_level)}/10, your cortisol levels may be "
        "inhibiting the transition into deep REM cycles.",
        f"A latency of {_format_number(latency)} mins suggests your {latency_cause}.",
        f"Your environment noise level ({_format_number(noise)}) might be causing 'micro-awakenings' "
        "that fragment your sleep architecture without you noticing.",
    ]


def _build_summary(label: QualityLabel, weakest: Pillar) -> str:
    return (
        f"Your sleep is currently rated as {label.value}. "
        f"Your primary area for improvement is {PILLAR_PHRASES[weakest]}, "
        "which is significantly impacting your restorative recovery."
    )


def compute_sleep_report(data: SleepInput) -> SleepReport:
    """
    Score one night of self-reported sleep into a SleepReport.

    Rules:
    - Four pillars, each from a baseline reduced by penalties:
      * efficiency: duration outside 7-9h, latency over 20 min, awakenings
      * consistency: self-rated regularity x10, minus 10 when stress > 7
      * environment: noise, light, non-optimal temperature
      * lifestyle: caffeine, blue light, stress
    - Each pillar is clamped to 0-100 and rounded half up.
    - SQI = 0.4 efficiency + 0.2 each for the other three, normalized the same way.
    - Recommendations: all matching rules in order, backfilled with generic
      advice up to 2, truncated to 4.

    Out-of-range numbers are clamped to their domain and unknown categorical
    values fall back to the lowest-penalty option, so this never raises for a
    well-typed SleepInput.
    """
    duration = _clamp(data.duration, DURATION_RANGE)
    latency = _clamp(data.latency, LATENCY_RANGE)
    awakenings = _clamp(data.awakenings, AWAKENINGS_RANGE)
    stress_level = _clamp(data.stress_level, STRESS_RANGE)
    blue_light = _clamp(data.blue_light_exposure, BLUE_LIGHT_RANGE)
    consistency = _clamp(data.consistency, CONSISTENCY_RANGE)
    noise = _clamp(data.environment.noise, NOISE_RANGE)
    light = _clamp(data.environment.light, LIGHT_RANGE)
    caffeine = _coerce_enum(data.caffeine_intake, CaffeineIntake, CaffeineIntake.NONE)
    temperature = _coerce_enum(data.environment.temperature, Temperature, Temperature.OPTIMAL)

    breakdown = Breakdown(
        efficiency=normalize_score(_efficiency(duration, latency, awakenings)),
        consistency=normalize_score(_consistency(consistency, stress_level)),
        environment=normalize_score(_environment(noise, light, temperature)),
        lifestyle=normalize_score(_lifestyle(caffeine, blue_light, stress_level)),
    )

    score = normalize_score(
        sum(PILLAR_WEIGHTS[pillar] * value for pillar, value in breakdown.pillar_scores())
    )
    label = quality_label_for(score)

    return SleepReport(
        score=score,
        quality_label=label,
        breakdown=breakdown,
        summary=_build_summary(label, weakest_pillar(breakdown)),
        recommendations=_build_recommendations(duration, latency, caffeine, blue_light, temperature),
        scientific_insights=_build_insights(stress_level, latency, blue_light, noise),
    )
