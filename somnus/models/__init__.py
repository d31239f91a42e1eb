from somnus.models.sleep import CaffeineIntake, Environment, SleepInput, Temperature
from somnus.models.report import Breakdown, Pillar, QualityLabel, SleepReport

__all__ = [
    "CaffeineIntake",
    "Environment",
    "SleepInput",
    "Temperature",
    "Breakdown",
    "Pillar",
    "QualityLabel",
    "SleepReport",
]
