from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CaffeineIntake(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Temperature(str, Enum):
    COLD = "cold"
    OPTIMAL = "optimal"
    HOT = "hot"


class CamelModel(BaseModel):
    """
    Base for every wire-facing model: snake_case in Python, camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Environment(CamelModel):
    noise: int
    light: int
    # plain str so unknown values reach the scoring engine, which maps them
    temperature: Temperature | str


class SleepInput(CamelModel):
    """
    Self-reported metrics for a single night / sleep pattern.

    No range constraints here: the scoring engine clamps every bounded field
    itself. Request-level validation lives on SleepIn in the analysis router.
    """

    duration: float               # hours
    latency: int                  # minutes to fall asleep
    awakenings: int
    stress_level: int             # 1-10
    caffeine_intake: CaffeineIntake | str
    blue_light_exposure: float    # hours of screens before bed
    consistency: int              # 1-10, self-rated schedule regularity
    environment: Environment
