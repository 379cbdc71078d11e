"""Core Data Models - Pydantic models for type safety.

All models are immutable value objects with no behavior beyond validation.
Derived results (predictions, readings, directives) are recomputed per call
and never stored by the core.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
import uuid


class FitnessGoal(str, Enum):
    """Training goal chosen by the user."""

    WEIGHT_LOSS = "Weight Loss"
    MUSCLE_GAIN = "Muscle Gain"
    MAINTENANCE = "Maintenance"
    PERFORMANCE = "Performance"


class SlumpState(str, Enum):
    HIGH_ENERGY = "high_energy"
    STEADY = "steady"
    IMPENDING_SLUMP = "impending_slump"
    CRITICAL_FATIGUE = "critical_fatigue"


class Mood(str, Enum):
    PEAK = "peak"
    STEADY = "steady"
    RECOVERY = "recovery"
    REST = "rest"


class ColorTag(str, Enum):
    """Closed set of color hints for the presentation layer."""

    PURPLE = "purple"
    GREEN = "green"
    ORANGE = "orange"
    BLUE = "blue"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Intent(str, Enum):
    HEALTH_INQUIRY = "health_inquiry"
    RECOMMENDATION = "recommendation"
    GREETING = "greeting"
    EMOTIONAL_SUPPORT = "emotional_support"
    UNKNOWN = "unknown"


class MetricsFrame(BaseModel):
    """Snapshot of biometric and activity readings for one refresh cycle.

    A metric the sensor failed to deliver is reported as 0, which is
    valid input everywhere.
    """

    model_config = ConfigDict(frozen=True)

    steps: int = Field(default=0, ge=0, description="Step count for the day")
    heart_rate_bpm: float = Field(default=0, ge=0, description="Latest heart rate in BPM")
    active_calories: float = Field(default=0, ge=0, description="Active energy burned in kcal")
    sleep_hours: float = Field(default=0, ge=0, description="Sleep duration of the last night")
    hrv: float = Field(default=0, ge=0, description="Heart-rate variability in milliseconds")


class MealEntry(BaseModel):
    """A single meal logged by the user."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(min_length=1, description="Name of the meal")
    calories: int = Field(ge=0, description="Total calories")
    protein: int = Field(ge=0, description="Protein in grams")
    carbs: int = Field(ge=0, description="Carbohydrates in grams")
    fats: int = Field(ge=0, description="Fat in grams")
    logged_at: datetime = Field(default_factory=datetime.now)


class PlanCategory(str, Enum):
    RECOVERY = "recovery"
    ACTIVITY = "activity"
    NUTRITION = "nutrition"
    MINDFULNESS = "mindfulness"


class WellnessTask(BaseModel):
    """One checklist item of a wellness plan."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(min_length=1)
    due_time: str = Field(default="", description="Local time label, e.g. 08:00")
    is_completed: bool = False


class WellnessPlan(BaseModel):
    """A titled set of tasks; completion is tracked per task."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(min_length=1)
    details: str = ""
    category: PlanCategory = PlanCategory.ACTIVITY
    tasks: tuple[WellnessTask, ...] = ()


class NutritionTotals(BaseModel):
    """Macro totals summed over a set of meal entries."""

    model_config = ConfigDict(frozen=True)

    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fats: int = Field(default=0, ge=0)


class FoodItem(BaseModel):
    """Fixed nutrition facts for one recognizable food."""

    model_config = ConfigDict(frozen=True)

    name: str
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fats: int = Field(ge=0)


class UserContext(BaseModel):
    """Profile data the engines personalize against."""

    name: str = Field(default="", description="Display name")
    fitness_goal: FitnessGoal = Field(default=FitnessGoal.MAINTENANCE)


class SlumpPrediction(BaseModel):
    """Fatigue forecast for the current hour."""

    model_config = ConfigDict(frozen=True)

    state: SlumpState
    confidence: float = Field(ge=0, le=1)
    message: str


class Directive(BaseModel):
    """Actionable recommendation fired by a cross-metric correlation rule."""

    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: str
    icon: str
    color_tag: ColorTag


class OracleReading(BaseModel):
    """Daily narrative forecast plus the directives that fired."""

    model_config = ConfigDict(frozen=True)

    headline: str
    body: str
    action_tip: str
    mood: Mood
    icon: str
    color_tag: ColorTag
    greeting: str
    directives: tuple[Directive, ...] = Field(
        default=(), description="In rule evaluation order; empty means no correlation today"
    )


class ConversationTurn(BaseModel):
    """One message in a chat session."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ScoreSnapshot(BaseModel):
    """Latest wellness score published for read-only consumers."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    published_at: datetime
