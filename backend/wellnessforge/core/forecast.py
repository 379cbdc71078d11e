"""Fatigue Forecast - Predict an energy slump from vitals and time of day.

All functions are pure: the hour of day is passed in, never read from a clock.
"""

from .models import FitnessGoal, MetricsFrame, SlumpPrediction, SlumpState


# Placeholder until there is a calibration model behind the forecast.
FORECAST_CONFIDENCE = 0.92

CRITICAL_THRESHOLD = 70
SLUMP_THRESHOLD = 45
HIGH_ENERGY_THRESHOLD = 25
HIGH_ENERGY_MIN_HRV = 55

CRITICAL_MESSAGE = (
    "Critical fatigue imminent. Your body needs deep recovery. "
    "Avoid intense physical or cognitive stress."
)
EARLY_FATIGUE_MESSAGE = "Early fatigue detected. Consider a protein-rich snack and light movement."
AFTERNOON_SLUMP_MESSAGE = "Afternoon slump predicted. A 10-minute digital detox or hydration is recommended."
HIGH_ENERGY_MESSAGE = (
    "Optimal state detected! Your baseline and current vitals suggest you are "
    "ready for a high-intensity 'Forge' session."
)
STEADY_MESSAGE = "Your energy levels are predicted to be stable."


def circadian_load(hour_of_day: int) -> float:
    """Energy dip expected at this hour: early afternoon and before bed."""
    if 21 <= hour_of_day <= 23:
        return 25.0
    if 14 <= hour_of_day <= 16:
        return 15.0
    return 0.0


def fatigue_index(frame: MetricsFrame, hour_of_day: int, goal: FitnessGoal | None = None) -> float:
    """Calculate the fatigue index used to bucket a slump state.

    Args:
        frame: Current metrics snapshot
        hour_of_day: Local hour, 0-23
        goal: User's fitness goal (None means Maintenance)

    Returns:
        Unbounded fatigue index; negative when HRV is above 100ms
    """
    if goal is None:
        goal = FitnessGoal.MAINTENANCE

    sleep_debt = max(0.0, 8.0 - frame.sleep_hours)
    somatic_load = 100.0 - frame.hrv
    multiplier = 0.8 if goal == FitnessGoal.PERFORMANCE else 1.2

    return (sleep_debt * 12 + somatic_load / 1.5 + circadian_load(hour_of_day)) * multiplier


def predict_slump(
    frame: MetricsFrame,
    hour_of_day: int,
    goal: FitnessGoal | None = None,
) -> SlumpPrediction:
    """Forecast the user's energy state.

    Thresholds are strict and checked in order, first match wins.

    Args:
        frame: Current metrics snapshot
        hour_of_day: Local hour, 0-23
        goal: User's fitness goal (None means Maintenance)

    Returns:
        SlumpPrediction with state, fixed confidence, and message
    """
    index = fatigue_index(frame, hour_of_day, goal)

    if index > CRITICAL_THRESHOLD:
        state, message = SlumpState.CRITICAL_FATIGUE, CRITICAL_MESSAGE
    elif index > SLUMP_THRESHOLD:
        state = SlumpState.IMPENDING_SLUMP
        message = EARLY_FATIGUE_MESSAGE if hour_of_day < 12 else AFTERNOON_SLUMP_MESSAGE
    elif index < HIGH_ENERGY_THRESHOLD and frame.hrv > HIGH_ENERGY_MIN_HRV:
        state, message = SlumpState.HIGH_ENERGY, HIGH_ENERGY_MESSAGE
    else:
        state, message = SlumpState.STEADY, STEADY_MESSAGE

    return SlumpPrediction(state=state, confidence=FORECAST_CONFIDENCE, message=message)
