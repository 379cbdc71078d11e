"""Wellness Scoring - Pure function from a metrics frame to a 0-100 score.

All functions are pure: same input always produces same output, no side effects.
"""

import math

from .models import MetricsFrame


STEP_TARGET = 10000
SLEEP_TARGET_HOURS = 8.0
HRV_TARGET_MS = 50.0

STEP_WEIGHT = 30
SLEEP_WEIGHT = 30
HRV_WEIGHT = 20
HEART_RATE_IN_RANGE = 20
HEART_RATE_OUT_OF_RANGE = 10


def heart_rate_in_range(bpm: float) -> bool:
    """Resting heart rate window, exclusive at both ends."""
    return 40 < bpm < 100


def score_components(frame: MetricsFrame) -> tuple[float, float, float, float]:
    """Calculate the four clamped score components.

    Args:
        frame: Metrics snapshot to score

    Returns:
        Tuple of (steps, sleep, heart_rate, hrv) points
    """
    step_score = min(frame.steps / STEP_TARGET * STEP_WEIGHT, STEP_WEIGHT)
    sleep_score = min(frame.sleep_hours / SLEEP_TARGET_HOURS * SLEEP_WEIGHT, SLEEP_WEIGHT)
    hr_score = HEART_RATE_IN_RANGE if heart_rate_in_range(frame.heart_rate_bpm) else HEART_RATE_OUT_OF_RANGE
    hrv_score = min(frame.hrv / HRV_TARGET_MS * HRV_WEIGHT, HRV_WEIGHT)

    return step_score, sleep_score, float(hr_score), hrv_score


def wellness_score(frame: MetricsFrame) -> int:
    """Calculate the composite wellness score.

    The component sum is truncated, not rounded: 81.25 scores 81.

    Args:
        frame: Metrics snapshot to score

    Returns:
        Integer score in [0, 100]
    """
    return math.floor(sum(score_components(frame)))
