"""Coach Responder - Keyword intent cascade and templated replies.

Classification is a fixed-precedence substring match over lowercased text;
the first matching intent wins. Replies are deterministic for a given
intent and context. The async "thinking" delay lives in the shell.
"""

from .models import FitnessGoal, Intent, MetricsFrame, UserContext
from .scoring import wellness_score


# Checked in order; earlier intents take precedence.
INTENT_KEYWORDS: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.HEALTH_INQUIRY, ("how", "metric", "what is")),
    (Intent.RECOMMENDATION, ("plan", "routine", "recommend", "coach")),
    (Intent.GREETING, ("hi", "hello")),
    (
        Intent.EMOTIONAL_SUPPORT,
        ("tired", "stressed", "sad", "feel", "exhausted", "burnt", "happy", "great"),
    ),
)

SOMATIC_KEYWORDS = ("tired", "stressed")

WELCOME_MESSAGE = (
    "Hey! 👋 I'm your WellnessForge Coach. Ask me anything about your health, "
    "energy, sleep, or workout plan."
)

UNKNOWN_MESSAGE = (
    "I'm here to help you forge a better version of yourself. I can help with "
    "routines, health data analysis, or recovery advice."
)

GENERIC_SUPPORT_MESSAGE = (
    "I'm here to support your journey. Your data suggests you might benefit "
    "from a lighter schedule today."
)

MORNING_ADVICE = "Morning Forge Routine: 1. Hydrate (500ml) 2. Sunlight exposure (10 mins) 3. Light stretching."
EVENING_ADVICE = (
    "Evening Restoration: 1. Digital sunset (screens off) 2. Magnesium-rich snack "
    "3. 5-min guided meditation."
)
MIDDAY_ADVICE = "Mid-day Focus: Stay active and hydrated."

GOAL_ADVICE: dict[FitnessGoal, str] = {
    FitnessGoal.WEIGHT_LOSS: "To support your weight loss goal, aim for a 30-min steady-state cardio session today.",
    FitnessGoal.MUSCLE_GAIN: "Prioritize a high-protein meal and moderate resistance training.",
    FitnessGoal.MAINTENANCE: "Focus on movement variety and consistent hydration.",
    FitnessGoal.PERFORMANCE: "High-intensity interval training (HIIT) is recommended for your performance goal.",
}

OPTIMISED_SCORE = 75


def detect_intent(text: str) -> Intent:
    """Classify a user utterance.

    Args:
        text: Free text from the user

    Returns:
        First intent whose keywords appear in the text, else Intent.UNKNOWN
    """
    lower = text.lower()

    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return intent

    return Intent.UNKNOWN


def time_segment_advice(hour_of_day: int) -> str:
    if hour_of_day < 11:
        return MORNING_ADVICE
    if hour_of_day > 20:
        return EVENING_ADVICE
    return MIDDAY_ADVICE


def contextual_routine(frame: MetricsFrame, user: UserContext, hour_of_day: int) -> str:
    """Routine recommendation for the time of day and the user's goal."""
    status = "optimised" if wellness_score(frame) > OPTIMISED_SCORE else "recovering"
    return (
        f"{time_segment_advice(hour_of_day)} {GOAL_ADVICE[user.fitness_goal]} "
        f"Your vitals show you are {status} today."
    )


def _greeting_reply(frame: MetricsFrame, user: UserContext) -> str:
    return (
        f"Hello {user.name}! 👋 I'm your WellnessForge Coach. I've analyzed your current "
        f"vitals: {frame.steps:,} steps and {int(frame.heart_rate_bpm)} BPM. Given your goal "
        f"of {user.fitness_goal.value}, what's on your mind?"
    )


def _health_reply(lower: str, frame: MetricsFrame) -> str:
    if "sleep" in lower:
        verdict = "below" if frame.sleep_hours < 7 else "optimal for"
        return (
            f"Your sleep analysis shows {frame.sleep_hours:.1f}h of sleep. "
            f"This is {verdict} your baseline."
        )
    return (
        f"Current Metric Snapshot: Steps ({frame.steps}), HR ({int(frame.heart_rate_bpm)} BPM), "
        f"HRV ({int(frame.hrv)}ms). Ask me to deep-dive into any of these."
    )


def _support_reply(lower: str, frame: MetricsFrame) -> str:
    if any(keyword in lower for keyword in SOMATIC_KEYWORDS):
        return (
            f"I've detected a high somatic load (HRV: {int(frame.hrv)}ms). It's okay to feel "
            "this way. I recommend a 5-minute coherence breathing session right now to reset."
        )
    return GENERIC_SUPPORT_MESSAGE


def build_response(
    text: str,
    frame: MetricsFrame,
    user: UserContext | None,
    hour_of_day: int,
) -> str:
    """Build the coach's reply to one user message.

    Args:
        text: Free text from the user
        frame: Current metrics snapshot
        user: User profile (None falls back to Maintenance and no name)
        hour_of_day: Local hour, 0-23, used by routine recommendations

    Returns:
        Reply text; unrecognized input gets the fallback reply
    """
    if user is None:
        user = UserContext()

    lower = text.lower()
    intent = detect_intent(text)

    if intent == Intent.GREETING:
        return _greeting_reply(frame, user)
    if intent == Intent.HEALTH_INQUIRY:
        return _health_reply(lower, frame)
    if intent == Intent.RECOMMENDATION:
        return contextual_routine(frame, user, hour_of_day)
    if intent == Intent.EMOTIONAL_SUPPORT:
        return _support_reply(lower, frame)
    return UNKNOWN_MESSAGE
