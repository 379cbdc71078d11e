"""Daily Oracle - Score-bracket narrative plus cross-metric directives.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import NamedTuple

from .models import ColorTag, Directive, MetricsFrame, Mood, NutritionTotals, OracleReading
from .scoring import wellness_score


class MoodTemplate(NamedTuple):
    headline: str
    body: str
    action_tip: str
    icon: str
    color_tag: ColorTag


MOOD_TEMPLATES: dict[Mood, MoodTemplate] = {
    Mood.PEAK: MoodTemplate(
        headline="Peak Performance Day",
        body=(
            "Your vitals are aligned for an exceptional day. HRV is high, sleep was "
            "restorative, and your energy reserves are full. Push hard today, your body is ready."
        ),
        action_tip="Tackle your most demanding task in the first 90 minutes of your day.",
        icon="bolt",
        color_tag=ColorTag.PURPLE,
    ),
    Mood.STEADY: MoodTemplate(
        headline="Steady State Today",
        body=(
            "You're in a good place. Not your best day, not your worst. Moderate exercise "
            "and keeping stress low will preserve your energy through the afternoon."
        ),
        action_tip="A 20-min walk after lunch will prevent the afternoon slump.",
        icon="leaf",
        color_tag=ColorTag.GREEN,
    ),
    Mood.RECOVERY: MoodTemplate(
        headline="Recovery Mode",
        body=(
            "Your body is signaling it needs support today. Lower HRV and reduced sleep "
            "quality mean your nervous system is under stress. Be gentle with yourself."
        ),
        action_tip="Opt for light movement, yoga or a short walk. Prioritize sleep tonight.",
        icon="mind-and-body",
        color_tag=ColorTag.ORANGE,
    ),
    Mood.REST: MoodTemplate(
        headline="Rest & Restore",
        body=(
            "Your metrics suggest significant fatigue. Pushing hard today could deepen the "
            "deficit. A real rest day is the smartest performance decision you can make."
        ),
        action_tip="No intense exercise. Focus on hydration, nutrition, and 9+ hours of sleep tonight.",
        icon="moon-stars",
        color_tag=ColorTag.BLUE,
    ),
}

PROTEIN_FOCUS = Directive(
    title="Protein Focus",
    subtitle="Low HRV + Low Protein detected. Critical for repair.",
    icon="leaf",
    color_tag=ColorTag.ORANGE,
)
CARB_ADJUSTMENT = Directive(
    title="Carb Adjustment",
    subtitle="High carbs with low sleep may cause energy crashes.",
    icon="chart-bar",
    color_tag=ColorTag.BLUE,
)
FORGE_INTENSITY = Directive(
    title="Forge Intensity",
    subtitle="Biology is primed. Level up your training today.",
    icon="bolt",
    color_tag=ColorTag.PURPLE,
)


def mood_for_score(score: int) -> Mood:
    """Map a wellness score to its mood bracket."""
    if score >= 85:
        return Mood.PEAK
    if score >= 65:
        return Mood.STEADY
    if score >= 40:
        return Mood.RECOVERY
    return Mood.REST


def greeting_for_hour(hour_of_day: int) -> str:
    """Time-of-day greeting shown above the reading."""
    if 5 <= hour_of_day <= 11:
        return "Good Morning"
    if 12 <= hour_of_day <= 17:
        return "Good Afternoon"
    if 18 <= hour_of_day <= 21:
        return "Good Evening"
    return "Good Night"


def correlate_directives(frame: MetricsFrame, totals: NutritionTotals, score: int) -> list[Directive]:
    """Evaluate the correlation rules independently, in fixed order.

    Args:
        frame: Current metrics snapshot
        totals: Nutrition totals for the day
        score: Wellness score of the frame

    Returns:
        Directives that fired; empty means no actionable correlation today
    """
    directives: list[Directive] = []

    if frame.hrv < 40 and totals.protein < 50:
        directives.append(PROTEIN_FOCUS)

    if frame.sleep_hours < 6 and totals.carbs > 200:
        directives.append(CARB_ADJUSTMENT)

    if score > 85:
        directives.append(FORGE_INTENSITY)

    return directives


def generate_oracle(
    frame: MetricsFrame,
    totals: NutritionTotals | None,
    hour_of_day: int,
) -> OracleReading:
    """Generate the daily oracle reading.

    Args:
        frame: Current metrics snapshot
        totals: Nutrition totals for the day (None when nothing was logged)
        hour_of_day: Local hour, 0-23

    Returns:
        OracleReading for the frame's score bracket with its directives
    """
    if totals is None:
        totals = NutritionTotals()

    score = wellness_score(frame)
    mood = mood_for_score(score)
    template = MOOD_TEMPLATES[mood]

    return OracleReading(
        headline=template.headline,
        body=template.body,
        action_tip=template.action_tip,
        mood=mood,
        icon=template.icon,
        color_tag=template.color_tag,
        greeting=greeting_for_hour(hour_of_day),
        directives=tuple(correlate_directives(frame, totals, score)),
    )
