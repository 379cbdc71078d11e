"""MCP Server - Tool definitions for assistant integration.

Exposes the wellness engines as MCP tools so a voice or chat assistant can
read the published score, log meals, and ask for forecasts.
"""

import logging
import os
from datetime import date, datetime, timezone

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.models import FitnessGoal, MealEntry, MetricsFrame, NutritionTotals, UserContext
from ..core.nutrition import calculate_nutrition_totals
from ..core.forecast import predict_slump
from ..core.oracle import generate_oracle
from ..core.responder import detect_intent
from .chat import generate_response, thinking_delay_from_env
from .firestore_client import WellnessFirestoreClient, FirestoreConfig
from .snapshot import ScoreBoard


logger = logging.getLogger(__name__)

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

mcp = FastMCP(
    "wellnessforge",
    instructions="""WellnessForge - Personal wellness coach.

Use these tools to read the user's wellness score, forecast their energy,
log meals, and give the daily oracle reading.

Metrics tools take the latest readings as arguments; a reading the device
could not provide should be passed as 0.
On first use, call setup_profile to record the user's name and fitness goal.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized clients
_firestore_client: WellnessFirestoreClient | None = None
_score_board: ScoreBoard | None = None


def get_firestore_client() -> WellnessFirestoreClient:
    """Get or create Firestore client."""
    global _firestore_client
    if _firestore_client is None:
        config = FirestoreConfig(
            project_id=os.environ.get("GCP_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", "wellnessforge"),
            profile_id=os.environ.get("WELLNESSFORGE_PROFILE_ID", "default"),
        )
        _firestore_client = WellnessFirestoreClient(config)
    return _firestore_client


def get_score_board() -> ScoreBoard:
    """Get or create the published score board."""
    global _score_board
    if _score_board is None:
        _score_board = ScoreBoard(get_firestore_client())
    return _score_board


def current_hour() -> int:
    """Local hour handed to the engines, which never read the clock themselves."""
    return datetime.now().hour


def today_totals(db: WellnessFirestoreClient, today: date | None = None) -> NutritionTotals:
    """Nutrition totals over the meals logged today."""
    return calculate_nutrition_totals(db.get_meals(today or date.today()))


# ==================== Profile Tools ====================


@mcp.tool()
def setup_profile(name: str, fitness_goal: str = FitnessGoal.MAINTENANCE.value) -> str:
    """Record the user's name and fitness goal.

    Args:
        name: Display name
        fitness_goal: One of "Weight Loss", "Muscle Gain", "Maintenance", "Performance"

    Returns:
        Confirmation message
    """
    try:
        goal = FitnessGoal(fitness_goal)
    except ValueError:
        options = ", ".join(g.value for g in FitnessGoal)
        return f"Unknown fitness goal '{fitness_goal}'. Choose one of: {options}."

    if get_firestore_client().save_profile(UserContext(name=name, fitness_goal=goal)):
        return f"Profile saved! Name: {name}, goal: {goal.value}"
    return "Failed to save profile. Please try again."


@mcp.tool()
def get_profile() -> dict:
    """Retrieve the user's profile (defaults when none is set up).

    Returns:
        Dictionary with name and fitness goal
    """
    profile = get_firestore_client().get_profile() or UserContext()
    return profile.model_dump(mode="json")


# ==================== Meal Tools ====================


@mcp.tool()
def log_meal(name: str, calories: int, protein: int, carbs: int, fats: int) -> dict:
    """Add a meal to today's log.

    Args:
        name: Name of the meal
        calories: Total calories
        protein: Protein in grams
        carbs: Carbohydrates in grams
        fats: Fat in grams

    Returns:
        The created entry and today's nutrition totals
    """
    entry = MealEntry(name=name, calories=calories, protein=protein, carbs=carbs, fats=fats)

    entries = get_firestore_client().add_meal(entry)
    if entries is None:
        return {"error": "Failed to log meal. Please try again."}

    return {
        "entry": entry.model_dump(mode="json"),
        "totals": calculate_nutrition_totals(entries).model_dump(),
    }


@mcp.tool()
def get_today_nutrition() -> dict:
    """Get today's meals and their macro totals.

    Returns:
        Dictionary with date, entries, and totals
    """
    today = date.today()
    entries = get_firestore_client().get_meals(today)

    return {
        "date": today.isoformat(),
        "entries": [e.model_dump(mode="json") for e in entries],
        "totals": calculate_nutrition_totals(entries).model_dump(),
    }


# ==================== Score & Forecast Tools ====================


@mcp.tool()
def get_wellness_score() -> dict:
    """Get the most recently published wellness score.

    Returns:
        Score and publish time, or an error if nothing was published yet
    """
    snapshot = get_score_board().latest()
    if snapshot is None:
        return {"error": "No score published yet. Refresh metrics with score_metrics first."}

    return {
        "score": snapshot.score,
        "published_at": snapshot.published_at.isoformat(),
        "dialog": f"Your Wellness Forge Score is {snapshot.score}.",
    }


@mcp.tool()
def score_metrics(
    steps: int = 0,
    heart_rate_bpm: float = 0,
    active_calories: float = 0,
    sleep_hours: float = 0,
    hrv: float = 0,
) -> dict:
    """Score fresh metrics and publish the result.

    Args:
        steps: Step count for the day
        heart_rate_bpm: Latest heart rate
        active_calories: Active energy burned in kcal
        sleep_hours: Hours slept last night
        hrv: Heart-rate variability in ms

    Returns:
        The published score
    """
    frame = MetricsFrame(
        steps=steps,
        heart_rate_bpm=heart_rate_bpm,
        active_calories=active_calories,
        sleep_hours=sleep_hours,
        hrv=hrv,
    )
    snapshot = get_score_board().publish(frame, datetime.now(timezone.utc))
    return snapshot.model_dump(mode="json")


@mcp.tool()
def forecast_energy(
    steps: int = 0,
    heart_rate_bpm: float = 0,
    active_calories: float = 0,
    sleep_hours: float = 0,
    hrv: float = 0,
) -> dict:
    """Forecast an energy slump for the current hour.

    Args:
        steps: Step count for the day
        heart_rate_bpm: Latest heart rate
        active_calories: Active energy burned in kcal
        sleep_hours: Hours slept last night
        hrv: Heart-rate variability in ms

    Returns:
        Slump state, confidence, and message
    """
    frame = MetricsFrame(
        steps=steps,
        heart_rate_bpm=heart_rate_bpm,
        active_calories=active_calories,
        sleep_hours=sleep_hours,
        hrv=hrv,
    )
    profile = get_firestore_client().get_profile() or UserContext()
    return predict_slump(frame, current_hour(), profile.fitness_goal).model_dump(mode="json")


@mcp.tool()
def get_daily_oracle(
    steps: int = 0,
    heart_rate_bpm: float = 0,
    active_calories: float = 0,
    sleep_hours: float = 0,
    hrv: float = 0,
) -> dict:
    """Give today's oracle reading, correlating vitals with today's meals.

    Args:
        steps: Step count for the day
        heart_rate_bpm: Latest heart rate
        active_calories: Active energy burned in kcal
        sleep_hours: Hours slept last night
        hrv: Heart-rate variability in ms

    Returns:
        Headline, body, action tip, mood, and directives
    """
    frame = MetricsFrame(
        steps=steps,
        heart_rate_bpm=heart_rate_bpm,
        active_calories=active_calories,
        sleep_hours=sleep_hours,
        hrv=hrv,
    )
    reading = generate_oracle(frame, today_totals(get_firestore_client()), current_hour())
    return reading.model_dump(mode="json")


@mcp.tool()
async def ask_coach(
    message: str,
    steps: int = 0,
    heart_rate_bpm: float = 0,
    active_calories: float = 0,
    sleep_hours: float = 0,
    hrv: float = 0,
) -> dict:
    """Ask the wellness coach a question.

    Args:
        message: The user's message
        steps: Step count for the day
        heart_rate_bpm: Latest heart rate
        active_calories: Active energy burned in kcal
        sleep_hours: Hours slept last night
        hrv: Heart-rate variability in ms

    Returns:
        Detected intent and the coach's reply, after the thinking delay
    """
    frame = MetricsFrame(
        steps=steps,
        heart_rate_bpm=heart_rate_bpm,
        active_calories=active_calories,
        sleep_hours=sleep_hours,
        hrv=hrv,
    )
    profile = get_firestore_client().get_profile()
    reply = await generate_response(
        message, frame, profile, current_hour(), delay=thinking_delay_from_env()
    )

    return {"intent": detect_intent(message).value, "reply": reply}
