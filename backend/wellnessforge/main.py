"""WellnessForge Service - Entry point.

Runs the JSON API and the MCP server with HTTP transport.
Uses Starlette with the MCP HTTP app mounted at root.
"""

import logging
import os
from datetime import date, datetime, timezone

import uvicorn
from pydantic import BaseModel, Field, ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .core.models import MealEntry, MetricsFrame, UserContext
from .core.nutrition import calculate_nutrition_totals, match_food, meal_from_food
from .core.forecast import predict_slump
from .core.oracle import generate_oracle
from .core.responder import detect_intent
from .core.scoring import wellness_score
from .shell import mcp_server
from .shell.chat import generate_response, thinking_delay_from_env
from .shell.mcp_server import mcp, current_hour


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ==================== Request Bodies ====================


class MetricsRequest(BaseModel):
    metrics: MetricsFrame = Field(default_factory=MetricsFrame)
    hour_of_day: int | None = Field(default=None, ge=0, le=23)


class ForecastRequest(MetricsRequest):
    user: UserContext | None = None


class OracleRequest(MetricsRequest):
    meals: list[MealEntry] | None = Field(
        default=None, description="Meals to correlate; today's stored meals when omitted"
    )


class ChatRequest(ForecastRequest):
    message: str


class Classification(BaseModel):
    label: str
    confidence: float = Field(ge=0, le=1)


class ScanRequest(BaseModel):
    classifications: list[Classification]
    log: bool = False


class BadRequest(Exception):
    """Request body could not be parsed or validated."""


async def parse_body(request: Request, model: type[BaseModel]) -> BaseModel:
    """Parse and validate a JSON body.

    Raises:
        BadRequest: If the body is not JSON or fails validation
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequest("Request body must be JSON") from e

    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise BadRequest(str(e)) from e


def hour_or_now(hour_of_day: int | None) -> int:
    return current_hour() if hour_of_day is None else hour_of_day


def resolve_user(user: UserContext | None) -> UserContext | None:
    """Explicit user from the request, else the stored profile (may be None)."""
    if user is not None:
        return user
    return mcp_server.get_firestore_client().get_profile()


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for Cloud Run."""
    return JSONResponse({"status": "healthy", "service": "wellnessforge"})


async def score(request: Request) -> JSONResponse:
    """Score a metrics frame and publish it as the latest score."""
    try:
        body = await parse_body(request, MetricsRequest)
        snapshot = mcp_server.get_score_board().publish(body.metrics, datetime.now(timezone.utc))
        return JSONResponse(snapshot.model_dump(mode="json"))
    except BadRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error("Scoring failed: %s", str(e))
        return JSONResponse({"error": "Scoring failed."}, status_code=500)


async def latest_score(request: Request) -> JSONResponse:
    """Read-only accessor for the last published score."""
    snapshot = mcp_server.get_score_board().latest()
    if snapshot is None:
        return JSONResponse({"error": "No score published yet"}, status_code=404)
    return JSONResponse(snapshot.model_dump(mode="json"))


async def forecast(request: Request) -> JSONResponse:
    """Predict an energy slump for the given (or current) hour."""
    try:
        body = await parse_body(request, ForecastRequest)
        user = resolve_user(body.user)
        goal = user.fitness_goal if user is not None else None
        prediction = predict_slump(body.metrics, hour_or_now(body.hour_of_day), goal)
        return JSONResponse(prediction.model_dump(mode="json"))
    except BadRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error("Forecast failed: %s", str(e))
        return JSONResponse({"error": "Forecast failed."}, status_code=500)


async def oracle(request: Request) -> JSONResponse:
    """Generate the daily oracle reading with its directives."""
    try:
        body = await parse_body(request, OracleRequest)
        meals = body.meals
        if meals is None:
            meals = mcp_server.get_firestore_client().get_meals(date.today())

        reading = generate_oracle(
            body.metrics,
            calculate_nutrition_totals(meals),
            hour_or_now(body.hour_of_day),
        )
        payload = reading.model_dump(mode="json")
        payload["score"] = wellness_score(body.metrics)
        return JSONResponse(payload)
    except BadRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error("Oracle failed: %s", str(e))
        return JSONResponse({"error": "Oracle reading failed."}, status_code=500)


async def chat(request: Request) -> JSONResponse:
    """Single-turn coach reply after the non-blocking thinking delay."""
    try:
        body = await parse_body(request, ChatRequest)
        user = resolve_user(body.user)
        reply = await generate_response(
            body.message,
            body.metrics,
            user,
            hour_or_now(body.hour_of_day),
            delay=thinking_delay_from_env(),
        )
        return JSONResponse({"intent": detect_intent(body.message).value, "reply": reply})
    except BadRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error("Chat failed: %s", str(e))
        return JSONResponse({"error": "Chat failed."}, status_code=500)


async def scan_meal(request: Request) -> JSONResponse:
    """Match classifier labels to a known food, optionally logging it."""
    try:
        body = await parse_body(request, ScanRequest)
        item = match_food((c.label, c.confidence) for c in body.classifications)
        if item is None:
            return JSONResponse({"match": None})

        payload: dict = {"match": item.model_dump()}
        if body.log:
            entry = meal_from_food(item, datetime.now())
            if mcp_server.get_firestore_client().add_meal(entry) is None:
                return JSONResponse({"error": "Failed to log meal."}, status_code=500)
            payload["entry"] = entry.model_dump(mode="json")
        return JSONResponse(payload)
    except BadRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error("Meal scan failed: %s", str(e))
        return JSONResponse({"error": "Meal scan failed."}, status_code=500)


# ==================== Create ASGI App ====================


def create_app() -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    We use its lifespan context to ensure proper initialization.
    """
    mcp_app = mcp.streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/v1/score", score, methods=["POST"]),
        Route("/v1/score/latest", latest_score, methods=["GET"]),
        Route("/v1/forecast", forecast, methods=["POST"]),
        Route("/v1/oracle", oracle, methods=["POST"]),
        Route("/v1/chat", chat, methods=["POST"]),
        Route("/v1/meals/scan", scan_meal, methods=["POST"]),
        Mount("/", app=mcp_app),
    ]

    allowed_origins = os.environ.get("WELLNESSFORGE_ALLOWED_ORIGINS", "http://localhost:5173")

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=[o.strip() for o in allowed_origins.split(",") if o.strip()],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting WellnessForge service on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
