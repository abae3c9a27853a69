"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from health_assistant.api.tool_models import (
    HealthDataRequest,
    HealthQuestionRequest,
    HealthSummaryRequest,
    HealthTrendsRequest,
    MealRecommendationRequest,
    ToolResult,
)
from health_assistant.app_logging import configure_logging
from health_assistant.config import has_value
from health_assistant.containers import AppContainer
from health_assistant.domain.errors import InvalidArgumentError
from health_assistant.tool_catalog import tool_definitions


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "%s starting (openai=%s, google_health=%s, meals=%s)",
            settings.server_name,
            has_value(settings.openai_api_key),
            has_value(settings.google_health_client_id),
            len(container.meal_catalog),
        )
        yield
        logger.info("%s shutting down", settings.server_name)
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, _format_validation_error(exc)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            body = ToolResult(success=False, error="Endpoint not found").model_dump(
                mode="json", exclude_none=True
            )
            body["path"] = request.url.path
            body["method"] = request.method
            return JSONResponse(status_code=exc.status_code, content=body)
        return _error_response(exc.status_code, str(exc.detail))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "server": settings.server_name,
            "version": settings.server_version,
        }

    @app.get("/mcp/info")
    async def info() -> dict[str, object]:
        """Describe the server and the tools it exposes."""
        return {
            "name": settings.server_name,
            "version": settings.server_version,
            "description": (
                "Tool server providing health data and meal recommendation tools"
            ),
            "integrations": {
                "openai": has_value(settings.openai_api_key),
                "googleHealth": has_value(settings.google_health_client_id),
            },
            "tools": tool_definitions(),
        }

    @app.post("/mcp/health-data")
    async def health_data(
        request: Request,
        payload: Annotated[HealthDataRequest | None, Body()] = None,
    ) -> JSONResponse:
        """Return metric series for the requested kind and window."""
        body = payload or HealthDataRequest()
        state_container: AppContainer = request.app.state.container
        return await _run_tool(
            logger,
            "health data",
            lambda: state_container.health_tools.get_health_data(
                body.metric_type, body.days
            ),
        )

    @app.post("/mcp/health-question")
    async def health_question(
        request: Request,
        payload: Annotated[HealthQuestionRequest | None, Body()] = None,
    ) -> JSONResponse:
        """Answer a health question."""
        body = payload or HealthQuestionRequest()
        state_container: AppContainer = request.app.state.container
        return await _run_tool(
            logger,
            "health question",
            lambda: state_container.health_tools.ask_health_question(
                body.question or "", body.include_data
            ),
        )

    @app.post("/mcp/health-summary")
    async def health_summary(
        request: Request,
        payload: Annotated[HealthSummaryRequest | None, Body()] = None,
    ) -> JSONResponse:
        """Summarize health data for a period."""
        body = payload or HealthSummaryRequest()
        state_container: AppContainer = request.app.state.container
        return await _run_tool(
            logger,
            "health summary",
            lambda: state_container.health_tools.get_health_summary(body.period),
        )

    @app.post("/mcp/health-trends")
    async def health_trends(
        request: Request,
        payload: Annotated[HealthTrendsRequest | None, Body()] = None,
    ) -> JSONResponse:
        """Analyze health trends over a window."""
        body = payload or HealthTrendsRequest()
        state_container: AppContainer = request.app.state.container
        return await _run_tool(
            logger,
            "health trends",
            lambda: state_container.health_tools.get_health_trends(body.days),
        )

    @app.post("/mcp/meal-recommendations")
    async def meal_recommendations(
        request: Request,
        payload: Annotated[MealRecommendationRequest | None, Body()] = None,
    ) -> JSONResponse:
        """Recommend meals from the catalog."""
        body = payload or MealRecommendationRequest()
        state_container: AppContainer = request.app.state.container

        async def recommend() -> dict[str, object]:
            result = await state_container.meal_recommendations.recommend(
                body.to_domain()
            )
            return result.to_payload()

        return await _run_tool(logger, "meal recommendations", recommend)

    return app


async def _run_tool(
    logger: logging.Logger,
    action: str,
    call: Callable[[], Awaitable[object]],
) -> JSONResponse:
    """Run a tool call and wrap the outcome in the response envelope."""
    try:
        data = await call()
    except InvalidArgumentError as exc:
        logger.info("Rejected %s request: %s", action, exc)
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception:
        logger.exception("%s tool failed", action.capitalize())
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
    body = ToolResult(success=True, data=data)
    return JSONResponse(content=body.model_dump(mode="json", exclude_none=True))


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ToolResult(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def _format_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"
