"""Tool definitions advertised by the server."""

from dataclasses import dataclass, field
from enum import Enum

from health_assistant.domain.health import MetricKind
from health_assistant.domain.meals import CalorieRange, MealCategory


@dataclass(frozen=True)
class ToolDefinition:
    """Declarative tool definition with a JSON input schema."""

    name: str
    description: str
    path: str
    input_schema: dict[str, object] = field(default_factory=dict)


class HealthTool(Enum):
    """Enum of server tools (single source of truth)."""

    HEALTH_DATA = ToolDefinition(
        "get_health_data",
        "Fetch latest health metrics",
        "/mcp/health-data",
        {
            "type": "object",
            "properties": {
                "metric_type": {
                    "type": "string",
                    "enum": [kind.value for kind in MetricKind] + ["all"],
                    "default": "all",
                },
                "days": {"type": "number", "default": 7, "minimum": 1, "maximum": 365},
            },
        },
    )
    HEALTH_QUESTION = ToolDefinition(
        "ask_health_question",
        "Get AI-powered health insights",
        "/mcp/health-question",
        {
            "type": "object",
            "properties": {
                "question": {"type": "string"},
                "include_data": {"type": "boolean", "default": True},
            },
            "required": ["question"],
        },
    )
    HEALTH_SUMMARY = ToolDefinition(
        "get_health_summary",
        "Generate daily/weekly/monthly health summary",
        "/mcp/health-summary",
        {
            "type": "object",
            "properties": {
                "period": {
                    "type": "string",
                    "enum": ["today", "week", "month"],
                    "default": "week",
                }
            },
        },
    )
    HEALTH_TRENDS = ToolDefinition(
        "get_health_trends",
        "Analyze health trends over time",
        "/mcp/health-trends",
        {
            "type": "object",
            "properties": {
                "days": {
                    "type": "number",
                    "default": 30,
                    "minimum": 7,
                    "maximum": 365,
                }
            },
        },
    )
    MEAL_RECOMMENDATIONS = ToolDefinition(
        "get_meal_recommendations",
        "Recommend meals filtered by type, prep time, calories and diet",
        "/mcp/meal-recommendations",
        {
            "type": "object",
            "properties": {
                "meal_type": {
                    "type": "string",
                    "enum": [category.value for category in MealCategory],
                },
                "max_prep_time": {"type": "number", "minimum": 0},
                "dietary_restrictions": {"type": "array", "items": {"type": "string"}},
                "calorie_range": {
                    "type": "string",
                    "enum": [band.value for band in CalorieRange],
                },
                "activity_level": {"type": "string"},
            },
        },
    )


def tool_definitions() -> list[dict[str, object]]:
    """Return tools formatted for the info endpoint."""
    return [
        {
            "name": entry.value.name,
            "description": entry.value.description,
            "path": entry.value.path,
            "inputSchema": entry.value.input_schema,
        }
        for entry in HealthTool
    ]
