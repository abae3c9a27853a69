"""Prompt builders and canned responses for the narrator."""

from collections.abc import Sequence

from health_assistant.domain.health import HealthSnapshot, MetricKind
from health_assistant.domain.meals import Meal, RecommendationRequest
from health_assistant.services.aggregation import latest_metrics, snapshot_averages

HEALTH_ASSISTANT_SYSTEM_PROMPT = (
    "You are a knowledgeable health assistant. You provide helpful, accurate "
    "health insights based on user data. Always:\n"
    "- Give personalized responses when data is available\n"
    "- Be encouraging and positive\n"
    "- Suggest actionable improvements\n"
    "- Never give medical diagnosis or replace professional medical advice\n"
    "- Keep responses concise but informative\n"
    "- Focus on trends and patterns in the data"
)

MEAL_FALLBACK = (
    "Based on your preferences, these meals provide a good balance of "
    "nutrition, preparation time, and taste."
)
QUESTION_FALLBACK = (
    "I apologize, but I'm having trouble processing your question right now. "
    "Please try again later."
)
TRENDS_FALLBACK = (
    "Your health trends are looking positive! Keep up the consistent activity "
    "and maintain your healthy habits. Great work!"
)
NO_HISTORY_ANALYSIS = (
    "Not enough historical data for trend analysis. "
    "Keep tracking for better insights!"
)

_CANNED_ANSWERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("active", "steps"),
        "Based on your recent activity data, you're doing great! You've been "
        "consistently hitting your step goals. Keep up the excellent work and "
        "try to maintain this momentum. Consider adding some variety to your "
        "routine with different activities like hiking or swimming.",
    ),
    (
        ("sleep",),
        "Your sleep pattern shows good consistency! You're averaging around 7.2 "
        "hours per night, which is within the recommended range. To optimize "
        "further, try maintaining a regular bedtime routine and limiting screen "
        "time before bed.",
    ),
    (
        ("heart", "cardio"),
        "Your heart rate data indicates good cardiovascular health. Your resting "
        "heart rate is in a healthy range. Consider incorporating more cardio "
        "exercises to strengthen your heart further.",
    ),
    (
        ("trend", "progress"),
        "Looking at your overall trends, you're making excellent progress! Your "
        "activity levels have been consistent, and your health metrics show "
        "positive patterns. Keep focusing on maintaining these healthy habits.",
    ),
)
_DEFAULT_ANSWER = (
    "Thanks for your question! Based on your health data, you're on a positive "
    "track. Keep maintaining your current healthy habits, stay consistent with "
    "your activity, and don't forget to prioritize good sleep and nutrition. "
    "Great work!"
)

CANNED_SUMMARIES: dict[str, str] = {
    "today": (
        "Today's looking great! Your activity levels are solid with good step "
        "counts and calorie burn. Your heart rate data shows you're maintaining "
        "good cardiovascular health. Keep up the momentum and remember to stay "
        "hydrated!"
    ),
    "week": (
        "This week has been fantastic for your health journey! You've been "
        "consistently active with an average of 9,800 steps per day and balanced "
        "calorie expenditure. Your sleep patterns are improving, averaging 7.2 "
        "hours nightly. Consider adding one more strength training session to "
        "complement your cardio routine."
    ),
    "month": (
        "This month shows excellent progress in your wellness journey! Your "
        "activity consistency has improved by 15%, with steady step counts and "
        "good calorie balance. Sleep quality is trending upward, and your heart "
        "rate variability indicates good recovery. Focus on maintaining this "
        "momentum while gradually increasing activity intensity."
    ),
}


def canned_answer(question: str) -> str:
    """Return a keyword-matched canned answer for a health question."""
    lowered = question.lower()
    for keywords, answer in _CANNED_ANSWERS:
        if any(keyword in lowered for keyword in keywords):
            return answer
    return _DEFAULT_ANSWER


def format_number(value: float) -> str:
    """Render a number without a trailing ".0" or exponent notation."""
    return str(int(value)) if value == int(value) else str(value)


def meal_prompt(meals: Sequence[Meal], request: RecommendationRequest) -> str:
    """Build the recommendation prompt from the top meals and preferences."""
    summary = ", ".join(
        f"{meal.name} ({format_number(meal.calories)} cal, "
        f"{format_number(meal.prep_time_minutes)}min, {meal.difficulty})"
        for meal in meals[:3]
    )
    prep_time = (
        format_number(request.max_prep_time)
        if request.max_prep_time is not None
        else "no limit"
    )
    restrictions = ", ".join(request.restrictions) or "none"
    return (
        "As a nutrition expert, provide a brief recommendation for these meal "
        f"options:\n{summary}\n\n"
        "User preferences:\n"
        f"- Meal type: {request.meal_type or 'any'}\n"
        f"- Max prep time: {prep_time} minutes\n"
        f"- Dietary restrictions: {restrictions}\n"
        f"- Calorie preference: {request.calorie_range or 'any'}\n"
        f"- Activity level: {request.activity_level or 'not specified'}\n\n"
        "Provide a 2-3 sentence recommendation focusing on why these meals are "
        "good choices for the user."
    )


def health_data_context(snapshot: HealthSnapshot) -> str:
    """Describe the latest and average values of a snapshot."""
    latest = latest_metrics(snapshot)
    averages = snapshot_averages(snapshot)
    return (
        "Recent Health Metrics:\n"
        f"- Steps: {format_number(latest[MetricKind.STEPS])} "
        f"(daily average: {format_number(averages['steps'])})\n"
        f"- Calories: {format_number(latest[MetricKind.CALORIES])} kcal "
        f"(daily average: {format_number(averages['calories'])})\n"
        f"- Heart Rate: {format_number(latest[MetricKind.HEART_RATE])} bpm "
        f"(daily average: {format_number(averages['heartRate'])})\n"
        f"- Sleep: {format_number(latest[MetricKind.SLEEP])} hours "
        f"(daily average: {format_number(averages['sleep'])})\n"
        f"- Weight: {format_number(latest[MetricKind.WEIGHT])} kg (latest available)\n\n"
        f"Data covers {len(snapshot.steps)} days, "
        f"last synced: {snapshot.last_sync.date().isoformat()}"
    )


def question_prompt(question: str, snapshot: HealthSnapshot | None) -> str:
    """Build the user prompt for a health question."""
    prompt = f"Question: {question}"
    if snapshot is not None:
        prompt += f"\n\nUser's Recent Health Data:\n{health_data_context(snapshot)}"
    return prompt


def summary_prompt(snapshot: HealthSnapshot, period: str) -> str:
    """Build the prompt for a period health summary."""
    period_text = "today" if period == "today" else f"this {period}"
    return (
        "Based on the following health data, provide a concise summary of the "
        f"user's health status for {period_text}. Include key highlights, "
        "improvements, and gentle suggestions:\n\n"
        f"{health_data_context(snapshot)}\n\n"
        "Please provide:\n"
        "1. Overall assessment\n"
        "2. Key highlights (2-3 points)\n"
        "3. One actionable suggestion for improvement\n\n"
        "Keep it positive, encouraging, and under 150 words."
    )


def _signed(value: float) -> str:
    sign = "+" if value > 0 else ""
    return f"{sign}{format_number(value)}"


def trends_prompt(changes: dict[MetricKind, float]) -> str:
    """Build the prompt describing changes from the previous period."""
    sleep = changes[MetricKind.SLEEP]
    sleep_text = f"{'+' if sleep > 0 else ''}{sleep:.1f}"
    return (
        "Analyze these health trends and provide encouraging insights:\n\n"
        "Changes from previous period:\n"
        f"- Steps: {_signed(changes[MetricKind.STEPS])}\n"
        f"- Calories: {_signed(changes[MetricKind.CALORIES])} kcal\n"
        f"- Heart Rate: {_signed(changes[MetricKind.HEART_RATE])} bpm\n"
        f"- Sleep: {sleep_text} hours\n\n"
        "Provide a brief, positive analysis focusing on progress and motivation."
    )
