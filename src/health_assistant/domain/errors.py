"""Error taxonomy for the health assistant."""


class HealthAssistantError(Exception):
    """Base error for the application."""


class InvalidArgumentError(HealthAssistantError):
    """Raised when a caller sends a missing or out-of-range argument."""


class UpstreamUnavailableError(HealthAssistantError):
    """Raised when an external collaborator fails or times out."""


class NarratorError(UpstreamUnavailableError):
    """Raised when the text-generation collaborator cannot produce text."""
