class IntegrationError(Exception):
    """A third-party API call failed or returned an unusable response."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class AIError(IntegrationError):
    """The AI provider failed or answered with something other than the requested JSON."""
