from __future__ import annotations


class CoachRequestError(Exception):
    """Raised when an inbound coaching request is rejected (client error)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPayloadError(CoachRequestError):
    """The request body is not a JSON object."""

    def __init__(self, message: str = "Invalid JSON body"):
        super().__init__(message)


class MissingPromptError(CoachRequestError):
    """The `prompt` field is absent, not a string, or blank."""

    def __init__(self, message: str = "Missing or invalid 'prompt' field"):
        super().__init__(message)
