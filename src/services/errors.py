"""Typed failures raised by services and collaborators.

Callers can tell "something broke" apart from "nothing there": a store or AI
outage raises one of these instead of returning an empty result.
"""


class PantryPalError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreUnavailableError(PantryPalError):
    """The item store could not be read or written."""


class PantryItemNotFoundError(PantryPalError):
    """No item with the given id exists for the user."""


class PantryEmptyError(PantryPalError):
    """An operation that needs pantry items was given none."""


class AIServiceUnavailableError(PantryPalError):
    """An AI collaborator is not configured or cannot be reached."""


class RecipeSuggestionError(PantryPalError):
    """The recipe model failed or returned something unusable."""


class MailDeliveryError(PantryPalError):
    """An email could not be handed to the SMTP server."""
