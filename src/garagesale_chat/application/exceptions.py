from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidParticipantsError(ValidationError):
    """Self-chat attempt, or a participant that is not a known user."""


class InvalidContentError(ValidationError):
    """Empty, whitespace-only or oversized message body."""


class InvalidItemError(NotFoundError):
    """The item a chat is about does not exist."""
