"""Custom exceptions for the Trello client."""


class TrelloError(Exception):
    """Base exception for Trello API failures.

    The message is safe to return to callers: credentials are stripped.
    """


class TrelloRequestError(TrelloError):
    """The request never produced a response (network error, timeout)."""


class TrelloResponseError(TrelloError):
    """Trello answered with a non-success status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
