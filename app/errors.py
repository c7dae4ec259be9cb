# app/errors.py


class HippoTypeError(Exception):
    """Base class for errors raised inside the application."""


class TextProviderError(HippoTypeError):
    """Practice text could not be obtained or was unusable."""


class GenerationError(HippoTypeError):
    """The language-model backend failed to produce usable text."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code
