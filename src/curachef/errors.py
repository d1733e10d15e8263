"""
CuraChef - Error taxonomy.

Every component converts its failures into one of these before they reach
the session state machine. Raw transport errors never cross that line.
"""


class CurachefError(Exception):
    """Base class for all CuraChef errors. `str(err)` is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CurachefError):
    """Missing input, missing sign-in or missing required selection.

    Raised before any boundary call. Never retried.
    """


class GenerationFailed(CurachefError):
    """The AI boundary call threw, or returned something we could not parse."""


class AuthError(CurachefError):
    """Sign-in credential mismatch or sign-up email collision."""


class InvalidFeature(CurachefError):
    """Feature value has no prompt template."""


class NotAGenerationFeature(InvalidFeature):
    """Feature exists but never produces content (e.g. user preferences)."""
