"""Exception hierarchy for the occurrence engine."""

from __future__ import annotations


class OccurrenceError(Exception):
    """Base exception for all occurrence engine errors."""


class RuleParseError(OccurrenceError):
    """A recurrence rule is malformed or uses an unsupported feature.

    Attributes:
        rule: The offending rule text, if available.
    """

    def __init__(self, message: str, *, rule: str | None = None) -> None:
        super().__init__(message)
        self.rule = rule


class TimezoneConfigurationError(OccurrenceError):
    """The configured business timezone is unknown or invalid.

    Attributes:
        timezone: The timezone name that failed to resolve.
    """

    def __init__(self, message: str, *, timezone: object = None) -> None:
        super().__init__(message)
        self.timezone = timezone
