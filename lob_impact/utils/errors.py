# lob_impact/utils/errors.py
class LobImpactError(Exception):
    """Base class for all lob_impact errors."""


class UserInputError(LobImpactError):
    """
    Raised for invalid user-provided config (dates, paths, options).
    Should NOT print traceback.
    """


class InvalidEventError(LobImpactError):
    """Event table violates the input schema or its content rules."""


class MatchingError(LobImpactError):
    """
    Matched bid/ask events do not form a bijection.

    Fatal: upstream matching is broken, nothing can be recovered locally.
    """


class EventLookupError(LobImpactError, KeyError):
    """An event_id referenced by a trade is not present in the event table."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"unknown event_id(s): {self.missing[:10]}")

    def __str__(self) -> str:
        return self.args[0]
