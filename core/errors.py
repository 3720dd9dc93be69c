"""
Errors raised by core operations and mapped to rejections by the service.
"""


class InvalidInputError(ValueError):
    """Submitted payload is malformed (e.g. events is not a list)."""


class InvalidKindError(ValueError):
    """Requested intervention kind is not recognized."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Invalid intervention type: {kind}")
