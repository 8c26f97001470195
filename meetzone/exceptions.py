from typing import Any, Sequence


class MeetzoneError(Exception):
    """Base class for all meetzone errors"""

    pass


class ValidationError(MeetzoneError, ValueError):
    """Raised when contours or provider records are malformed or inconsistent"""

    pass


class IntersectionError(MeetzoneError):
    """Raised when clipping two geometries fails on unusable ring data"""

    def __init__(self, message: str, geometries: Sequence[Any] = ()):
        super().__init__(message)
        self.geometries = list(geometries)
