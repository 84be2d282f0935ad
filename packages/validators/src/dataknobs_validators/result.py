"""Validation error records and path helpers.

A validation run never raises for invalid input. It returns a list of
``ValidationError`` records, each locating the offending sub-value with a
``Path`` relative to the root value being validated.

Example:
    ```python
    from dataknobs_validators import V

    errors = V.array(V.number()).validate(["1", 2])
    errors[0].path
    # (0,)
    str(errors[0])
    # '0: must be a number'
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

PathSegment = str | int
Path = tuple[PathSegment, ...]

ROOT: Path = ()


class _Missing:
    """Sentinel for "no value at this location".

    Used for tuple positions past the end of the input and as the default
    ``value`` of an error that carries none.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def to_path(path: Sequence[PathSegment] | None) -> Path:
    """Normalize a caller supplied path into an immutable tuple.

    Args:
        path: Any sequence of str/int segments, or None for the root

    Returns:
        The path as a tuple
    """
    if path is None:
        return ROOT
    if isinstance(path, tuple):
        return path
    if isinstance(path, str):
        # A bare string is a single key, not a sequence of characters
        return (path,)
    return tuple(path)


def format_path(path: Path) -> str:
    """Render a path as dot separated segments, e.g. ``abc.1.def``."""
    return ".".join(str(segment) for segment in path)


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    Attributes:
        path: Location of the offending sub-value, empty at the root
        message: Human-readable description of the failure
        value: The offending value, or ``MISSING`` when none is carried
    """

    path: Path
    message: str
    value: Any = MISSING

    def __str__(self) -> str:
        if self.path:
            return f"{format_path(self.path)}: {self.message}"
        return self.message

    def with_prefix(self, prefix: Sequence[PathSegment]) -> ValidationError:
        """Return a copy of this error located under the given prefix."""
        return ValidationError(to_path(prefix) + self.path, self.message, self.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON friendly dictionary.

        The ``value`` entry is omitted when the error carries no value.
        """
        data: dict[str, Any] = {"path": list(self.path), "message": self.message}
        if self.value is not MISSING:
            data["value"] = self.value
        return data


def format_errors(errors: Sequence[ValidationError]) -> str:
    """Join errors as ``path: message`` pairs separated by semicolons."""
    return "; ".join(str(error) for error in errors)
