"""Leaf validators: string, number, boolean, constant and any.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from fractions import Fraction
from re import Pattern as RegexPattern
from typing import Any, Union

from typing_extensions import Self

from .base import Validator
from .exceptions import ConfigurationError
from .result import PathSegment, ValidationError, to_path
from .schema_export import pattern_to_json_schema

ConstantValue = Union[str, int, float, bool, None]

ALPHANUMERIC_PATTERN = re.compile(r"^[a-zA-Z0-9]*\Z")
UUID_PATTERN = re.compile(
    r"^[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}\Z"
)
# Based on https://stackoverflow.com/a/46181/1126380
EMAIL_PATTERN = re.compile(
    r'^(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))@'
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))\Z"
)

# Keyed by pattern source, so an identical user pattern gets the same message
SPECIAL_PATTERN_MESSAGES: dict[str, str] = {
    ALPHANUMERIC_PATTERN.pattern: "must be alphanumeric",
    UUID_PATTERN.pattern: "must be a uuid",
    EMAIL_PATTERN.pattern: "must be a valid email",
}


def is_number(value: Any) -> bool:
    """Return True for ints and floats, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def render_number(value: int | float) -> str:
    """Render a number the way it would appear in JSON text, e.g. ``2.0`` as ``2``."""
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return str(value)
        except ValueError:
            # Beyond the interpreter's int to str digit limit
            return f"{'-' if value < 0 else ''}<{value.bit_length()}-bit integer>"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def is_multiple(value: int | float, multiple_of: int | float) -> bool:
    """Return True if ``value`` is an exact multiple of ``multiple_of``.

    NaN and infinities are never multiples. Ints too large for a float are
    compared exactly instead of overflowing.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return False
    try:
        return value % multiple_of == 0
    except OverflowError:
        return Fraction(value) % Fraction(multiple_of) == 0


def render_constant(value: ConstantValue) -> str:
    """Render a constant for error messages: strings quoted, others as JSON literals."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return render_number(value)


def check_length_bound(name: str, bound: Any) -> int:
    """Validate a length bound at construction time.

    Raises:
        ConfigurationError: If the bound is not a non-negative integer
    """
    if not isinstance(bound, int) or isinstance(bound, bool):
        raise ConfigurationError(
            f"{name} length {bound!r} must be an integer",
            context={"option": f"{name}_length", "value": bound},
        )
    if bound < 0:
        raise ConfigurationError(
            f"{name} length {bound} must be greater than or equal to 0",
            context={"option": f"{name}_length", "value": bound},
        )
    return bound


def _check_number_option(name: str, value: Any) -> int | float:
    if not is_number(value):
        raise ConfigurationError(
            f"{name} {value!r} must be a number",
            context={"option": name, "value": value},
        )
    return value


@dataclass(frozen=True)
class StringOptions:
    """Configuration of a ``StringValidator``."""

    pattern: RegexPattern[str] | None = None
    min_length: int | None = None
    max_length: int | None = None


class StringValidator(Validator[str]):
    """Validates that a value is a string with an optional format and length."""

    def __init__(self, options: StringOptions | None = None):
        self.options = options or StringOptions()

    def min_length(self, min: int) -> Self:
        """Return a validator that also rejects strings shorter than ``min``."""
        return type(self)(replace(self.options, min_length=check_length_bound("min", min)))

    def max_length(self, max: int) -> Self:
        """Return a validator that also rejects strings longer than ``max``."""
        return type(self)(replace(self.options, max_length=check_length_bound("max", max)))

    def pattern(self, pattern: str | RegexPattern[str]) -> Self:
        """Return a validator that requires the string to match ``pattern``.

        The pattern is searched for anywhere in the string; anchor it with
        ``^`` and ``\\Z`` to match the whole value.

        Args:
            pattern: Regex source or compiled pattern

        Raises:
            ConfigurationError: If the pattern is not a string or does not compile
        """
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(
                    f"invalid pattern {pattern!r}: {e}", context={"pattern": pattern}
                ) from e
        elif not isinstance(pattern, RegexPattern) or not isinstance(pattern.pattern, str):
            raise ConfigurationError(
                f"pattern must be a string or compiled str pattern, got {type(pattern).__name__}",
                context={"pattern": pattern},
            )
        return type(self)(replace(self.options, pattern=pattern))

    def alphanumeric(self) -> Self:
        """Return a validator that requires only ASCII letters and digits."""
        return self.pattern(ALPHANUMERIC_PATTERN)

    def uuid(self) -> Self:
        """Return a validator that requires a hyphenated uuid."""
        return self.pattern(UUID_PATTERN)

    def email(self) -> Self:
        """Return a validator that requires an e-mail address."""
        return self.pattern(EMAIL_PATTERN)

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        pattern, min_length, max_length = (
            self.options.pattern,
            self.options.min_length,
            self.options.max_length,
        )
        if not isinstance(value, str):
            return [ValidationError(path, "must be a string", value)]

        errors: list[ValidationError] = []
        if pattern is not None and not pattern.search(value):
            message = SPECIAL_PATTERN_MESSAGES.get(pattern.pattern, "did not match pattern")
            errors.append(ValidationError(path, message, value))
        if min_length is not None and len(value) < min_length:
            errors.append(ValidationError(
                path, f"length {len(value)} was shorter than minimum length: {min_length}", value
            ))
        if max_length is not None and len(value) > max_length:
            errors.append(ValidationError(
                path, f"length {len(value)} was longer than maximum length: {max_length}", value
            ))
        return errors

    def is_valid(self, value: Any) -> bool:
        options = self.options
        return (
            isinstance(value, str)
            and (options.max_length is None or len(value) <= options.max_length)
            and (options.min_length is None or len(value) >= options.min_length)
            and (options.pattern is None or options.pattern.search(value) is not None)
        )

    def _to_json_schema(self) -> dict[str, Any]:
        pattern = self.options.pattern
        return {
            "type": "string",
            "pattern": pattern_to_json_schema(pattern) if pattern is not None else None,
            "minLength": self.options.min_length,
            "maxLength": self.options.max_length,
        }


@dataclass(frozen=True)
class NumberOptions:
    """Configuration of a ``NumberValidator``."""

    multiple_of: int | float | None = None
    min: int | float | None = None
    max: int | float | None = None


class NumberValidator(Validator[float]):
    """Validates that a value is a number, optionally bounded or a multiple of a step."""

    def __init__(self, options: NumberOptions | None = None):
        self.options = options or NumberOptions()

    def min(self, min: int | float) -> Self:
        """Limit the number to be greater than or equal to ``min``."""
        return type(self)(replace(self.options, min=_check_number_option("min", min)))

    def max(self, max: int | float) -> Self:
        """Limit the number to be less than or equal to ``max``."""
        return type(self)(replace(self.options, max=_check_number_option("max", max)))

    def multiple_of(self, multiple_of: int | float) -> Self:
        """Only allow numbers that are a multiple of ``multiple_of``.

        Raises:
            ConfigurationError: If ``multiple_of`` is not a positive number
        """
        _check_number_option("multiple_of", multiple_of)
        if not multiple_of > 0:
            raise ConfigurationError(
                f"multiple_of {multiple_of} must be greater than 0",
                context={"option": "multiple_of", "value": multiple_of},
            )
        if isinstance(multiple_of, float) and not math.isfinite(multiple_of):
            raise ConfigurationError(
                f"multiple_of {multiple_of} must be finite",
                context={"option": "multiple_of", "value": multiple_of},
            )
        return type(self)(replace(self.options, multiple_of=multiple_of))

    def integer(self) -> Self:
        """Only allow integers. Alias for ``multiple_of(1)``."""
        return self.multiple_of(1)

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        multiple_of, min, max = self.options.multiple_of, self.options.min, self.options.max
        if not is_number(value):
            return [ValidationError(path, "must be a number", value)]

        errors: list[ValidationError] = []
        if multiple_of is not None and not is_multiple(value, multiple_of):
            message = (
                "number was not an integer"
                if multiple_of == 1
                else f"number was not a multiple of {render_number(multiple_of)}"
            )
            errors.append(ValidationError(path, message, value))
        if min is not None and value < min:
            errors.append(ValidationError(
                path,
                f"{render_number(value)} must be greater than or equal to {render_number(min)}",
                value,
            ))
        if max is not None and value > max:
            errors.append(ValidationError(
                path,
                f"{render_number(value)} must be less than or equal to {render_number(max)}",
                value,
            ))
        return errors

    def is_valid(self, value: Any) -> bool:
        options = self.options
        return (
            is_number(value)
            and (options.max is None or not value > options.max)
            and (options.min is None or not value < options.min)
            and (options.multiple_of is None or is_multiple(value, options.multiple_of))
        )

    def _to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "number",
            "multipleOf": self.options.multiple_of,
            "minimum": self.options.min,
            "maximum": self.options.max,
        }


class BooleanValidator(Validator[bool]):
    """Validates that a value is exactly True or False."""

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        if isinstance(value, bool):
            return []
        return [ValidationError(to_path(path), "must be a boolean", value)]

    def is_valid(self, value: Any) -> bool:
        return isinstance(value, bool)

    def _to_json_schema(self) -> dict[str, Any]:
        return {"type": "boolean"}


BOOLEAN_VALIDATOR = BooleanValidator()


def _is_supported_constant(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _constant_matches(allowed: ConstantValue, value: Any) -> bool:
    """Strict equality: bools, numbers, strings and None never match across kinds."""
    if allowed is None:
        return value is None
    if isinstance(allowed, bool):
        return isinstance(value, bool) and value == allowed
    if isinstance(allowed, str):
        return isinstance(value, str) and value == allowed
    return is_number(value) and value == allowed


@dataclass(frozen=True)
class ConstantOptions:
    """Configuration of a ``ConstantValidator``."""

    allowed_values: tuple[ConstantValue, ...]


class ConstantValidator(Validator[Any]):
    """Validates that a value is one of a fixed set of scalar constants.

    Raises:
        ConfigurationError: If no values are given, or a value is not a
            string, number, boolean or None
    """

    def __init__(self, options: ConstantOptions):
        if len(options.allowed_values) == 0:
            raise ConfigurationError("constant validators should have at least one value")
        for value in options.allowed_values:
            if not _is_supported_constant(value):
                raise ConfigurationError(
                    "unsupported value type in constant validator, "
                    "must be string, boolean, number or None",
                    context={"value": value, "type": type(value).__name__},
                )
        self.options = options

    @property
    def allowed_values(self) -> tuple[ConstantValue, ...]:
        return self.options.allowed_values

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        if self.is_valid(value):
            return []
        rendered = ", ".join(render_constant(v) for v in self.options.allowed_values)
        return [ValidationError(to_path(path), f"must be one of {rendered}", value)]

    def is_valid(self, value: Any) -> bool:
        return any(_constant_matches(allowed, value) for allowed in self.options.allowed_values)

    def _to_json_schema(self) -> dict[str, Any]:
        return {
            "anyOf": [
                {"type": "null"} if item is None else {"const": item}
                for item in self.options.allowed_values
            ]
        }


class AnyValidator(Validator[Any]):
    """A validator that accepts every value, including ``MISSING``."""

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        return []

    def is_valid(self, value: Any) -> bool:
        return True

    def check_valid(self, value: Any, path: Sequence[PathSegment] = ()) -> Any:
        return value

    def _to_json_schema(self) -> dict[str, Any]:
        return {}


ANY_VALIDATOR = AnyValidator()
