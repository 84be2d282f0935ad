"""Static builder surface for constructing validators.

Example:
    ```python
    from dataknobs_validators import V

    thing = V.object({
        "id": V.string().uuid(),
        "name": V.string().min_length(3).max_length(100),
        "tags": V.array(V.string()).max_length(10),
    }).required_keys("id", "name")

    thing.is_valid({"id": "abc", "name": "hello world!"})
    # False
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .base import Validator
from .composites import (
    ArrayOptions,
    ArrayValidator,
    JsonValidator,
    ObjectOptions,
    ObjectValidator,
    OrValidator,
    TupleOptions,
    TupleValidator,
    spread_args,
)
from .primitives import (
    ANY_VALIDATOR,
    BOOLEAN_VALIDATOR,
    AnyValidator,
    BooleanValidator,
    ConstantOptions,
    ConstantValidator,
    NumberValidator,
    StringValidator,
)


class V:
    """One static constructor per validator kind."""

    @staticmethod
    def string() -> StringValidator:
        """A validator that checks the value is a string."""
        return StringValidator()

    @staticmethod
    def number() -> NumberValidator:
        """A validator that checks the value is a number."""
        return NumberValidator()

    @staticmethod
    def boolean() -> BooleanValidator:
        """A validator that checks the value is True or False."""
        return BOOLEAN_VALIDATOR

    @staticmethod
    def any() -> AnyValidator:
        """A validator that accepts every value."""
        return ANY_VALIDATOR

    @staticmethod
    def constant(*allowed_values: Any) -> ConstantValidator:
        """A validator that checks the value is one of the given constants.

        Args:
            *allowed_values: Strings, numbers, booleans or None
        """
        return ConstantValidator(ConstantOptions(allowed_values=tuple(allowed_values)))

    @staticmethod
    def array(items: Validator[Any] | None = None) -> ArrayValidator:
        """A validator that checks the value is an array, optionally of ``items``."""
        return ArrayValidator(ArrayOptions(items=items))

    @staticmethod
    def tuple(*validators: Validator[Any] | Sequence[Validator[Any]]) -> TupleValidator:
        """A validator for a fixed-arity array matching the validators in order."""
        return TupleValidator(TupleOptions(validators=tuple(spread_args(validators))))

    @staticmethod
    def object(keys: Mapping[str, Validator[Any]] | None = None) -> ObjectValidator:
        """A validator for a mapping with the given keys.

        No keys are required and unknown keys are rejected until configured
        otherwise with ``required_keys`` and ``allow_unknown_keys``.
        """
        return ObjectValidator(ObjectOptions(keys=dict(keys or {})))

    @staticmethod
    def or_(*validators: Validator[Any] | Sequence[Validator[Any]]) -> OrValidator:
        """A validator that passes when any of the given validators passes."""
        return OrValidator.of(*spread_args(validators))

    @staticmethod
    def json(parsed: Validator[Any]) -> JsonValidator:
        """A validator for strings containing JSON that decodes to a value passing ``parsed``."""
        return JsonValidator(parsed)
