"""The abstract validator contract shared by every validator kind.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .exceptions import FailedValidationError
from .result import PathSegment, ValidationError
from .schema_export import remove_unset_properties

if TYPE_CHECKING:
    from .composites import OrValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Validator(ABC, Generic[T]):
    """Base class of all validators. ``T`` is the type of any value that passes.

    Validators are immutable: every builder method returns a new instance, so
    a validator can be shared freely and reused across any number of checks.

    Subclasses implement ``validate`` and ``_to_json_schema``. Composite
    validators also override ``is_valid`` with a short-circuiting predicate;
    for every value ``v`` it must hold that
    ``is_valid(v) == (len(validate(v)) == 0)``.
    """

    _json_schema: dict[str, Any] | None = None

    @abstractmethod
    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        """Validate a value, returning every error found.

        Args:
            value: Value to validate, never mutated
            path: Location of ``value`` relative to the root being validated

        Returns:
            List of errors, empty when the value is valid
        """

    def is_valid(self, value: Any) -> bool:
        """Return True if the value passes validation."""
        return not self.validate(value)

    def check_valid(self, value: Any, path: Sequence[PathSegment] = ()) -> T:
        """Assert that the value is valid and return it.

        Args:
            value: Value to check
            path: Prefix for the paths of any reported errors

        Returns:
            The value itself

        Raises:
            FailedValidationError: If ``validate`` reported any errors
        """
        errors = self.validate(value, path)
        if errors:
            logger.debug(f"{type(self).__name__} rejected value with {len(errors)} error(s)")
            raise FailedValidationError(errors)
        return value

    def to_json_schema(self) -> dict[str, Any]:
        """Describe this validator as a JSON Schema fragment.

        The schema is computed on first use and cached for the lifetime of
        the validator; a copy is returned on every call.
        """
        if self._json_schema is None:
            # Concurrent first calls may each build it; the results are equal
            self._json_schema = remove_unset_properties(self._to_json_schema())
        return copy.deepcopy(self._json_schema)

    @abstractmethod
    def _to_json_schema(self) -> dict[str, Any]:
        """Build the schema; ``None`` valued entries mean "not specified"."""

    def __or__(self, other: Validator[Any]) -> OrValidator:
        """Combine with OR: the value must pass at least one validator."""
        from .composites import OrValidator

        if not isinstance(other, Validator):
            return NotImplemented
        return OrValidator.of(self, other)

    def __repr__(self) -> str:
        options = getattr(self, "options", None)
        if options is None:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({options!r})"
