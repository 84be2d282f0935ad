"""Exception hierarchy for dataknobs_validators.

Two kinds of failure are kept apart:

- ``ConfigurationError`` is raised while a validator is being built, for
  impossible configurations (negative length bounds, empty constant sets,
  unknown factory types, ...). It is never deferred to validation time.
- ``FailedValidationError`` is raised only by ``Validator.check_valid`` and
  wraps the non-empty list of ``ValidationError`` records that
  ``validate`` returned.

``validate`` and ``is_valid`` never raise for invalid input.

Example:
    ```python
    from dataknobs_validators import V, FailedValidationError

    try:
        V.number().min(0).check_valid(-1)
    except FailedValidationError as e:
        e.errors
        # [ValidationError(path=(), message='-1 must be greater than or equal to 0', value=-1)]
    ```
"""

from __future__ import annotations

from collections.abc import Sequence

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    ValidationError as BaseValidationError,
)

from .result import ValidationError, format_errors


class ValidatorsError(DataknobsError):
    """Base exception for the validators package.

    Carries the ``context``/``details`` dictionary of ``DataknobsError``.
    """

    pass


class ConfigurationError(ValidatorsError, BaseConfigurationError, ValueError):
    """Raised when a validator is built from an impossible configuration.

    Example:
        ```python
        V.string().min_length(-1)
        # ConfigurationError: min length -1 must be greater than or equal to 0
        ```
    """

    pass


class FailedValidationError(ValidatorsError, BaseValidationError, ValueError):
    """Raised by ``check_valid`` when a value does not pass validation.

    The message is built from the error list alone, joining
    ``path: message`` for every error with ``"; "``; the ``path: `` prefix is
    dropped for errors at the root.

    Attributes:
        errors: The validation errors, in the order ``validate`` produced them
    """

    is_failed_validation_error = True

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors = list(errors)
        super().__init__(
            format_errors(self.errors),
            context={"error_count": len(self.errors)},
        )
