"""Test utilities for validators.

``check_validates`` asserts the laws every validator must obey for a given
value, which makes it useful both for this package's tests and for anyone
writing their own ``Validator`` subclass.

Example:
    ```python
    from dataknobs_validators import V, ValidationError
    from dataknobs_validators.testing import check_validates

    def test_short_string():
        check_validates(
            V.string().min_length(3),
            "hi",
            [ValidationError((), "length 2 was shorter than minimum length: 3", "hi")],
        )
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .base import Validator
from .exceptions import FailedValidationError
from .result import PathSegment, ValidationError, to_path

PATH_OFFSET: tuple[PathSegment, ...] = (0, "abc", 1)


def check_validates(
    validator: Validator[Any],
    value: Any,
    expected_errors: Sequence[ValidationError] | None = None,
    path: Sequence[PathSegment] | None = None,
) -> None:
    """Assert that a validator reports exactly the expected errors for a value.

    Checks that:

    - ``validate`` returns ``expected_errors`` (an empty list when omitted),
      twice in a row
    - ``is_valid`` agrees with ``validate``
    - ``check_valid`` returns the value when valid, and otherwise raises a
      ``FailedValidationError`` carrying the same errors
    - validating under the prefix ``(0, "abc", 1)`` reports the same errors
      with that prefix prepended

    Args:
        validator: Validator under test
        value: Value to validate
        expected_errors: Errors expected at the root, or None if valid
        path: Path to validate under; used internally for the prefix check

    Raises:
        AssertionError: If any of the checks fail
    """
    expected = list(expected_errors or [])
    expected_valid = len(expected) == 0

    actual = validator.validate(value, to_path(path))
    assert actual == expected, f"#validate: expected {expected!r}, got {actual!r}"
    repeated = validator.validate(value, to_path(path))
    assert repeated == actual, f"#validate is not repeatable: {actual!r} then {repeated!r}"

    if path is not None:
        return

    is_valid = validator.is_valid(value)
    assert is_valid is expected_valid, f"#is_valid: expected {expected_valid}, got {is_valid}"

    if expected_valid:
        assert validator.check_valid(value) is value, "#check_valid did not return the value"
    else:
        try:
            validator.check_valid(value)
        except FailedValidationError as e:
            assert e.is_failed_validation_error is True
            assert e.errors == expected, f"#check_valid: expected {expected!r}, got {e.errors!r}"
        else:
            raise AssertionError("#check_valid did not raise for an invalid value")

        check_validates(
            validator,
            value,
            [error.with_prefix(PATH_OFFSET) for error in expected],
            PATH_OFFSET,
        )
