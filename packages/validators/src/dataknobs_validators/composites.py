"""Combinator validators that delegate to child validators.

Each combinator appends a path segment (an index or a key) before handing a
sub-value to a child, so errors always point at the exact sub-value that
failed. ``validate`` collects every error; ``is_valid`` is a separate
short-circuiting predicate that returns at the first failing sub-check.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Union

from typing_extensions import Self

from .base import Validator
from .exceptions import ConfigurationError
from .primitives import check_length_bound
from .result import MISSING, PathSegment, ValidationError, to_path


def _require_validator(candidate: Any, role: str) -> Validator[Any]:
    if not isinstance(candidate, Validator):
        raise ConfigurationError(
            f"{role} must be a Validator, got {type(candidate).__name__}",
            context={"role": role},
        )
    return candidate


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def spread_args(args: Sequence[Any]) -> list[Any]:
    """Accept arguments either spread out or passed as a single list.

    ``spread_args((a, b))`` and ``spread_args(([a, b],))`` both give ``[a, b]``.
    """
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return list(args[0])
    return list(args)


@dataclass(frozen=True)
class ArrayOptions:
    """Configuration of an ``ArrayValidator``."""

    items: Validator[Any] | None = None
    min_length: int | None = None
    max_length: int | None = None


class ArrayValidator(Validator[list]):
    """Validates that a value is an array, optionally checking length and every item.

    Item validation only runs when both length bounds are satisfied.
    """

    def __init__(self, options: ArrayOptions | None = None):
        options = options or ArrayOptions()
        if options.items is not None:
            _require_validator(options.items, "array items")
        self.options = options

    def min_length(self, min: int) -> Self:
        """A valid array must have at least ``min`` elements."""
        return type(self)(replace(self.options, min_length=check_length_bound("min", min)))

    def max_length(self, max: int) -> Self:
        """A valid array must have at most ``max`` elements."""
        return type(self)(replace(self.options, max_length=check_length_bound("max", max)))

    def items(self, items: Validator[Any]) -> Self:
        """Return a validator that checks every item against ``items``."""
        return type(self)(replace(self.options, items=items))

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        items, min_length, max_length = (
            self.options.items,
            self.options.min_length,
            self.options.max_length,
        )
        if not _is_array(value):
            return [ValidationError(path, "must be an array", value)]

        errors: list[ValidationError] = []
        if min_length is not None and len(value) < min_length:
            errors.append(ValidationError(
                path, f"array length {len(value)} was less than minimum length: {min_length}", value
            ))
        if max_length is not None and len(value) > max_length:
            errors.append(ValidationError(
                path,
                f"array length {len(value)} was greater than maximum length: {max_length}",
                value,
            ))
        if not errors and items is not None:
            for index, item in enumerate(value):
                errors.extend(items.validate(item, path + (index,)))
        return errors

    def is_valid(self, value: Any) -> bool:
        options = self.options
        if not _is_array(value):
            return False
        if options.min_length is not None and len(value) < options.min_length:
            return False
        if options.max_length is not None and len(value) > options.max_length:
            return False
        if options.items is None:
            return True
        return all(options.items.is_valid(item) for item in value)

    def _to_json_schema(self) -> dict[str, Any]:
        items = self.options.items
        return {
            "type": "array",
            "items": items.to_json_schema() if items is not None else None,
            "minItems": self.options.min_length,
            "maxItems": self.options.max_length,
        }


@dataclass(frozen=True)
class TupleOptions:
    """Configuration of a ``TupleValidator``."""

    validators: tuple[Validator[Any], ...] = ()


class TupleValidator(Validator[tuple]):
    """Validates a fixed-arity array position by position.

    Every position is checked even when the input is too short (missing
    positions are validated as ``MISSING``). An input longer than the number
    of validators gets a single extra error at the tuple's own path.
    """

    def __init__(self, options: TupleOptions | None = None):
        options = options or TupleOptions()
        for index, validator in enumerate(options.validators):
            _require_validator(validator, f"tuple position {index}")
        self.options = options

    @property
    def validators(self) -> tuple[Validator[Any], ...]:
        return self.options.validators

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        validators = self.options.validators
        if not _is_array(value):
            return [ValidationError(path, "must be an array", value)]

        errors: list[ValidationError] = []
        for index, validator in enumerate(validators):
            item = value[index] if index < len(value) else MISSING
            errors.extend(validator.validate(item, path + (index,)))
        if len(value) > len(validators):
            errors.append(ValidationError(
                path,
                f"array length {len(value)} was greater than expected length {len(validators)}",
                value,
            ))
        return errors

    def is_valid(self, value: Any) -> bool:
        validators = self.options.validators
        if not _is_array(value) or len(value) > len(validators):
            return False
        for index, validator in enumerate(validators):
            item = value[index] if index < len(value) else MISSING
            if not validator.is_valid(item):
                return False
        return True

    def _to_json_schema(self) -> dict[str, Any]:
        validators = self.options.validators
        # Trailing positions that accept a missing value may be left out
        min_items = 0
        for index, validator in enumerate(validators):
            if not validator.is_valid(MISSING):
                min_items = index + 1
        return {
            "type": "array",
            "items": [validator.to_json_schema() for validator in validators],
            "minItems": min_items or None,
            "maxItems": len(validators),
        }


@dataclass(frozen=True)
class UnknownKeys:
    """Shape constraint for keys that an ``ObjectValidator`` does not declare.

    Attributes:
        key: Validator applied to each unknown key name
        value: Validator applied to the value of each unknown key
    """

    key: Validator[Any]
    value: Validator[Any]

    def __post_init__(self) -> None:
        _require_validator(self.key, "unknown key validator")
        _require_validator(self.value, "unknown value validator")


UnknownKeyPolicy = Union[bool, UnknownKeys]


def _to_unknown_key_policy(policy: Any) -> UnknownKeyPolicy:
    if isinstance(policy, (bool, UnknownKeys)):
        return policy
    if isinstance(policy, Mapping) and set(policy.keys()) == {"key", "value"}:
        return UnknownKeys(key=policy["key"], value=policy["value"])
    raise ConfigurationError(
        "allow_unknown_keys must be a bool, UnknownKeys or a mapping with 'key' and 'value'",
        context={"policy": policy},
    )


def _unique(keys: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(keys))


@dataclass(frozen=True)
class ObjectOptions:
    """Configuration of an ``ObjectValidator``.

    Attributes:
        keys: Validator for the value of each declared key
        required_keys: Keys that must be present, deduplicated in order
        allow_unknown_keys: False to reject undeclared keys, True to accept
            them unchecked, or an ``UnknownKeys`` shape constraint
    """

    keys: Mapping[str, Validator[Any]] = field(default_factory=dict)
    required_keys: tuple[str, ...] = ()
    allow_unknown_keys: UnknownKeyPolicy = False


class ObjectValidator(Validator[dict]):
    """Validates that a value is a mapping whose keys match the declared validators.
    """

    def __init__(self, options: ObjectOptions | None = None):
        options = options or ObjectOptions()
        for key, validator in options.keys.items():
            _require_validator(validator, f"validator for key {key!r}")
        self.options = replace(
            options,
            keys=dict(options.keys),
            required_keys=_unique(options.required_keys),
            allow_unknown_keys=_to_unknown_key_policy(options.allow_unknown_keys),
        )

    @property
    def keys(self) -> Mapping[str, Validator[Any]]:
        return self.options.keys

    def required_keys(self, *required_keys: str | Sequence[str]) -> Self:
        """Replace the set of keys that must be present.

        Accepts the keys spread as arguments or as a single list.
        """
        return type(self)(replace(self.options, required_keys=tuple(spread_args(required_keys))))

    def allow_unknown_keys(self, allow_unknown_keys: Any) -> Self:
        """Change how keys that are not declared are handled.

        Args:
            allow_unknown_keys: False to reject them, True to accept them
                without inspection, or an ``UnknownKeys`` (or
                ``{"key": ..., "value": ...}`` mapping) to validate them
        """
        return type(self)(replace(self.options, allow_unknown_keys=allow_unknown_keys))

    def omit(self, *omitted: str) -> Self:
        """Return a validator without the given keys, which become unknown keys."""
        omitted_set = set(omitted)
        return type(self)(replace(
            self.options,
            keys={k: v for k, v in self.options.keys.items() if k not in omitted_set},
            required_keys=tuple(k for k in self.options.required_keys if k not in omitted_set),
        ))

    def pick(self, *selected: str) -> Self:
        """Return a validator with only the given keys; all others become unknown keys."""
        selected_set = set(selected)
        return type(self)(replace(
            self.options,
            keys={k: v for k, v in self.options.keys.items() if k in selected_set},
            required_keys=tuple(k for k in self.options.required_keys if k in selected_set),
        ))

    def extend(self, additional_keys: Mapping[str, Validator[Any]]) -> Self:
        """Return a validator with additional declared keys."""
        return type(self)(replace(self.options, keys={**self.options.keys, **additional_keys}))

    def merge(self, other: ObjectValidator) -> Self:
        """Combine keys and required keys of both validators.

        Keys declared by ``other`` win on collision; the unknown key policy
        of this validator is kept.
        """
        if not isinstance(other, ObjectValidator):
            raise ConfigurationError(
                f"can only merge with an ObjectValidator, got {type(other).__name__}"
            )
        return type(self)(replace(
            self.options,
            keys={**self.options.keys, **other.options.keys},
            required_keys=self.options.required_keys + other.options.required_keys,
        ))

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        keys, required_keys, allow_unknown_keys = (
            self.options.keys,
            self.options.required_keys,
            self.options.allow_unknown_keys,
        )
        if not isinstance(value, Mapping):
            return [ValidationError(path, "must be an object", value)]

        errors: list[ValidationError] = []
        for key, key_value in value.items():
            validator = keys.get(key)
            if validator is not None:
                errors.extend(validator.validate(key_value, path + (key,)))
            elif allow_unknown_keys is False:
                errors.append(ValidationError(path, f'encountered unknown key "{key}"', value))
            elif isinstance(allow_unknown_keys, UnknownKeys):
                errors.extend(
                    replace(error, message=f'key "{key}" failed validation: {error.message}')
                    for error in allow_unknown_keys.key.validate(key, path)
                )
                errors.extend(
                    replace(error, message=f'value for key "{key}" failed validation: {error.message}')
                    for error in allow_unknown_keys.value.validate(key_value, path + (key,))
                )

        for required_key in required_keys:
            if required_key not in value:
                errors.append(ValidationError(
                    path, f'required key "{required_key}" was not defined', value
                ))
        return errors

    def is_valid(self, value: Any) -> bool:
        keys, required_keys, allow_unknown_keys = (
            self.options.keys,
            self.options.required_keys,
            self.options.allow_unknown_keys,
        )
        if not isinstance(value, Mapping):
            return False
        for key, key_value in value.items():
            validator = keys.get(key)
            if validator is not None:
                if not validator.is_valid(key_value):
                    return False
            elif allow_unknown_keys is False:
                return False
            elif isinstance(allow_unknown_keys, UnknownKeys) and not (
                allow_unknown_keys.key.is_valid(key) and allow_unknown_keys.value.is_valid(key_value)
            ):
                return False
        return all(required_key in value for required_key in required_keys)

    def _to_json_schema(self) -> dict[str, Any]:
        keys, allow_unknown_keys = self.options.keys, self.options.allow_unknown_keys
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {key: validator.to_json_schema() for key, validator in keys.items()},
            "required": list(self.options.required_keys) or None,
        }
        if allow_unknown_keys is False:
            schema["additionalProperties"] = False
        elif isinstance(allow_unknown_keys, UnknownKeys):
            schema["additionalProperties"] = allow_unknown_keys.value.to_json_schema()
            # Declared keys are exempt from the key validator
            schema["propertyNames"] = {
                "anyOf": [{"enum": list(keys)}, allow_unknown_keys.key.to_json_schema()]
                if keys
                else [allow_unknown_keys.key.to_json_schema()]
            }
        return schema


@dataclass(frozen=True)
class OrOptions:
    """Configuration of an ``OrValidator``."""

    validators: tuple[Validator[Any], ...]


class OrValidator(Validator[Any]):
    """Passes if any of the alternatives passes.

    When every alternative fails a single error is reported at the or's own
    path; the reasons of the individual alternatives are discarded.

    Raises:
        ConfigurationError: If there are no alternatives
    """

    def __init__(self, options: OrOptions):
        if len(options.validators) == 0:
            raise ConfigurationError("or validators should have at least one alternative")
        for index, validator in enumerate(options.validators):
            _require_validator(validator, f"or alternative {index}")
        self.options = options

    @classmethod
    def of(cls, *validators: Validator[Any]) -> OrValidator:
        """Build an or-validator, flattening alternatives that are themselves ors."""
        flattened: list[Validator[Any]] = []
        for validator in validators:
            if isinstance(validator, OrValidator):
                flattened.extend(validator.options.validators)
            else:
                flattened.append(validator)
        return cls(OrOptions(validators=tuple(flattened)))

    @property
    def validators(self) -> tuple[Validator[Any], ...]:
        return self.options.validators

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        for validator in self.options.validators:
            if not validator.validate(value, path):
                return []
        return [ValidationError(path, "did not match any of the expected types", value)]

    def is_valid(self, value: Any) -> bool:
        return any(validator.is_valid(value) for validator in self.options.validators)

    def _to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [validator.to_json_schema() for validator in self.options.validators]}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def decode_json(text: str) -> Any:
    """Decode standard JSON text, rejecting the NaN and Infinity extensions.

    Raises:
        ValueError: If the text is not valid JSON
    """
    return json.loads(text, parse_constant=_reject_constant)


class JsonValidator(Validator[str]):
    """Validates that a string contains JSON whose decoded value passes ``parsed``.

    Errors from the decoded value are reported relative to the string's own
    path; no segment is added for the decoding step.
    """

    def __init__(self, parsed: Validator[Any]):
        self.parsed = _require_validator(parsed, "parsed json validator")

    def validate(
        self, value: Any, path: Sequence[PathSegment] = ()
    ) -> list[ValidationError]:
        path = to_path(path)
        if not isinstance(value, str):
            return [ValidationError(path, "must be a string containing valid json", value)]
        try:
            decoded = decode_json(value)
        except (ValueError, RecursionError):
            return [ValidationError(path, "invalid json", value)]
        return self.parsed.validate(decoded, path)

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            decoded = decode_json(value)
        except (ValueError, RecursionError):
            return False
        return self.parsed.is_valid(decoded)

    def _to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "string",
            "contentMediaType": "application/json",
            "contentSchema": self.parsed.to_json_schema(),
        }

    def __repr__(self) -> str:
        return f"JsonValidator({self.parsed!r})"
