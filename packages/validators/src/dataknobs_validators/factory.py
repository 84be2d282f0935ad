"""Factory for building validators from configuration."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml

from .base import Validator
from .builders import V
from .composites import UnknownKeys
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_STRING_FORMATS = {"alphanumeric", "uuid", "email"}


class ValidatorFactory:
    """Factory for creating validator trees from configuration.

    Every node is a mapping with a ``type`` entry plus the options for that
    type. Nested validators are nested mappings.

    Configuration Options:
        type (str): One of string, number, boolean, constant, any, array,
            tuple, object, or, json

    Per-type Options:
        string: pattern, format (alphanumeric|uuid|email), min_length, max_length
        number: min, max, multiple_of, integer
        constant: values
        array: items, min_length, max_length
        tuple: items (list of validator configs)
        object: keys (mapping of key to config), required_keys,
            allow_unknown_keys (bool or mapping with ``key`` and ``value`` configs)
        or: validators (list of validator configs)
        json: parsed

    Example Configuration:
        name: thing
        type: object
        keys:
          id: {type: string, format: uuid}
          name: {type: string, min_length: 3, max_length: 100}
          tags:
            type: array
            items: {type: string}
        required_keys: [id, name]
        allow_unknown_keys: false
    """

    # Keys that may appear on any node without being type options
    _COMMON_KEYS = {"type", "name", "description"}

    def __init__(self) -> None:
        self._builders: dict[str, tuple[set[str], Callable[[Mapping[str, Any]], Validator[Any]]]] = {
            "string": ({"pattern", "format", "min_length", "max_length"}, self._build_string),
            "number": ({"min", "max", "multiple_of", "integer"}, self._build_number),
            "boolean": (set(), lambda config: V.boolean()),
            "constant": ({"values"}, self._build_constant),
            "any": (set(), lambda config: V.any()),
            "array": ({"items", "min_length", "max_length"}, self._build_array),
            "tuple": ({"items"}, self._build_tuple),
            "object": ({"keys", "required_keys", "allow_unknown_keys"}, self._build_object),
            "or": ({"validators"}, self._build_or),
            "json": ({"parsed"}, self._build_json),
        }

    def create(self, **config: Any) -> Validator[Any]:
        """Create a validator from configuration.

        Args:
            **config: Validator configuration

        Returns:
            Validator instance

        Raises:
            ConfigurationError: If the configuration cannot be built
        """
        logger.info(f"Creating validator: {config.get('name', config.get('type'))}")
        return self._build(config, "$")

    def from_dict(self, config: Mapping[str, Any]) -> Validator[Any]:
        """Create a validator from a configuration mapping."""
        return self.create(**config)

    def from_yaml(self, path: str | Path) -> Validator[Any]:
        """Create a validator from a YAML file holding a single validator config.

        Args:
            path: Path to the YAML file

        Returns:
            Validator instance
        """
        file_path = Path(path)
        logger.info(f"Loading validator configuration from {file_path}")
        with file_path.open(encoding="utf-8") as f:
            config = yaml.safe_load(f)
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Validator configuration in {file_path} must be a mapping",
                context={"path": str(file_path)},
            )
        return self.from_dict(config)

    def _build(self, config: Any, location: str) -> Validator[Any]:
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Validator configuration at {location} must be a mapping, "
                f"got {type(config).__name__}",
                context={"location": location},
            )
        validator_type = str(config.get("type", "")).lower()
        if validator_type not in self._builders:
            raise ConfigurationError(
                f"Unknown validator type at {location}: {config.get('type')!r}",
                context={"location": location, "known_types": sorted(self._builders)},
            )

        option_keys, builder = self._builders[validator_type]
        for key in config:
            if key not in option_keys and key not in self._COMMON_KEYS:
                logger.warning(f"Ignoring unknown option {key!r} for {validator_type} validator at {location}")

        logger.debug(f"Building {validator_type} validator at {location}")
        try:
            return builder(_Located(config, location))
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid {validator_type} validator configuration at {location}: {e}",
                context={"location": location},
            ) from e

    def _build_string(self, config: _Located) -> Validator[Any]:
        validator = V.string()
        string_format = config.get("format")
        if string_format is not None:
            if string_format not in _STRING_FORMATS:
                raise ConfigurationError(
                    f"Unknown string format at {config.location}: {string_format!r}",
                    context={"location": config.location, "known_formats": sorted(_STRING_FORMATS)},
                )
            validator = getattr(validator, string_format)()
        if config.get("pattern") is not None:
            validator = validator.pattern(config["pattern"])
        if config.get("min_length") is not None:
            validator = validator.min_length(config["min_length"])
        if config.get("max_length") is not None:
            validator = validator.max_length(config["max_length"])
        return validator

    def _build_number(self, config: _Located) -> Validator[Any]:
        validator = V.number()
        if config.get("integer"):
            validator = validator.integer()
        if config.get("multiple_of") is not None:
            validator = validator.multiple_of(config["multiple_of"])
        if config.get("min") is not None:
            validator = validator.min(config["min"])
        if config.get("max") is not None:
            validator = validator.max(config["max"])
        return validator

    def _build_constant(self, config: _Located) -> Validator[Any]:
        values = config.get("values")
        if not isinstance(values, list):
            raise ConfigurationError(
                f"Constant validator at {config.location} requires a list of 'values'",
                context={"location": config.location},
            )
        return V.constant(*values)

    def _build_array(self, config: _Located) -> Validator[Any]:
        items = config.get("items")
        validator = V.array(self._build(items, f"{config.location}.items") if items is not None else None)
        if config.get("min_length") is not None:
            validator = validator.min_length(config["min_length"])
        if config.get("max_length") is not None:
            validator = validator.max_length(config["max_length"])
        return validator

    def _build_tuple(self, config: _Located) -> Validator[Any]:
        items = config.get("items", [])
        if not isinstance(items, list):
            raise ConfigurationError(
                f"Tuple validator at {config.location} requires a list of 'items'",
                context={"location": config.location},
            )
        return V.tuple([
            self._build(item, f"{config.location}.items.{index}") for index, item in enumerate(items)
        ])

    def _build_object(self, config: _Located) -> Validator[Any]:
        keys = config.get("keys") or {}
        if not isinstance(keys, Mapping):
            raise ConfigurationError(
                f"Object validator at {config.location} requires 'keys' to be a mapping",
                context={"location": config.location},
            )
        validator = V.object({
            key: self._build(key_config, f"{config.location}.keys.{key}")
            for key, key_config in keys.items()
        })
        required_keys = config.get("required_keys")
        if isinstance(required_keys, str):
            required_keys = [required_keys]
        if required_keys:
            validator = validator.required_keys(list(required_keys))

        allow_unknown_keys = config.get("allow_unknown_keys", False)
        if isinstance(allow_unknown_keys, Mapping):
            allow_unknown_keys = UnknownKeys(
                key=self._build(
                    allow_unknown_keys.get("key", {"type": "string"}),
                    f"{config.location}.allow_unknown_keys.key",
                ),
                value=self._build(
                    allow_unknown_keys.get("value", {"type": "any"}),
                    f"{config.location}.allow_unknown_keys.value",
                ),
            )
        return validator.allow_unknown_keys(allow_unknown_keys)

    def _build_or(self, config: _Located) -> Validator[Any]:
        validators = config.get("validators")
        if not isinstance(validators, list):
            raise ConfigurationError(
                f"Or validator at {config.location} requires a list of 'validators'",
                context={"location": config.location},
            )
        return V.or_([
            self._build(item, f"{config.location}.validators.{index}")
            for index, item in enumerate(validators)
        ])

    def _build_json(self, config: _Located) -> Validator[Any]:
        return V.json(self._build(config.get("parsed", {"type": "any"}), f"{config.location}.parsed"))


class _Located(dict):
    """A node configuration that remembers where it sits in the config tree."""

    def __init__(self, config: Mapping[str, Any], location: str):
        super().__init__(config)
        self.location = location


# Create singleton instance for registration
validator_factory = ValidatorFactory()
