"""Composable runtime value validation for dataknobs packages.

Validators are immutable, composable rules that classify an untyped value
(a parsed JSON document, a network payload, user input) as valid or not and,
when it is not, report exactly where and why.

- **Primitives**: string, number, boolean, constant and any validators
- **Combinators**: array, tuple, object, or and json validators that compose
  paths and aggregate errors from their children
- **Schema export**: every validator can describe itself as a JSON Schema
- **Factory**: build validator trees from configuration dicts or YAML files

Example:
    ```python
    from dataknobs_validators import V

    thing = V.object({
        "id": V.string().uuid(),
        "name": V.string().min_length(3).max_length(100),
    }).required_keys("id", "name")

    thing.validate({"id": "abc", "name": "hello world!"})
    # [ValidationError(path=('id',), message='must be a uuid', value='abc')]

    thing.check_valid({"id": "abc", "name": "hello world!"})
    # FailedValidationError: id: must be a uuid
    ```
"""

from dataknobs_validators.base import Validator
from dataknobs_validators.builders import V
from dataknobs_validators.composites import (
    ArrayOptions,
    ArrayValidator,
    JsonValidator,
    ObjectOptions,
    ObjectValidator,
    OrOptions,
    OrValidator,
    TupleOptions,
    TupleValidator,
    UnknownKeys,
    spread_args,
)
from dataknobs_validators.exceptions import (
    ConfigurationError,
    FailedValidationError,
    ValidatorsError,
)
from dataknobs_validators.factory import ValidatorFactory, validator_factory
from dataknobs_validators.primitives import (
    ANY_VALIDATOR,
    BOOLEAN_VALIDATOR,
    AnyValidator,
    BooleanValidator,
    ConstantOptions,
    ConstantValidator,
    NumberOptions,
    NumberValidator,
    StringOptions,
    StringValidator,
)
from dataknobs_validators.result import (
    MISSING,
    Path,
    PathSegment,
    ValidationError,
    format_errors,
    format_path,
)
from dataknobs_validators.schema_export import export_json_schema, remove_unset_properties

__version__ = "0.1.0"

__all__ = [
    # Errors and paths
    "ValidationError",
    "Path",
    "PathSegment",
    "MISSING",
    "format_path",
    "format_errors",
    # Exceptions
    "ValidatorsError",
    "ConfigurationError",
    "FailedValidationError",
    # Contract
    "Validator",
    # Primitives
    "StringValidator",
    "StringOptions",
    "NumberValidator",
    "NumberOptions",
    "BooleanValidator",
    "BOOLEAN_VALIDATOR",
    "ConstantValidator",
    "ConstantOptions",
    "AnyValidator",
    "ANY_VALIDATOR",
    # Combinators
    "ArrayValidator",
    "ArrayOptions",
    "TupleValidator",
    "TupleOptions",
    "ObjectValidator",
    "ObjectOptions",
    "UnknownKeys",
    "OrValidator",
    "OrOptions",
    "JsonValidator",
    # Builders
    "V",
    "spread_args",
    # Schema export
    "export_json_schema",
    "remove_unset_properties",
    # Factory
    "ValidatorFactory",
    "validator_factory",
    "__version__",
]
