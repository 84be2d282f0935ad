"""Tests for ObjectValidator."""

import pytest

from dataknobs_validators import (
    MISSING,
    ConfigurationError,
    ObjectOptions,
    ObjectValidator,
    UnknownKeys,
    V,
    ValidationError,
)
from dataknobs_validators.testing import check_validates


class TestObjectValidator:
    """Test key validation on ObjectValidator."""

    @pytest.mark.parametrize("value", [[], "abc", 1, None, MISSING])
    def test_expects_objects(self, value):
        """Test non-mappings are rejected."""
        check_validates(V.object(), value, [ValidationError((), "must be an object", value)])

    def test_empty_object(self):
        """Test an object with no declared keys."""
        check_validates(V.object(), {})

    def test_validates_declared_keys(self):
        """Test each key value is checked at its key path."""
        validator = V.object({"abc": V.number(), "def": V.string()})
        check_validates(validator, {"abc": 1, "def": "x"})
        check_validates(validator, {"abc": "1"}, [ValidationError(("abc",), "must be a number", "1")])

    def test_keys_are_optional_by_default(self):
        """Test declared keys need not be present."""
        check_validates(V.object({"abc": V.number()}), {})

    def test_present_none_is_validated(self):
        """Test a key present with None is not treated as absent."""
        check_validates(V.object({"abc": V.number()}), {"abc": None}, [
            ValidationError(("abc",), "must be a number", None),
        ])

    def test_required_keys(self):
        """Test a missing required key is reported at the object path."""
        validator = V.object({"abc": V.number()}).required_keys("abc")
        check_validates(validator, {"abc": 1})
        check_validates(validator, {}, [ValidationError((), 'required key "abc" was not defined', {})])

    def test_required_keys_as_list(self):
        """Test required keys may be passed as a single list."""
        validator = V.object({"abc": V.number(), "def": V.number()}).required_keys(["abc", "def"])
        assert validator.options.required_keys == ("abc", "def")

    def test_required_keys_are_deduplicated(self):
        """Test repeated required keys produce one error each."""
        validator = V.object({"abc": V.number()}).required_keys("abc", "abc")
        assert validator.options.required_keys == ("abc",)
        check_validates(validator, {}, [ValidationError((), 'required key "abc" was not defined', {})])

    def test_required_keys_replace(self):
        """Test required_keys replaces rather than extends."""
        validator = V.object({"abc": V.number(), "def": V.number()}).required_keys("abc").required_keys("def")
        check_validates(validator, {"def": 1})

    def test_required_undeclared_key(self):
        """Test a required key without a validator still has to be present."""
        validator = V.object().required_keys("abc").allow_unknown_keys(True)
        check_validates(validator, {"abc": None})
        check_validates(validator, {}, [ValidationError((), 'required key "abc" was not defined', {})])

    def test_required_key_with_unknown_keys_disallowed(self):
        """Test a present undeclared required key is still unknown when disallowed."""
        validator = V.object().required_keys("abc")
        value = {"abc": 1}
        check_validates(validator, value, [ValidationError((), 'encountered unknown key "abc"', value)])

    def test_error_order(self):
        """Test key errors come in value order followed by required key errors."""
        validator = V.object({"a": V.number(), "b": V.number(), "c": V.number()}).required_keys("c")
        value = {"b": "x", "a": "y"}
        check_validates(validator, value, [
            ValidationError(("b",), "must be a number", "x"),
            ValidationError(("a",), "must be a number", "y"),
            ValidationError((), 'required key "c" was not defined', value),
        ])

    def test_nested_paths(self):
        """Test nested objects and arrays compose paths."""
        validator = V.object({"items": V.array(V.object({"id": V.string().uuid()}))})
        value = {"items": [{"id": "c56a4180-65aa-42ec-a945-5fd21dec0538"}, {"id": "abc"}]}
        check_validates(validator, value, [ValidationError(("items", 1, "id"), "must be a uuid", "abc")])

    def test_keys_must_be_validators(self):
        """Test key validators are checked at construction."""
        with pytest.raises(ConfigurationError, match="validator for key 'abc'"):
            V.object({"abc": "string"})  # type: ignore[dict-item]

    def test_accepts_mapping_types(self):
        """Test any Mapping counts as an object."""
        from types import MappingProxyType

        check_validates(V.object({"abc": V.number()}), MappingProxyType({"abc": 1}))

    def test_thing(self, thing_validator, valid_uuid):
        """Test a realistic object validator."""
        check_validates(thing_validator, {"id": valid_uuid, "name": "hello world!"})
        value = {"id": "abc", "name": "hi"}
        check_validates(thing_validator, value, [
            ValidationError(("id",), "must be a uuid", "abc"),
            ValidationError(("name",), "length 2 was shorter than minimum length: 3", "hi"),
        ])


class TestUnknownKeys:
    """Test the unknown key policies."""

    def test_rejected_by_default(self):
        """Test undeclared keys are errors by default."""
        value = {"abc": 1, "def": 2}
        check_validates(V.object({"abc": V.number()}), value, [
            ValidationError((), 'encountered unknown key "def"', value),
        ])

    def test_unknown_key_value_is_reported(self):
        """Test the error value is the whole object."""
        errors = V.object().validate({"x": [1, 2]}, ["root"])
        assert errors == [ValidationError(("root",), 'encountered unknown key "x"', {"x": [1, 2]})]

    def test_allowed_unchecked(self):
        """Test True accepts any undeclared key and value."""
        validator = V.object({"abc": V.number()}).allow_unknown_keys(True)
        check_validates(validator, {"abc": 1, "def": {"anything": [None]}})
        check_validates(validator, {"abc": "1", "def": 2}, [
            ValidationError(("abc",), "must be a number", "1"),
        ])

    def test_disallow_again(self):
        """Test False restores the default."""
        validator = V.object().allow_unknown_keys(True).allow_unknown_keys(False)
        assert not validator.is_valid({"abc": 1})

    def test_shape_constraint(self):
        """Test unknown keys are validated by key and value validators."""
        validator = V.object({"id": V.string()}).allow_unknown_keys(
            UnknownKeys(key=V.string().pattern("^x-"), value=V.number())
        )
        check_validates(validator, {"id": "abc", "x-one": 1, "x-two": 2.5})
        value = {"id": "abc", "other": "a"}
        check_validates(validator, value, [
            ValidationError((), 'key "other" failed validation: did not match pattern', "other"),
            ValidationError(("other",), 'value for key "other" failed validation: must be a number', "a"),
        ])

    def test_shape_constraint_as_mapping(self):
        """Test a key/value mapping is accepted as the shape constraint."""
        validator = V.object().allow_unknown_keys({"key": V.string().alphanumeric(), "value": V.boolean()})
        assert isinstance(validator.options.allow_unknown_keys, UnknownKeys)
        check_validates(validator, {"abc": True})
        check_validates(validator, {"a-b": True}, [
            ValidationError((), 'key "a-b" failed validation: must be alphanumeric', "a-b"),
        ])

    def test_declared_keys_skip_shape_constraint(self):
        """Test declared keys are only checked by their own validator."""
        validator = V.object({"ABC": V.number()}).allow_unknown_keys(
            UnknownKeys(key=V.string().pattern("^[a-z]+$"), value=V.string())
        )
        check_validates(validator, {"ABC": 1, "abc": "x"})

    def test_invalid_policies(self):
        """Test unsupported policies fail at construction."""
        with pytest.raises(ConfigurationError):
            V.object().allow_unknown_keys("yes")
        with pytest.raises(ConfigurationError):
            V.object().allow_unknown_keys({"key": V.string()})
        with pytest.raises(ConfigurationError):
            UnknownKeys(key=V.string(), value="number")  # type: ignore[arg-type]


class TestObjectTransforms:
    """Test pick, omit, extend and merge."""

    @pytest.fixture
    def base(self):
        return V.object({"a": V.number(), "b": V.string(), "c": V.boolean()}).required_keys("a", "b")

    def test_pick(self, base):
        """Test pick keeps only the selected keys."""
        picked = base.pick("a", "c")
        assert list(picked.keys) == ["a", "c"]
        assert picked.options.required_keys == ("a",)
        value = {"a": 1, "b": "x"}
        check_validates(picked, value, [ValidationError((), 'encountered unknown key "b"', value)])

    def test_omit(self, base):
        """Test omit removes the given keys."""
        omitted = base.omit("b")
        assert list(omitted.keys) == ["a", "c"]
        assert omitted.options.required_keys == ("a",)
        check_validates(omitted, {"a": 1})

    def test_omit_unknown_key(self, base):
        """Test omitting an undeclared key changes nothing."""
        assert base.omit("zzz").options == base.options

    def test_extend(self, base):
        """Test extend adds keys and overrides on collision."""
        extended = base.extend({"d": V.number(), "a": V.string()})
        assert list(extended.keys) == ["a", "b", "c", "d"]
        check_validates(extended, {"a": "now a string", "b": "x", "d": 1})
        assert extended.options.required_keys == ("a", "b")

    def test_merge(self, base):
        """Test merge combines keys and required keys."""
        other = V.object({"c": V.number(), "d": V.number()}).required_keys("b", "d").allow_unknown_keys(True)
        merged = base.merge(other)
        assert merged.options.required_keys == ("a", "b", "d")
        assert merged.options.allow_unknown_keys is False
        check_validates(merged, {"a": 1, "b": "x", "c": 2, "d": 3})
        value = {"a": 1, "b": "x", "c": True}
        check_validates(merged, value, [
            ValidationError(("c",), "must be a number", True),
            ValidationError((), 'required key "d" was not defined', value),
        ])

    def test_merge_requires_object_validator(self, base):
        """Test merging with another kind is rejected."""
        with pytest.raises(ConfigurationError):
            base.merge(V.string())  # type: ignore[arg-type]

    def test_transforms_leave_receiver_unchanged(self, base):
        """Test the receiver is never modified."""
        before = base.options
        base.pick("a")
        base.omit("a")
        base.extend({"z": V.any()})
        base.merge(V.object({"y": V.any()}))
        assert base.options == before
        assert list(base.keys) == ["a", "b", "c"]

    def test_options_are_normalized(self):
        """Test direct construction normalizes options."""
        validator = ObjectValidator(ObjectOptions(keys={"a": V.number()}, required_keys=("a", "a")))
        assert validator.options.required_keys == ("a",)
        assert validator.options.allow_unknown_keys is False
