from __future__ import annotations

import numpy as np
import pytest

from rawcols.core.errors import FieldValidationError
from rawcols.core.fields import (
    MISSING,
    BoolValidation,
    FieldValidation,
    FloatListValidation,
    FloatValidation,
    IntListValidation,
    IntValidation,
    StringListValidation,
    StringValidation,
    StructValidation,
    TagsValidation,
    validate_fields,
)

NAME = StringValidation(required=True, alphanumeric_dash_underscore=True)


def test_string_required_absent_fails():
    with pytest.raises(FieldValidationError, match=r"name: is required") as ei:
        NAME.validate(MISSING, key="name")
    assert ei.value.rule == "required"
    assert ei.value.key == "name"


@pytest.mark.parametrize("bad", ["has space", "dot.ted", "slash/", "émoji"])
def test_string_shape_rejects_outside_character_class(bad: str):
    with pytest.raises(FieldValidationError, match=r"may only contain letters, numbers, dashes and underscores"):
        NAME.validate(bad, key="name")


def test_string_shape_accepts_alphanumeric_dash_underscore():
    assert NAME.validate("user_age-2", key="name") == "user_age-2"


def test_string_rejects_empty_and_null_and_non_string():
    with pytest.raises(FieldValidationError, match=r"must be a non-empty string"):
        NAME.validate("", key="name")
    with pytest.raises(FieldValidationError, match=r"must not be null"):
        NAME.validate(None, key="name")
    with pytest.raises(FieldValidationError, match=r"expected a string, got int"):
        NAME.validate(12, key="name")


def test_string_allowed_values_and_default():
    v = StringValidation(default="500Mi", allowed_values=("500Mi", "1Gi"))
    assert v.validate(MISSING, key="mem") == "500Mi"
    assert v.validate("1Gi", key="mem") == "1Gi"
    with pytest.raises(FieldValidationError, match=r"'2Gi' is not one of \['500Mi', '1Gi'\]") as ei:
        v.validate("2Gi", key="mem")
    assert ei.value.rule == "allowed_values"


def test_bool_absent_defaults_false_and_rejects_non_bool():
    v = BoolValidation(default=False)
    assert v.validate(MISSING, key="required") is False
    assert v.validate(True, key="required") is True
    with pytest.raises(FieldValidationError, match=r"required: expected a boolean, got str"):
        v.validate("yes", key="required")
    with pytest.raises(FieldValidationError, match=r"must not be null"):
        v.validate(None, key="required")


def test_int_pointer_semantics():
    v = IntValidation(bits=64, allow_null=True)
    assert v.validate(MISSING, key="min") is None
    assert v.validate(None, key="min") is None
    assert v.validate(-7, key="min") == -7
    # integral floats are accepted
    assert v.validate(5.0, key="min") == 5


def test_int_rejects_bool_fraction_and_overflow():
    v = IntValidation(bits=64, allow_null=True)
    with pytest.raises(FieldValidationError, match=r"expected an integer, got bool"):
        v.validate(True, key="min")
    with pytest.raises(FieldValidationError, match=r"expected an integer, got float"):
        v.validate(5.5, key="min")
    with pytest.raises(FieldValidationError, match=r"does not fit in a 64-bit integer") as ei:
        v.validate(2**63, key="min")
    assert ei.value.rule == "range"
    assert v.validate(2**63 - 1, key="min") == 2**63 - 1


def test_int_greater_than():
    v = IntValidation(bits=32, default=1, greater_than=0)
    assert v.validate(MISSING, key="executors") == 1
    with pytest.raises(FieldValidationError, match=r"executors: must be greater than 0, got 0"):
        v.validate(0, key="executors")


def test_max_below_min_fails_at_declaration_time():
    v = IntValidation(allow_null=True, not_below_key="min")
    with pytest.raises(FieldValidationError, match=r"min \(10\) must not exceed max \(5\)") as ei:
        v.validate(5, key="max", resolved={"min": 10})
    assert ei.value.rule == "min_exceeds_max"

    # equal bounds and one-sided bounds are fine
    assert v.validate(10, key="max", resolved={"min": 10}) == 10
    assert v.validate(5, key="max", resolved={"min": None}) == 5
    assert v.validate(MISSING, key="max", resolved={"min": 10}) is None


def test_float32_coercion():
    v = FloatValidation(bits=32, allow_null=True)
    assert v.validate(0.1, key="min") == float(np.float32(0.1))
    assert v.validate(3, key="min") == 3.0
    with pytest.raises(FieldValidationError, match=r"does not fit in a 32-bit float"):
        v.validate(1e39, key="min")
    with pytest.raises(FieldValidationError, match=r"is not a finite number"):
        v.validate(float("nan"), key="min")
    with pytest.raises(FieldValidationError, match=r"expected a number, got str"):
        v.validate("1.5", key="min")


def test_float_max_below_min():
    v = FloatValidation(allow_null=True, not_below_key="min")
    with pytest.raises(FieldValidationError, match=r"min_exceeds_max|must not exceed"):
        v.validate(0.5, key="max", resolved={"min": 1.5})


def test_list_null_vs_empty_are_distinct():
    v = IntListValidation(allow_null=True)
    assert v.validate(MISSING, key="values") is None
    assert v.validate(None, key="values") is None
    assert v.validate([], key="values") == ()
    assert v.validate([3, 1, 2], key="values") == (3, 1, 2)


def test_list_element_errors_carry_index():
    with pytest.raises(FieldValidationError, match=r"values\[1\]: expected an integer, got str"):
        IntListValidation(allow_null=True).validate([1, "x"], key="values")
    with pytest.raises(FieldValidationError, match=r"values\[0\]: must not be null"):
        StringListValidation(allow_null=True).validate([None], key="values")
    with pytest.raises(FieldValidationError, match=r"values: expected a list, got str"):
        FloatListValidation(allow_null=True).validate("1.0", key="values")


def test_list_null_rejected_without_allow_null():
    with pytest.raises(FieldValidationError, match=r"values: must not be null"):
        StringListValidation().validate(None, key="values")


def test_validate_fields_rejects_unsupported_key_first():
    fields = (
        FieldValidation("name", "name", NAME),
        FieldValidation("required", "required", BoolValidation()),
    )
    # `name` is invalid too, but the unsupported key is reported first
    with pytest.raises(FieldValidationError, match=r"bogus: key is not supported") as ei:
        validate_fields({"name": "bad name", "bogus": 1}, fields)
    assert ei.value.rule == "unsupported_key"

    assert validate_fields({"name": "ok"}, fields) == {"name": "ok", "required": False}


def test_validate_fields_is_fail_fast_in_declaration_order():
    fields = (
        FieldValidation("name", "name", NAME),
        FieldValidation("required", "required", BoolValidation()),
    )
    with pytest.raises(FieldValidationError) as ei:
        validate_fields({"name": "", "required": "nope"}, fields)
    assert ei.value.key == "name"


def test_struct_validation_nests_keys():
    fields = (FieldValidation("executors", "executors", IntValidation(bits=32, default=1, greater_than=0)),)
    v = StructValidation(fields, build=dict)
    assert v.validate(MISSING, key="compute") is None
    assert v.validate(None, key="compute") is None
    assert v.validate({}, key="compute") == {"executors": 1}
    with pytest.raises(FieldValidationError, match=r"compute\.executors: must be greater than 0") as ei:
        v.validate({"executors": -1}, key="compute")
    assert ei.value.key == "compute.executors"
    with pytest.raises(FieldValidationError, match=r"compute: expected a map, got list"):
        v.validate([], key="compute")


def test_tags_validation():
    v = TagsValidation()
    assert dict(v.validate(MISSING, key="tags")) == {}
    assert dict(v.validate(None, key="tags")) == {}
    assert dict(v.validate({"team": "core", "pii": False, "weight": 1.5}, key="tags")) == {
        "team": "core",
        "pii": False,
        "weight": 1.5,
    }
    with pytest.raises(FieldValidationError, match=r"may only contain letters"):
        v.validate({"bad key": 1}, key="tags")
    with pytest.raises(FieldValidationError, match=r"tags\.nested: tag values must be scalars, got list"):
        v.validate({"nested": [1, 2]}, key="tags")


@pytest.mark.parametrize("bad", ["age\n", "age\r\n", "\nage", "a\nb"])
def test_string_shape_rejects_embedded_newlines(bad: str):
    with pytest.raises(FieldValidationError) as ei:
        NAME.validate(bad, key="name")
    assert ei.value.rule == "pattern"


def test_tag_keys_reject_trailing_newline():
    with pytest.raises(FieldValidationError, match=r"may only contain letters"):
        TagsValidation().validate({"k\n": 1}, key="tags")
