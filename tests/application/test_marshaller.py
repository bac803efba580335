"""Tests for the Marshaller."""

import logging
from collections import OrderedDict

import pytest

from marshalkit import (
    ConfigValidationError,
    FieldSerializationError,
    InvalidCollectionError,
    InvalidKeyTypeError,
    MarshalConfig,
    MarshalError,
    Marshaller,
    Nested,
    Raw,
    ValidationError,
    is_missing,
    marshal,
    marshal_one,
)


class ForeignValidationError(Exception):
    """Validation error type from some other field library."""

    def __init__(self, messages):
        super().__init__(messages)
        self.messages = messages


class ForeignHandler:
    """Raises ForeignValidationError for missing values."""

    def serialize(self, value, field_name, source_object):
        if is_missing(value):
            raise ForeignValidationError({"_schema": ["missing"]})
        return value


class PlainMessageError(Exception):
    """Validation error without a ``messages`` attribute."""


class PlainMessageHandler:
    def serialize(self, value, field_name, source_object):
        raise PlainMessageError("nope")


class AttributeHandler:
    """Resolves a different key than its field name."""

    def __init__(self, attribute):
        self.attribute = attribute

    def serialize(self, value, field_name, source_object):
        return value


class ComputedHandler:
    """Skips resolution and computes from the source object."""

    check_attribute = False

    def __init__(self):
        self.seen = []

    def serialize(self, value, field_name, source_object):
        self.seen.append(value)
        return f"{source_object['first']} {source_object['last']}"


class RejectOddHandler:
    """Rejects odd integers."""

    def serialize(self, value, field_name, source_object):
        if value % 2:
            raise ValidationError(f"{value} is odd")
        return value


# =============================================================================
# Single Object
# =============================================================================


class TestMarshalOne:
    """Tests for marshalling one object."""

    def test_example_all_fields_present(self, upper_handler, identity_handler):
        fields = {"name": upper_handler, "age": identity_handler}
        result, errors = marshal_one({"name": "ada", "age": 30}, fields)

        assert result == {"name": "ADA", "age": 30}
        assert errors == {}

    def test_example_missing_required_field(self, upper_handler, required_handler):
        fields = {"name": upper_handler, "age": required_handler}
        result, errors = marshal_one({"name": "ada"}, fields)

        assert result == {"name": "ADA"}
        assert "age" not in result
        assert errors == {"age": ["Missing data for required field."]}

    def test_example_unexpected_failure_aborts(self, exploding_handler, identity_handler):
        fields = {"name": exploding_handler, "age": identity_handler}

        with pytest.raises(FieldSerializationError) as exc:
            marshal_one({"name": "ada", "age": 30}, fields)

        assert exc.value.field_name == "name"
        assert exc.value.index is None
        assert isinstance(exc.value.__cause__, RuntimeError)
        assert exc.value.cause is exc.value.__cause__

    def test_fatal_error_stops_remaining_fields(self, exploding_handler, recording_handler):
        fields = {"name": exploding_handler, "age": recording_handler}

        with pytest.raises(FieldSerializationError):
            marshal_one({"name": "ada", "age": 30}, fields)

        assert recording_handler.calls == []

    def test_works_on_objects(self, person, upper_handler, identity_handler):
        result, errors = marshal_one(person, {"name": upper_handler, "age": identity_handler})
        assert result == {"name": "ADA", "age": 36}
        assert errors == {}

    def test_dotted_field_names(self, person_dict, identity_handler):
        result, _ = marshal_one(person_dict, {"address.city": identity_handler})
        assert result == {"address.city": "London"}

    def test_integer_field_names(self, identity_handler):
        result, _ = marshal_one(["zero", "one"], {1: identity_handler, 0: identity_handler})
        assert result == {1: "one", 0: "zero"}

    def test_output_order_follows_field_order(self, identity_handler):
        obj = {"a": 1, "b": 2, "c": 3}
        fields = OrderedDict([("c", identity_handler), ("a", identity_handler), ("b", identity_handler)])

        result, _ = marshal_one(obj, fields)

        assert list(result) == ["c", "a", "b"]

    def test_handler_receives_name_and_source(self, recording_handler, person_dict):
        marshal_one(person_dict, {"name": recording_handler})
        assert recording_handler.calls == [("ada", "name", person_dict)]

    def test_missing_value_is_a_fresh_sentinel(self, recording_handler):
        marshal_one({}, {"a": recording_handler})
        marshal_one({}, {"a": recording_handler})

        first, second = recording_handler.calls[0][0], recording_handler.calls[1][0]
        assert is_missing(first)
        assert is_missing(second)
        assert first is not second

    def test_one_sentinel_per_object(self, recording_handler):
        marshal_one({}, {"a": recording_handler, "b": recording_handler})
        assert recording_handler.calls[0][0] is recording_handler.calls[1][0]

    def test_none_is_not_missing(self, recording_handler):
        marshal_one({"a": None}, {"a": recording_handler})
        assert recording_handler.calls[0][0] is None

    def test_source_is_not_mutated(self, person_dict, upper_handler):
        snapshot = repr(person_dict)
        marshal_one(person_dict, {"name": upper_handler, "address.city": upper_handler})
        assert repr(person_dict) == snapshot

    def test_empty_field_spec(self):
        assert marshal_one({"a": 1}, {}) == ({}, {})


# =============================================================================
# Handler Extensions
# =============================================================================


class TestHandlerAttributes:
    """Optional ``attribute`` and ``check_attribute`` on handlers."""

    def test_attribute_overrides_lookup_key(self, person_dict):
        result, _ = marshal_one(person_dict, {"city": AttributeHandler("address.city")})
        assert result == {"city": "London"}

    def test_attribute_none_uses_field_name(self):
        result, _ = marshal_one({"name": "ada"}, {"name": AttributeHandler(None)})
        assert result == {"name": "ada"}

    def test_integer_attribute(self):
        result, _ = marshal_one(["a", "b"], {"second": AttributeHandler(1)})
        assert result == {"second": "b"}

    def test_check_attribute_false_skips_resolution(self):
        handler = ComputedHandler()
        result, _ = marshal_one({"first": "Ada", "last": "Lovelace"}, {"full_name": handler})

        assert result == {"full_name": "Ada Lovelace"}
        assert is_missing(handler.seen[0])

    def test_check_attribute_false_ignores_invalid_field_name(self):
        """No key is parsed for a handler that never resolves."""
        result, _ = marshal_one({"first": "a", "last": "b"}, {1.5: ComputedHandler()})
        assert result == {1.5: "a b"}


# =============================================================================
# Validation Error Types
# =============================================================================


class TestValidationErrorTypes:
    """Which handler exceptions count as recoverable."""

    def test_custom_validation_error_type(self):
        result, errors = marshal_one({}, {"a": ForeignHandler()}, validation_error=ForeignValidationError)
        assert result == {}
        assert errors == {"a": {"_schema": ["missing"]}}

    def test_foreign_error_is_fatal_by_default(self):
        with pytest.raises(FieldSerializationError) as exc:
            marshal_one({}, {"a": ForeignHandler()})
        assert isinstance(exc.value.cause, ForeignValidationError)

    def test_tuple_of_validation_error_types(self, required_handler):
        marshaller = Marshaller(validation_error=(ValidationError, ForeignValidationError))
        _, errors = marshaller.marshal_one({}, {"a": ForeignHandler(), "b": required_handler})
        assert set(errors) == {"a", "b"}

    def test_error_without_messages_uses_str(self):
        _, errors = marshal_one({}, {"a": PlainMessageHandler()}, validation_error=PlainMessageError)
        assert errors == {"a": ["nope"]}

    def test_validation_error_recognized_alongside_custom_type(self, required_handler):
        marshaller = Marshaller(validation_error=ForeignValidationError)
        _, errors = marshaller.marshal_one({}, {"a": ForeignHandler(), "b": required_handler})
        assert errors == {"a": {"_schema": ["missing"]}, "b": ["Missing data for required field."]}

    def test_nested_errors_recorded_with_custom_type(self):
        marshaller = Marshaller(validation_error=ForeignValidationError)
        fields = {"name": Raw(), "inner": Nested({"x": Raw(required=True)})}

        result, errors = marshaller.marshal({"name": "ada", "inner": {}}, fields)

        assert result == {"name": "ada"}
        assert errors == {"inner": {"x": ["Missing data for required field."]}}


# =============================================================================
# Many Mode
# =============================================================================


class TestMarshalMany:
    """Tests for marshalling collections."""

    def test_preserves_length_and_order(self):
        objs = [{"n": 4}, {"n": 3}, {"n": 2}, {"n": 1}]
        result, errors = marshal(objs, {"n": RejectOddHandler()}, many=True)

        assert len(result) == len(objs)
        assert result == [{"n": 4}, {}, {"n": 2}, {}]
        assert errors == {1: {"n": ["3 is odd"]}, 3: {"n": ["1 is odd"]}}

    def test_errors_are_addressable_per_element(self, required_handler):
        objs = [{"a": 1}, {"b": 2}, {"a": 3, "b": 4}]
        fields = {"a": required_handler, "b": required_handler}

        _, errors = marshal(objs, fields, many=True)

        assert errors[0] == {"b": ["Missing data for required field."]}
        assert errors[1] == {"a": ["Missing data for required field."]}
        assert 2 not in errors

    def test_empty_sequence(self, identity_handler):
        assert marshal([], {"a": identity_handler}, many=True) == ([], {})

    def test_tuples_and_generators(self, identity_handler):
        assert marshal(({"a": 1},), {"a": identity_handler}, many=True) == ([{"a": 1}], {})
        gen = ({"a": i} for i in range(2))
        assert marshal(gen, {"a": identity_handler}, many=True) == ([{"a": 0}, {"a": 1}], {})

    @pytest.mark.parametrize("bad", ["abc", b"abc", {"a": 1}, 42, None, {1, 2}, frozenset({"a"})])
    def test_non_collection_is_rejected(self, bad, identity_handler):
        with pytest.raises(InvalidCollectionError):
            marshal(bad, {"a": identity_handler}, many=True)

    def test_fatal_error_reports_index(self, identity_handler):
        objs = [{"n": 2}, {"n": "x"}, {"n": 4}]

        with pytest.raises(FieldSerializationError) as exc:
            marshal(objs, {"n": RejectOddHandler()}, many=True)

        assert exc.value.index == 1
        assert exc.value.field_name == "n"
        assert isinstance(exc.value.__cause__, TypeError)

    def test_fatal_error_stops_later_objects(self, recording_handler):
        class FailOnSecond:
            def serialize(self, value, field_name, source_object):
                if value == 2:
                    raise KeyError("bad")
                return value

        fields = {"a": FailOnSecond(), "b": recording_handler}

        with pytest.raises(FieldSerializationError):
            marshal([{"a": 1, "b": 1}, {"a": 2, "b": 2}, {"a": 3, "b": 3}], fields, many=True)

        assert [call[0] for call in recording_handler.calls] == [1]

    def test_many_false_with_list_marshals_the_list(self, identity_handler):
        result, errors = marshal(["x", "y"], {0: identity_handler}, many=False)
        assert result == {0: "x"}
        assert errors == {}

    def test_each_object_gets_its_own_sentinel(self, recording_handler):
        marshal([{}, {}], {"a": recording_handler}, many=True)
        assert recording_handler.calls[0][0] is not recording_handler.calls[1][0]


# =============================================================================
# Key Validation
# =============================================================================


class TestKeyValidation:
    """Invalid keys fail before anything is serialized."""

    def test_invalid_field_key(self, recording_handler):
        with pytest.raises(InvalidKeyTypeError):
            marshal_one({"a": 1}, {"a": recording_handler, 2.5: recording_handler})
        assert recording_handler.calls == []

    def test_invalid_key_in_many_mode_before_first_object(self, recording_handler):
        with pytest.raises(InvalidKeyTypeError):
            marshal([{"a": 1}], {"a": recording_handler, "": recording_handler}, many=True)
        assert recording_handler.calls == []

    def test_invalid_attribute(self):
        with pytest.raises(InvalidKeyTypeError):
            marshal_one({}, {"a": AttributeHandler(3.14)})

    def test_bind_fields(self, identity_handler):
        bound = Marshaller().bind_fields({"a.b": identity_handler, "c": ComputedHandler()})
        assert bound[0].key.segments == ("a", "b")
        assert bound[1].key is None


# =============================================================================
# Configuration & Logging
# =============================================================================


class TestMarshallerConfig:
    """Marshaller settings."""

    def test_custom_separator(self, person_dict, identity_handler):
        marshaller = Marshaller(separator="/")
        result, _ = marshaller.marshal(person_dict, {"address/city": identity_handler})
        assert result == {"address/city": "London"}

    def test_empty_separator_is_rejected(self):
        with pytest.raises(ConfigValidationError) as exc:
            Marshaller(separator="")
        assert exc.value.field_name == "path_separator"
        assert isinstance(exc.value, MarshalError)

    def test_from_config(self, person_dict, identity_handler):
        marshaller = Marshaller.from_config(MarshalConfig(path_separator=":"))
        assert marshaller.separator == ":"
        result, _ = marshaller.marshal(person_dict, {"address:country": identity_handler})
        assert result == {"address:country": "UK"}


class TestMarshallerLogging:
    """The marshaller logs instead of printing."""

    def test_validation_failure_logged_at_debug(self, caplog, required_handler, capsys):
        with caplog.at_level(logging.DEBUG, logger="Marshaller"):
            marshal_one({}, {"age": required_handler})

        records = [r for r in caplog.records if r.name == "Marshaller"]
        assert records
        assert records[0].levelno == logging.DEBUG
        assert records[0].field == "age"
        assert capsys.readouterr().out == ""

    def test_fatal_failure_logged_at_error(self, caplog, exploding_handler):
        with caplog.at_level(logging.DEBUG, logger="Marshaller"):
            with pytest.raises(FieldSerializationError):
                marshal([{}], {"a": exploding_handler}, many=True)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].index == 0
