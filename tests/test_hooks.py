"""
Tests for the construction hooks: populate from the first constructor
argument, then validate, raising from the constructor on violations.
"""

import sys
import os
import logging
from typing import Annotated

import pytest
from pydantic import Field

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from apibind import (
    Bind, Serializable, SerializableConfig, ValidatorOptions, Violation,
    ModelValidationError, deserialize_on_init, validate_on_init,
)


class RejectAge:
    def __init__(self):
        self.seen = []

    def validate(self, instance, options):
        self.seen.append((instance, options))
        return [Violation(field="age", value=-1, messages={"min": "must be non-negative"})]


class TestDeserializeOnInit:

    def test_first_argument_is_the_payload(self):
        @deserialize_on_init
        class User(Serializable):
            full_name: Annotated[str, Bind("full_name", deserializable=True)]

        user = User({"full_name": "Ada Lovelace", "id": 7})
        assert user.full_name == "Ada Lovelace"
        assert user.serialize() == {"full_name": "Ada Lovelace"}

    def test_payload_keyword(self):
        @deserialize_on_init
        class User(Serializable):
            number: Annotated[str, Bind("sourceNumber", deserializable=True)]

        assert User(payload={"sourceNumber": "+1"}).number == "+1"

    def test_no_payload(self):
        @deserialize_on_init
        class User(Serializable):
            number: Annotated[str, Bind("sourceNumber", deserializable=True)]

        assert vars(User()) == {}

    def test_not_enabled_by_default(self):
        class User(Serializable):
            number: Annotated[str, Bind("sourceNumber", deserializable=True)]

        assert User.serializable_config == SerializableConfig()
        assert not hasattr(User({"sourceNumber": "+1"}), "number")

    def test_runs_after_subclass_init(self):
        @deserialize_on_init
        class User(Serializable):
            number: Annotated[str, Bind("sourceNumber", deserializable=True)]

            def __init__(self, payload=None):
                super().__init__(payload)
                self.number = "unknown"
                self.device = 1

        user = User({"sourceNumber": "+1"})
        assert user.number == "+1"
        assert user.device == 1

    def test_inherited_by_subclasses(self):
        @deserialize_on_init
        class Base(Serializable):
            uuid: Annotated[str, Bind("sourceUuid", deserializable=True)]

        class Child(Base):
            name: Annotated[str, Bind("sourceName", deserializable=True)]

        child = Child({"sourceUuid": "u", "sourceName": "Ada"})
        assert (child.uuid, child.name) == ("u", "Ada")

    def test_decorating_a_subclass_leaves_the_parent_alone(self):
        class Base(Serializable):
            uuid: Annotated[str, Bind("sourceUuid", deserializable=True)]

        @deserialize_on_init
        class Child(Base):
            pass

        assert Base.serializable_config.auto_deserialize is False
        assert not hasattr(Base({"sourceUuid": "u"}), "uuid")
        assert Child({"sourceUuid": "u"}).uuid == "u"

    def test_construct_skips_hooks(self):
        @deserialize_on_init
        class User(Serializable):
            number: Annotated[str, Bind("sourceNumber", deserializable=True)]

        assert not hasattr(User.construct({"sourceNumber": "+1"}), "number")


class TestValidateOnInit:

    def test_violation_raises_from_constructor(self):
        validator = RejectAge()

        @validate_on_init(validator=validator)
        class User(Serializable):
            pass

        with pytest.raises(ModelValidationError) as exc_info:
            User()

        assert "must be non-negative: but got a -1" in str(exc_info.value)
        assert exc_info.value.model_type is User
        assert exc_info.value.fields == ["age"]
        assert len(validator.seen) == 1

    def test_options_are_passed_to_the_validator(self):
        validator = RejectAge()
        options = ValidatorOptions(strict=True)

        @validate_on_init(options=options, validator=validator)
        class User(Serializable):
            pass

        with pytest.raises(ModelValidationError):
            User()
        assert validator.seen[0][1] is options

    def test_validates_deserialized_values(self):
        @validate_on_init()
        @deserialize_on_init
        class User(Serializable):
            age: Annotated[int, Field(ge=0), Bind("age", deserializable=True)]

        assert User({"age": 3}).age == 3
        with pytest.raises(ModelValidationError) as exc_info:
            User({"age": -1})
        assert "but got a -1" in str(exc_info.value)

    def test_missing_unconstrained_field_passes(self):
        @validate_on_init()
        @deserialize_on_init
        class User(Serializable):
            nickname: Annotated[str, Bind("nick", deserializable=True)]
            age: Annotated[int, Field(ge=0), Bind("age", deserializable=True)]

        user = User({"age": 4})
        assert not hasattr(user, "nickname")

    def test_decorator_order_does_not_matter(self):
        @deserialize_on_init
        @validate_on_init()
        class User(Serializable):
            age: Annotated[int, Field(ge=0), Bind("age", deserializable=True)]

        assert User.serializable_config.auto_deserialize
        assert User.serializable_config.auto_validate
        with pytest.raises(ModelValidationError):
            User({"age": -1})

    def test_config_attribute_enables_hooks(self):
        class User(Serializable):
            serializable_config = SerializableConfig(auto_deserialize=True, auto_validate=True)

            age: Annotated[int, Field(ge=0), Bind("age", deserializable=True)]

        with pytest.raises(ModelValidationError):
            User({"age": -5})

    def test_rejection_is_logged(self, caplog):
        @validate_on_init(validator=RejectAge())
        class User(Serializable):
            pass

        with caplog.at_level(logging.WARNING, logger="apibind.model"):
            with pytest.raises(ModelValidationError):
                User()
        assert "Rejected User" in caplog.text
