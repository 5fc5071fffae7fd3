"""
Tests for base schemas.
"""

import pytest
from pydantic import ValidationError

from shared.schemas.base import BaseSchema, FrozenSchema


class TestBaseSchema:
    """Tests for BaseSchema."""

    def test_from_attributes(self):
        """Test that from_attributes is enabled."""

        class TestModel(BaseSchema):
            name: str
            value: int

        # Create object with attributes
        class DummyObj:
            name = "test"
            value = 123

        model = TestModel.model_validate(DummyObj())
        assert model.name == "test"
        assert model.value == 123

    def test_mutable(self):
        """Test that base schemas can be updated in place."""

        class TestModel(BaseSchema):
            name: str

        model = TestModel(name="before")
        model.name = "after"
        assert model.name == "after"


class TestFrozenSchema:
    """Tests for FrozenSchema."""

    def test_assignment_rejected(self):
        """Test that frozen schemas cannot be modified."""

        class TestModel(FrozenSchema):
            name: str

        model = TestModel(name="fixed")

        with pytest.raises(ValidationError):
            model.name = "changed"

    def test_model_copy_creates_new_value(self):
        """Test that updates go through model_copy."""

        class TestModel(FrozenSchema):
            name: str

        original = TestModel(name="a")
        updated = original.model_copy(update={"name": "b"})

        assert original.name == "a"
        assert updated.name == "b"
