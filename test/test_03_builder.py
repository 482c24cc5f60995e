# pylint: disable = missing-docstring

from typing import Any
import pytest
from smart_properties import (
    AttributeBuilder,
    Property,
    SmartProperties,
    attribute_builder_for,
    build_attributes_for,
)

def test_builder_class() -> None:
    class C(SmartProperties):
        x = Property()
        y = Property()
    builder_class = attribute_builder_for(C)
    assert issubclass(builder_class, AttributeBuilder)
    assert builder_class.__name__ == "CAttributeBuilder"
    assert builder_class.__slots__ == ("x", "y")
    assert attribute_builder_for(C) is builder_class

def test_builder_per_class() -> None:
    class A(SmartProperties):
        x = Property()
    class B(A):
        y = Property()
    assert attribute_builder_for(A).__slots__ == ("x",)
    assert attribute_builder_for(B).__slots__ == ("x", "y")

def test_build_attributes() -> None:
    class C(SmartProperties):
        x = Property()
        y = Property()
        z = Property()
    def configure(builder: Any) -> None:
        builder.x = 1
        builder.z = None
    assert build_attributes_for(C, configure) == {"x": 1, "z": None}

def test_build_attributes_without_configure() -> None:
    class C(SmartProperties):
        x = Property()
    assert build_attributes_for(C) == {}

def test_build_attributes_unknown_name() -> None:
    class C(SmartProperties):
        x = Property()
    def configure(builder: Any) -> None:
        builder.y = 1
    with pytest.raises(AttributeError):
        build_attributes_for(C, configure)

def test_builder_is_not_updated() -> None:
    class C(SmartProperties):
        x = Property()
    attribute_builder_for(C)
    C._property("y")
    assert attribute_builder_for(C).__slots__ == ("x",)
    def configure(builder: Any) -> None:
        builder.y = 1
    with pytest.raises(AttributeError):
        build_attributes_for(C, configure)

def test_builder_repr() -> None:
    class Person(SmartProperties):
        name = Property()
        language_code = Property()
    builder = attribute_builder_for(Person)()
    builder.language_code = "de"
    assert repr(builder) == "PersonAttributeBuilder(language_code='de')"

def test_builder_private_name() -> None:
    class C(SmartProperties):
        y = Property()
    C._property("__x")
    builder = attribute_builder_for(C)()
    setattr(builder, "__x", 1)
    assert getattr(builder, "__x") == 1
    assert build_attributes_for(C, lambda b: setattr(b, "__x", 2)) == {"__x": 2}
    with pytest.raises(AttributeError):
        getattr(attribute_builder_for(C)(), "__x")
