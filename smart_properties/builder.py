"""
    Attribute builders, used to assign initial property values by name
    in a configuration function passed to a constructor.
"""

# Part of smart-properties
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from collections.abc import Callable
from threading import Lock
from typing import Any, Dict, Optional, Type
from .base import name_mangle

_builder_classes: Dict[type, type] = {}
_builder_classes_lock = Lock()


class AttributeBuilder:
    """
    Base class for the attribute builders of classes with properties.
    Attribute builders are slotted records, one slot per property, created
    by :func:`attribute_builder_for`.

    Private field names, such as ``__x``, are name-mangled by the slotted
    record: they are accessed with their unmangled names all the same.
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        slot = name_mangle(type(self), name)
        if slot == name:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        return object.__getattribute__(self, slot)

    def __setattr__(self, name: str, value: Any) -> None:
        object.__setattr__(self, name_mangle(type(self), name), value)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={value!r}" for name, value in builder_fields(self).items()
        )
        return f"{type(self).__name__}({fields})"


def builder_fields(builder: AttributeBuilder) -> Dict[str, Any]:
    """
    Returns a dictionary of the fields which have been assigned on the given
    attribute builder. Unassigned fields are omitted.
    """
    builder_class = type(builder)
    slots = {name: name_mangle(builder_class, name) for name in builder_class.__slots__}
    return {
        name: getattr(builder, slot)
        for name, slot in slots.items()
        if hasattr(builder, slot)
    }


def attribute_builder_for(cls: Type[Any]) -> Type[AttributeBuilder]:
    """
    Returns the attribute builder class for the given class with properties,
    creating it on first use. The builder has one slot for each name in
    ``cls.properties()`` at the time when the builder is created: properties
    declared afterwards cannot be assigned with the builder.
    """
    with _builder_classes_lock:
        builder_class = _builder_classes.get(cls)
        if builder_class is None:
            fields = tuple(cls.properties())
            builder_class = type(
                f"{cls.__name__}AttributeBuilder",
                (AttributeBuilder,),
                {"__slots__": fields, "__module__": cls.__module__},
            )
            _builder_classes[cls] = builder_class
        return builder_class


def build_attributes_for(
    cls: Type[Any],
    configure: Optional[Callable[[Any], None]] = None,
    /,
) -> Dict[str, Any]:
    """
    Calls the given configuration function on a fresh attribute builder for
    the given class, and returns the attributes assigned by it.
    Returns an empty dictionary if no configuration function is given.

    .. code-block ::

        def configure(person):
            person.language_code = "en"

        build_attributes_for(Person, configure) # {'language_code': 'en'}

    :raises AttributeError: if the configuration function assigns a name
                            which is not a field of the builder
    """
    if configure is None:
        return {}
    builder = attribute_builder_for(cls)()
    configure(builder)
    return builder_fields(builder)
