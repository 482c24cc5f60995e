"""
    Base class for descriptors backed by instance attributes.
"""

# Part of smart-properties
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from typing import Any, Optional, Type, final
from typing_validation import validate


def is_dict_available(cls: type) -> bool:
    """
    Checks whether instances of a descriptor owner class have ``__dict__``
    available on them.
    """
    for klass in cls.__mro__[:-1]:
        slots = klass.__dict__.get("__slots__")
        if slots is None:
            return True
        if isinstance(slots, str):
            slots = (slots,)
        if "__dict__" in slots:
            return True
    return False


def class_slots(cls: type) -> tuple[str, ...] | None:
    """
    Returns a tuple consisting of all slots for the given class and all
    non-private slots for all classes in its MRO.
    Returns :obj:`None` if slots are not defined for the class.
    """
    if "__slots__" not in cls.__dict__:
        return None
    slots: list[str] = []
    for klass in cls.__mro__[:-1]:
        klass_slots = klass.__dict__.get("__slots__", ())
        if isinstance(klass_slots, str):
            klass_slots = (klass_slots,)
        for slot in klass_slots:
            if klass is not cls and is_private(slot):
                continue
            slots.append(slot)
    return tuple(slots)


def is_private(attr_name: str) -> bool:
    """
    Whether the given attribute name is private, i.e. whether it starts
    with two underscores but does not end with two underscores.
    """
    return attr_name.startswith("__") and not attr_name.endswith("__")


def name_mangle(owner: type, attr_name: str) -> str:
    """
    If the given attribute name is private and not dunder,
    return its name-mangled version for the given owner class.
    """
    if not is_private(attr_name):
        return attr_name
    return f"_{owner.__name__.lstrip('_')}{attr_name}"


def name_unmangle(owner: type, attr_name: str) -> str:
    """
    If the given attribute name is name-mangled for the given owner class,
    removes the name-mangling prefix.
    """
    name_mangling_prefix = f"_{owner.__name__.lstrip('_')}"
    if attr_name.startswith(name_mangling_prefix + "__"):
        return attr_name[len(name_mangling_prefix) :]
    return attr_name


class StoredDescriptor:
    """
    Base class for descriptors whose value is stored on each instance of
    the owner class, in a backing attribute determined as follows:

    1. If ``__dict__`` is available on instances of the owner class
       (cf. :func:`is_dict_available`), the value is stored in the instance
       ``__dict__``, under the descriptor name.
    2. Else, the value is stored in a slot, whose name is obtained by
       prepending one or two underscores to the descriptor name (one if the
       descriptor name starts with underscore, two if it doesn't).
       The slot must appear in the slots of the owner class
       (cf. :func:`class_slots`).

    If the backing attribute name starts with two underscores but does not end
    with two underscores, name-mangling is automatically performed.
    """

    # Attribute set by constructor or by __set_name__:
    __name: str

    # Attributes set by __set_name__:
    __owner: Type[Any]
    __backed_by: str
    __use_dict: bool

    __slots__ = ("__name", "__owner", "__backed_by", "__use_dict")

    def __init__(self, name: Optional[str] = None, /) -> None:
        """
        Creates a new descriptor, optionally specifying its name.
        If no name is given, the name is set when the descriptor is assigned
        to a class attribute.

        :raises TypeError: if the name is not a string or :obj:`None`

        :meta public:
        """
        validate(name, Optional[str])
        if name is not None:
            self.__name = name

    @final
    @property
    def name(self) -> str:
        """
        The name of the descriptor.

        :raises AttributeError: if no name was given to the constructor and
                                the descriptor has not yet been assigned.
        """
        try:
            return self.__name
        except AttributeError:
            raise AttributeError(
                "Descriptor has no name: it has not yet been assigned to a class."
            ) from None

    @final
    @property
    def owner(self) -> Type[Any]:
        """
        The class that owns the descriptor.
        """
        return self.__owner

    @final
    @property
    def is_assigned(self) -> bool:
        """
        Whether the descriptor has been assigned its owner and name.
        """
        return hasattr(self, "_StoredDescriptor__owner")

    @final
    def _get_on(self, instance: Any) -> Any:
        """
        Gets the value of the backing attribute on the given instance.
        """
        if self.__use_dict:
            try:
                return instance.__dict__[self.__backed_by]
            except KeyError:
                raise AttributeError(
                    f"{type(instance).__name__!r} object has no "
                    f"attribute {self.__backed_by!r}."
                ) from None
        return getattr(instance, self.__backed_by)

    @final
    def _set_on(self, instance: Any, value: Any) -> None:
        """
        Sets the value of the backing attribute on the given instance.
        """
        if self.__use_dict:
            instance.__dict__[self.__backed_by] = value
        else:
            setattr(instance, self.__backed_by, value)

    @final
    def _is_set_on(self, instance: Any) -> bool:
        """
        Checks whether the value of the backing attribute is set on the
        given instance.
        """
        if self.__use_dict:
            return self.__backed_by in instance.__dict__
        return hasattr(instance, self.__backed_by)

    @final
    def __set_name__(self, owner: Type[Any], name: str) -> None:
        """
        Hook called when the descriptor is assigned to a class attribute.
        Responsible for:

        - Setting the owner and name of the descriptor
        - Setting the name of the backing attribute (incl. name-mangling)
        - Determining whether the backing attribute lives in ``__dict__``.

        :raises TypeError: if the descriptor is assigned more than once
        :raises TypeError: if the descriptor was constructed with a name
                           different from the one it is assigned to
        :raises TypeError: if ``__dict__`` is not available on instances of
                           the owner class and the backing attribute name is
                           not in ``__slots__``.

        :meta public:
        """
        if self.is_assigned:
            raise TypeError(
                "Cannot set owner/name for the same descriptor twice."
            )
        name = name_unmangle(owner, name)
        if hasattr(self, "_StoredDescriptor__name") and self.__name != name:
            raise TypeError(
                f"Descriptor named {self.__name!r} cannot be assigned to "
                f"attribute {name!r} of class {owner.__name__!r}."
            )
        use_dict = is_dict_available(owner)
        if use_dict:
            backed_by = name
        else:
            owner_slots = class_slots(owner) or ()
            backed_by = f"_{name}" if name.startswith("_") else f"__{name}"
            if backed_by not in owner_slots:
                raise TypeError(
                    f"Backing attribute {backed_by!r} does not appear in "
                    "the slots of the descriptor owner class: please add it "
                    "to the __slots__, or make __dict__ available on "
                    "instances of the owner class."
                )
        self.__owner = owner
        self.__name = name
        self.__backed_by = name_mangle(owner, backed_by)
        self.__use_dict = use_dict
