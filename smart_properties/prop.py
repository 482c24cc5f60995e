"""
    Descriptor class for properties with validation, conversion, defaults
    and required values.
"""

# Part of smart-properties
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from collections.abc import Collection
from inspect import signature
import re
from typing import (
    Any,
    Literal,
    Optional,
    Protocol,
    Type,
    TypeVar,
    Union,
    final,
    get_origin,
    overload,
)
from typing_extensions import Self
from typing_validation import can_validate, is_valid
from .base import StoredDescriptor, name_mangle
from .errors import (
    ConverterNotFoundError,
    InvalidPropertyValueError,
    PropertyConfigurationError,
    RequiredPropertyError,
)


T_co = TypeVar("T_co", covariant=True)
""" Covariant type variable for generic values. """

T_contra = TypeVar("T_contra", contravariant=True)
""" Contravariant type variable for generic values. """

OPTIONS = frozenset({"default", "converts", "accepts", "required"})
""" The configuration options supported by :class:`Property`. """

AccepterKind = Literal[
    "annotation", "pattern", "type", "collection", "predicate", "value"
]
""" The ways in which an accepter can be used to validate values. """


class SupportsBool(Protocol):
    """
    Structural types for things which can be converted to :obj:`bool`.
    """

    def __bool__(self) -> bool: ...


class ConverterFunction(Protocol):
    """
    Structural type for the converter function of a :class:`Property`.
    """

    def __call__(self, instance: Any, value: Any, /) -> Any:
        """
        Converts the given value for assignment to a :class:`Property`,
        in the context of the given instance.
        """
        ...


class AccepterFunction(Protocol[T_contra]):
    """
    Structural type for the accepter (predicate) function of a
    :class:`Property`.
    """

    def __call__(
        self, instance: Any, value: T_contra, /
    ) -> Union[SupportsBool, None]:
        """
        Decides whether the given value is accepted by a :class:`Property`,
        in the context of the given instance.

        Called passing the current ``instance`` and the ``value`` that is
        to be assigned, after conversion.
        Accepter functions can use ``instance`` to perform validation
        involving other properties of the same instance.

        There are two ways in which an accepter function can reject a value:

        - By returning a falsy value.
        - By raising :obj:`ValueError`: an :obj:`InvalidPropertyValueError`
          is raised from it (preserving the original error information).

        """
        ...


class DefaultFunction(Protocol[T_co]):
    """
    Structural type for the default function of a :class:`Property`.
    """

    def __call__(self, instance: Any, /) -> T_co:
        """
        Computes the default value for a :class:`Property`,
        in the context of the given instance.
        """
        ...


def validate_scoped_fun(fun: Any, num_args: int, role: str, /) -> None:
    """
    Runtime validation for converter, accepter and default functions,
    which take the instance as their first argument.

    Callables without an introspectable signature are accepted as-is.

    :raises PropertyConfigurationError: if the argument is not callable, or
                                        if it doesn't take ``num_args``
                                        positional arguments.
    """
    if not callable(fun):
        raise PropertyConfigurationError(f"{role} must be callable.")
    try:
        params = signature(fun).parameters
    except (TypeError, ValueError):
        return
    if len(params) != num_args:
        raise PropertyConfigurationError(
            f"{role} must take exactly {num_args} "
            f"argument{'s' if num_args != 1 else ''}, got {fun!r}."
        )


def is_default_fun(default: Any) -> bool:
    """
    Whether the given default is a function to be called on each instance,
    rather than a value. Classes are always treated as values.
    """
    return callable(default) and not isinstance(default, type)


def accepter_kind(accepter: Any) -> AccepterKind:
    """
    Determines how the given accepter is used to validate values:

    - ``"annotation"``: a typing annotation, such as ``List[int]``,
      ``Optional[str]`` or ``int | str``, checked by :func:`is_valid`
    - ``"pattern"``: a compiled regular expression, searched in the value
    - ``"type"``: a class, checked by :func:`isinstance`
    - ``"collection"``: a collection of admissible values (strings excluded)
    - ``"predicate"``: an :class:`AccepterFunction`
    - ``"value"``: any other object, compared to the value by equality

    :raises PropertyConfigurationError: if the accepter is a typing annotation
                                        which cannot be validated at runtime
    """
    if accepter is Any or (
        not isinstance(accepter, type) and get_origin(accepter) is not None
    ):
        if not can_validate(accepter):
            raise PropertyConfigurationError(
                f"Cannot validate type {accepter!r}."
            )
        return "annotation"
    if isinstance(accepter, re.Pattern):
        return "pattern"
    if isinstance(accepter, type):
        return "type"
    if isinstance(accepter, Collection) and not isinstance(
        accepter, (str, bytes, bytearray)
    ):
        return "collection"
    if callable(accepter):
        validate_scoped_fun(accepter, 2, "Accepter function")
        return "predicate"
    return "value"


class Property(StoredDescriptor):
    """
    A descriptor class for properties, supporting:

    - optional conversion of values assigned to the property
    - optional runtime validation of values assigned to the property
    - optional default values, fixed or computed per instance
    - optional required values (:obj:`None` is rejected)

    Properties are usually declared in the body of a
    :class:`~smart_properties.model.SmartProperties` subclass, which takes
    care of defaults at construction time:

    .. code-block ::

        class Person(SmartProperties):
            language_code = Property(
                accepts=["de", "en"],
                converts="lower",
                default="de",
                required=True,
            )

    See :class:`~smart_properties.base.StoredDescriptor` for details on how
    the property value is stored in each instance.
    """

    __default: Any
    __converter: Union[str, ConverterFunction, None]
    __accepter: Any
    __accepter_kind: AccepterKind
    __required: bool

    def __init__(self, name: Optional[str] = None, /, **options: Any) -> None:
        """
        Creates a new property with the given options:

        :param name: the name of the property, or :obj:`None` to take the
                     name of the class attribute it is assigned to
        :param default: the default value, or a :class:`DefaultFunction`
                        computing it for a given instance
        :param converts: the name of a method to call on assigned values,
                         or a :class:`ConverterFunction`
        :param accepts: a collection of admissible values, a class, a typing
                        annotation, a regular expression or an
                        :class:`AccepterFunction`
        :param required: whether :obj:`None` is rejected

        :raises PropertyConfigurationError: if unsupported options are given
        :raises PropertyConfigurationError: if option values are invalid

        :meta public:
        """
        unsupported = [key for key in options if key not in OPTIONS]
        if unsupported:
            raise PropertyConfigurationError.unsupported(unsupported)
        if name is not None and not (
            isinstance(name, str) and name.isidentifier()
        ):
            raise PropertyConfigurationError(
                f"Property name must be an identifier, got {name!r}."
            )
        super().__init__(name)
        default = options.get("default")
        if is_default_fun(default):
            validate_scoped_fun(default, 1, "Default function")
        converter = options.get("converts")
        if converter is not None and not isinstance(converter, str):
            validate_scoped_fun(converter, 2, "Converter function")
        accepter = options.get("accepts")
        self.__default = default
        self.__converter = converter
        self.__accepter = accepter
        self.__accepter_kind = accepter_kind(accepter)
        self.__required = bool(options.get("required", False))

    @final
    @property
    def converter(self) -> Union[str, ConverterFunction, None]:
        """
        The converter for the property, or :obj:`None` if values are stored
        without conversion.
        """
        return self.__converter

    @final
    @property
    def accepter(self) -> Any:
        """
        The accepter for the property, or :obj:`None` if all values are
        accepted. See :func:`accepter_kind` for the supported accepters.
        """
        return self.__accepter

    @property
    def required(self) -> bool:
        """
        Whether the property is required, i.e. whether :obj:`None` is rejected.
        Can be changed after construction, e.g. by a subclass of the owner.
        """
        return self.__required

    @required.setter
    def required(self, value: bool) -> None:
        self.__required = bool(value)

    def convert(self, value: Any, instance: Any) -> Any:
        """
        Converts the given value, in the context of the given instance:

        - if no converter was specified, the value is returned unchanged
        - if the converter is a function, it is called on instance and value
        - if the converter is a string, the method of that name is called on
          the value, without arguments

        :raises ConverterNotFoundError: if the value has no method named by
                                        the converter
        """
        converter = self.__converter
        if converter is None:
            return value
        if not isinstance(converter, str):
            return converter(instance, value)
        method = getattr(value, converter, None)
        if method is None or not callable(method):
            raise ConverterNotFoundError(
                f"{type(value).__name__!r} object has no method {converter!r}."
            )
        return method()

    def default(self, instance: Any) -> Any:
        """
        The default value of the property for the given instance.
        Default functions are called anew on each invocation, while default
        values are returned as they are (they are not copied).
        """
        default = self.__default
        if is_default_fun(default):
            return default(instance)
        return default

    def accepts(self, value: Any, instance: Any) -> bool:
        """
        Whether the property accepts the given value, in the context of the
        given instance. The value :obj:`None` is always accepted, as are all
        values if no accepter was specified. Other falsy values, including
        :obj:`False`, are validated like any other value.

        :raises ValueError: if an accepter function raises it
        """
        accepter = self.__accepter
        if value is None or accepter is None:
            return True
        kind = self.__accepter_kind
        if kind == "annotation":
            return is_valid(value, accepter)
        if kind == "pattern":
            try:
                return accepter.search(value) is not None
            except TypeError:
                return False
        if kind == "type":
            return isinstance(value, accepter)
        if kind == "collection":
            try:
                return value in accepter
            except TypeError:
                # unhashable values
                return False
        if kind == "predicate":
            return bool(accepter(instance, value))
        return bool(accepter == value)

    def prepare(self, value: Any, instance: Any) -> Any:
        """
        Prepares the given value for assignment to the property on the given
        instance, returning the value to be stored:

        1. If the property is required, :obj:`None` is rejected.
        2. Values other than :obj:`None` are converted, see :meth:`convert`.
        3. The (converted) value is validated, see :meth:`accepts`.

        :raises RequiredPropertyError: if the property is required and the
                                       value is :obj:`None`
        :raises ConverterNotFoundError: see :meth:`convert`
        :raises InvalidPropertyValueError: if the value is not accepted
        """
        owner_name = type(instance).__name__
        if value is None:
            if self.required:
                raise RequiredPropertyError(
                    f"{owner_name} requires the property {self.name!r} to be set."
                )
        else:
            value = self.convert(value, instance)
        error: Optional[ValueError] = None
        try:
            accepted = self.accepts(value, instance)
        except ValueError as e:
            accepted, error = False, e
        if not accepted:
            raise InvalidPropertyValueError(
                f"{owner_name} does not accept {value!r} "
                f"as value for the property {self.name!r}."
            ) from error
        return value

    def define(self, owner: Type[Any]) -> None:
        """
        Installs the property on the given class, as the class attribute
        with the property's name (name-mangled, if private).

        :raises AttributeError: if the property has no name
        :raises TypeError: if the property is already assigned to a class
        """
        attr_name = name_mangle(owner, self.name)
        if self.is_assigned:
            raise TypeError(
                "Cannot set owner/name for the same descriptor twice."
            )
        self.__set_name__(owner, attr_name)
        setattr(owner, attr_name, self)

    @overload
    def __get__(self, instance: None, _: Type[Any]) -> Self: ...

    @overload
    def __get__(self, instance: Any, _: Type[Any]) -> Any: ...

    @final
    def __get__(self, instance: Any, _: Type[Any]) -> Any:
        """
        If the descriptor is accessed on an instance, returns the value of
        the property on the given instance.

        If the descriptor is accessed on the owner class, i.e. if
        ``instance`` is :obj:`None`, returns the :class:`Property` object.

        :raises AttributeError: if the property is not set on the instance.

        :meta public:
        """
        if instance is None:
            return self
        try:
            return self._get_on(instance)
        except AttributeError:
            raise AttributeError(f"Property {self} is not set.") from None

    @final
    def __set__(self, instance: Any, value: Any) -> None:
        """
        Sets the value of the property on the given instance, after
        preparing it with :meth:`prepare`.

        :meta public:
        """
        self._set_on(instance, self.prepare(value, instance))

    def __str__(self) -> str:
        """
        Representation of this property, inclusive of the following info:

        - the :attr:`owner` name, if assigned
        - the property :attr:`name`

        An example:

        .. code-block ::

            Person.language_code
        """
        if not self.is_assigned:
            return self.name
        return f"{self.owner.__name__}.{self.name}"

    def __repr__(self) -> str:
        """
        Representation of this property, inclusive of the following info:

        - the :attr:`owner` name, if assigned
        - the property :attr:`name`
        - optional ``required`` qualifier

        Two examples:

        .. code-block ::

            <Property Person.nickname>
            <required Property Person.language_code>

        """
        qualifier = "required " if self.required else ""
        try:
            label = str(self)
        except AttributeError:
            label = "(unnamed)"
        return f"<{qualifier}Property {label}>"
