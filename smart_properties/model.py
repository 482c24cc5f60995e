"""
    Mixin class for classes with properties: per-class property registries,
    property declarations and a keyword-driven default constructor.
"""

# Part of smart-properties
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from collections.abc import Callable, Mapping
import logging
from threading import RLock
from types import MappingProxyType
from typing import Any, Dict, Optional
from .base import name_mangle
from .builder import build_attributes_for
from .prop import Property

_logger = logging.getLogger(__name__)

_registry_lock = RLock()


class SmartProperties:
    """
    Mixin class for classes with properties.

    Properties are declared by assigning :class:`Property` descriptors in the
    class body, or by calling :meth:`_property` on the class:

    .. code-block ::

        class Person(SmartProperties):
            language_code = Property(
                accepts=["de", "en"],
                converts="lower",
                default="de",
                required=True,
            )

        Person().language_code                     # 'de'
        Person(language_code="EN").language_code   # 'en'
        Person(language_code="fr")                 # InvalidPropertyValueError

    Subclasses inherit all properties of their ancestors, and can override
    them by declaring properties with the same name.
    """

    __slots__ = ()

    @classmethod
    def _registry(cls) -> Dict[str, Property]:
        """
        The mutable property registry for this class, built on first use.
        """
        with _registry_lock:
            registry: Optional[Dict[str, Property]]
            registry = cls.__dict__.get("_SmartProperties__registry")
            if registry is not None:
                return registry
            parent = next(
                (
                    base
                    for base in cls.__mro__[1:]
                    if issubclass(base, SmartProperties)
                    and base is not SmartProperties
                ),
                None,
            )
            registry = dict(parent._registry()) if parent is not None else {}
            for attr in list(cls.__dict__.values()):
                if isinstance(attr, Property) and attr.is_assigned and attr.owner is cls:
                    registry[attr.name] = attr
            setattr(cls, "_SmartProperties__registry", registry)
            _logger.debug(
                "Built property registry for %s: %s",
                cls.__qualname__,
                ", ".join(registry) or "(empty)",
            )
            return registry

    @classmethod
    def properties(cls) -> Mapping[str, Property]:
        """
        Read-only mapping of property names to properties for this class,
        including the properties inherited from its ancestors.

        The mapping starts from the properties of the nearest ancestor which
        is itself a :class:`SmartProperties` subclass (properties are shared,
        not copied), followed by the properties declared in the class body,
        and it is updated by subsequent calls to :meth:`_property`.
        """
        return MappingProxyType(cls._registry())

    @classmethod
    def _property(cls, name: str, /, **options: Any) -> Property:
        """
        Declares a property with the given name and options on this class,
        replacing any property with the same name in its registry.
        See :class:`Property` for the supported options.

        Intended for use by the class itself and its subclasses, e.g. in
        ``__init_subclass__`` or right after the class definition.

        :raises PropertyConfigurationError: if the options are invalid
        """
        prop = Property(name, **options)
        prop.define(cls)
        cls._registry()[prop.name] = prop
        _logger.debug("Declared property %r on %s", prop, cls.__qualname__)
        return prop

    def __init__(
        self,
        attrs: Optional[Mapping[str, Any]] = None,
        configure: Optional[Callable[[Any], None]] = None,
        /,
        **kwargs: Any,
    ) -> None:
        """
        Initialises all properties of the instance, in registry order.
        Each property is given the value explicitly supplied for it, if any,
        and its default value otherwise.

        Values can be supplied in the ``attrs`` mapping, as keyword arguments
        (which take precedence over ``attrs``), or by assigning them on the
        attribute builder passed to the optional ``configure`` function
        (builder values take precedence over ``attrs`` and keyword arguments;
        builder fields which are not assigned are ignored).

        :raises TypeError: if values are supplied for unknown properties
        :raises PropertyValueError: if a value is rejected by its property

        :meta public:
        """
        cls = type(self)
        values: Dict[str, Any] = {**attrs} if attrs is not None else {}
        values.update(kwargs)
        if configure is not None:
            values = {**values, **build_attributes_for(cls, configure)}
        registry = cls._registry()
        unknown = [name for name in values if name not in registry]
        if unknown:
            raise TypeError(
                f"{cls.__name__} has no properties named: {', '.join(unknown)}."
            )
        for name, prop in registry.items():
            value = values.pop(name) if name in values else prop.default(self)
            setattr(self, name_mangle(prop.owner, name), value)
