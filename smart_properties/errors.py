"""
    Errors raised when declaring and assigning properties.
"""

# Part of smart-properties
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from collections.abc import Iterable


class PropertyConfigurationError(TypeError):
    """
    Raised at declaration time, when a property is configured with
    unsupported options or with option values of the wrong kind.
    """

    @staticmethod
    def unsupported(options: Iterable[str]) -> PropertyConfigurationError:
        """
        Error listing configuration options which properties do not support.
        """
        return PropertyConfigurationError(
            "Properties do not support the following configuration options: "
            f"{', '.join(options)}."
        )


class PropertyValueError(ValueError):
    """
    Base class for errors raised when a value is assigned to a property.
    """


class RequiredPropertyError(PropertyValueError):
    """
    Raised when :obj:`None` is assigned to a required property.
    """


class ConverterNotFoundError(PropertyValueError):
    """
    Raised when the value assigned to a property does not have the method
    named by the property converter.
    """


class InvalidPropertyValueError(PropertyValueError):
    """
    Raised when the (converted) value assigned to a property is rejected
    by the property accepter.
    """
