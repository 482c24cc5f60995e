"""
    Properties with validation, conversion, default values and required
    values, for classes which declare them.
"""

# smart-properties: Properties with validation, conversion and defaults.
# Copyright (C) 2023 Hashberg Ltd

from __future__ import annotations
from .errors import (
    ConverterNotFoundError,
    InvalidPropertyValueError,
    PropertyConfigurationError,
    PropertyValueError,
    RequiredPropertyError,
)
from .prop import Property
from .builder import AttributeBuilder, attribute_builder_for, build_attributes_for
from .model import SmartProperties

__version__ = "1.1.0"

__all__ = (
    "Property",
    "SmartProperties",
    "AttributeBuilder",
    "attribute_builder_for",
    "build_attributes_for",
    "PropertyConfigurationError",
    "PropertyValueError",
    "RequiredPropertyError",
    "ConverterNotFoundError",
    "InvalidPropertyValueError",
)
