#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#


class CsafToolkitError(Exception):
    """Base class for all the errors raised by the toolkit."""


class ParseError(CsafToolkitError):
    """The input could not be decoded into a document."""


class InvalidSyntaxError(ParseError):
    """The input is not well-formed JSON."""

    def __init__(self, message, line=None, column=None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class MissingFieldError(ParseError):
    """A mandatory field is absent."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing mandatory field: {path}")


class TypeMismatchError(ParseError):
    """A field value is not of the expected JSON type."""

    def __init__(self, path, expected, found):
        self.path = path
        self.expected = expected
        self.found = found
        super().__init__(f"Invalid type at {path}: expected {expected}, found {found}")


class UnknownVariantError(ParseError):
    """An enumerated field holds a value outside of its known set (strict mode only)."""

    def __init__(self, path, value, enum_name=None):
        self.path = path
        self.value = value
        self.enum_name = enum_name
        super().__init__(f'Unknown {enum_name or "enumeration"} value at {path}: "{value}"')


class NestingDepthError(ParseError):
    """The input is nested deeper than the JSON parser accepts."""

    def __init__(self, message, line=None, column=None):
        self.line = line
        self.column = column
        super().__init__(message)


class InvalidAdvisoryError(ParseError):
    """The RustSec advisory text could not be decoded."""


class SerializationError(CsafToolkitError):
    """The document could not be encoded as JSON."""


class InteropError(CsafToolkitError):
    """A document cannot be converted to or from a RustSec advisory."""


class MultipleVulnerabilitiesError(InteropError):
    """The document does not hold exactly one vulnerability."""

    def __init__(self, count):
        self.count = count
        super().__init__(f"Expected exactly one vulnerability, found {count}.")


class MissingRequiredFieldError(InteropError):
    """A field mandatory in the RustSec format cannot be recovered."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Cannot recover mandatory advisory field: {name}")
