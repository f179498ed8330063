#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

"""
Read and write CSAF documents as JSON.

``parse`` and ``serialize`` are the only entry points: the host application
owns the file or network I/O and passes the bytes in and out.

A document survives a round-trip: ``parse(serialize(csaf)) == csaf`` and
``serialize(parse(serialize(csaf))) == serialize(csaf)``.
"""

import re

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from csaf_toolkit import get_bool_settings
from csaf_toolkit import logger
from csaf_toolkit.csaf import Csaf
from csaf_toolkit.csaf.fields import STRICT_ENUMS
from csaf_toolkit.errors import InvalidSyntaxError
from csaf_toolkit.errors import MissingFieldError
from csaf_toolkit.errors import NestingDepthError
from csaf_toolkit.errors import SerializationError
from csaf_toolkit.errors import TypeMismatchError
from csaf_toolkit.errors import UnknownVariantError

DEFAULT_INDENT = 2

# Maps the pydantic error types to the name of the expected JSON type.
EXPECTED_TYPES = {
    "string_type": "string",
    "string_unicode": "string",
    "float_type": "number",
    "float_parsing": "number",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
    "list_type": "array",
    "set_type": "array",
    "iterable_type": "array",
    "dict_type": "object",
    "model_type": "object",
    "model_attributes_type": "object",
    "datetime_type": "date-time",
    "datetime_parsing": "date-time",
    "datetime_from_date_parsing": "date-time",
    "datetime_object_invalid": "date-time",
}

RECURSION_LIMIT_MESSAGE = "recursion limit exceeded"

json_position_regex = re.compile(r"line (?P<line>\d+) column (?P<column>\d+)")


def parse(data, strict=None):
    """
    Return a `Csaf` object decoded from the JSON `data` bytes or string.

    Keys are read by their CSAF name only: unknown keys, including the Python
    names of the camelCase CVSS fields, are ignored. Unknown enumeration
    values are preserved, unless `strict` is True in which case they raise an
    UnknownVariantError.
    When `strict` is not provided, the CSAF_STRICT_ENUMS setting is used.

    Raise a ParseError subclass on errors, no partial document is returned.
    """
    if strict is None:
        strict = get_bool_settings("CSAF_STRICT_ENUMS")

    try:
        return Csaf.model_validate_json(
            data,
            context={STRICT_ENUMS: strict},
            by_alias=True,
            by_name=False,
        )
    except ValidationError as validation_error:
        parse_error = get_parse_error(validation_error)
        logger.debug(f"CSAF document parse error: {parse_error}")
        raise parse_error from validation_error


def serialize(csaf_document, indent=DEFAULT_INDENT):
    """
    Return the `csaf_document` as UTF-8 encoded JSON bytes.
    Absent fields are omitted, never written as null, and the keys follow the
    order of the model fields.
    Raise a SerializationError when the document is nested deeper than the
    JSON encoder accepts.
    """
    # The depth guard of the encoder raises a plain ValueError, the parent class
    # of PydanticSerializationError.
    try:
        json_text = csaf_document.model_dump_json(
            indent=indent,
            exclude_none=True,
            by_alias=True,
        )
    except (PydanticSerializationError, ValueError) as serialization_error:
        raise SerializationError(
            f"Cannot serialize CSAF document: {serialization_error}"
        ) from serialization_error
    return json_text.encode("utf-8")


def get_parse_error(validation_error):
    """Return the ParseError for the first error of a pydantic `validation_error`."""
    error = validation_error.errors(include_url=False)[0]
    error_type = error["type"]
    path = format_path(error["loc"])
    context = error.get("ctx") or {}

    if error_type == "json_invalid":
        message = context.get("error") or error["msg"]
        line, column = get_json_position(message)
        if RECURSION_LIMIT_MESSAGE in message:
            message = f"Input nested too deeply: {message}"
            return NestingDepthError(message, line=line, column=column)
        return InvalidSyntaxError(f"Invalid JSON: {message}", line=line, column=column)

    if error_type == "missing":
        return MissingFieldError(path)

    if error_type == "unknown_variant":
        return UnknownVariantError(path, context.get("value"), context.get("enum_name"))

    expected = EXPECTED_TYPES.get(error_type, error["msg"])
    return TypeMismatchError(path, expected=expected, found=get_json_type(error.get("input")))


def format_path(loc):
    """
    Return a JSONPath-like string from a pydantic error `loc` tuple.

    >>> format_path(("document", "tracking", "revision_history", 0, "date"))
    '$.document.tracking.revision_history[0].date'
    >>> format_path(())
    '$'
    """
    path = "$"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def get_json_position(message):
    """Return a (line, column) tuple extracted from a JSON error `message`."""
    match = json_position_regex.search(message)
    if not match:
        return None, None
    return int(match.group("line")), int(match.group("column"))


def get_json_type(value):
    """
    Return the JSON type name of a decoded JSON `value`.

    >>> get_json_type(1.5), get_json_type(True), get_json_type(None)
    ('number', 'boolean', 'null')
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple, set)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
