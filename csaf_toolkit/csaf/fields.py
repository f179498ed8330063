#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

"""
Value types shared by the CSAF document model.

Open enumerations
-----------------

CSAF enumerations are modeled as ``OpenEnum`` classes. A value that is not
one of the declared members does not fail validation: it is kept as an
"unrecognized" pseudo-member holding the exact original text so that a
document written against a newer revision of the schema survives a
parse/serialize round-trip unchanged::

    >>> from csaf_toolkit.csaf import PublisherCategory
    >>> PublisherCategory("vendor").is_known
    True
    >>> unknown = PublisherCategory("reseller")
    >>> unknown.is_known, str(unknown)
    (False, 'reseller')

Validation is strict when the ``strict_enums`` key of the pydantic
validation context is set.
"""

from datetime import datetime
from datetime import timedelta
from enum import StrEnum
from typing import Annotated
from typing import List
from typing import Set

from pydantic import PlainSerializer
from pydantic import Strict
from pydantic_core import PydanticCustomError
from pydantic_core import core_schema

from csaf_toolkit import logger

STRICT_ENUMS = "strict_enums"


def get_text(value):
    return str(value)


class OpenEnum(StrEnum):
    """A string enumeration that preserves values outside of its members."""

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None

        unrecognized = str.__new__(cls, value)
        unrecognized._name_ = "unrecognized"
        unrecognized._value_ = value
        return unrecognized

    @property
    def is_known(self):
        return self._value2member_map_.get(self._value_) is self

    @classmethod
    def validate(cls, value, info=None):
        if isinstance(value, cls):
            member = value
        elif isinstance(value, str):
            member = cls(value)
        else:
            raise PydanticCustomError("string_type", "Input should be a valid string")

        if member.is_known:
            return member

        context = info.context if info else None
        if context and context.get(STRICT_ENUMS):
            raise PydanticCustomError(
                "unknown_variant",
                "'{value}' is not a known {enum_name} value",
                {"enum_name": cls.__name__, "value": member.value},
            )

        logger.debug(f"Unrecognized {cls.__name__} value: {member.value!r}")
        return member

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return core_schema.with_info_plain_validator_function(
            cls.validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                get_text,
                return_schema=core_schema.str_schema(),
            ),
        )


def format_timestamp(value):
    """
    Return the canonical text of a `value` datetime: ISO 8601 with a "Z"
    suffix for UTC, with fractional seconds only when they are not zero.
    """
    text = value.isoformat()
    if value.utcoffset() == timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def sort_ids(ids):
    return sorted(ids)


# Strict: a JSON number is not a date-time, only ISO 8601 strings are accepted.
Timestamp = Annotated[
    datetime,
    Strict(),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]

# Strict: a JSON string is not a score. JSON integers are still accepted.
ScoreValue = Annotated[float, Strict()]

# Product ids are opaque references; a status category holds each one once.
ProductIdSet = Annotated[
    Set[str],
    PlainSerializer(sort_ids, return_type=List[str]),
]
