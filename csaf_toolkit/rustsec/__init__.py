#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

"""
RustSec advisory model.

RustSec advisories are Markdown files starting with a block of TOML
identified as the text inside a triple-backtick TOML block, followed by the
advisory title as a level 1 heading and the description. Per
https://github.com/rustsec/advisory-db#advisory-format:
    Advisories are formatted in Markdown with TOML "front matter".

Older advisories are plain TOML files where the title and description are
keys of the [advisory] table. Both forms are accepted by `loads`.
"""

import datetime
from typing import Annotated
from typing import Dict
from typing import List
from typing import Union

import msgspec
from msgspec import UNSET
from msgspec import Meta
from msgspec import Struct
from msgspec import UnsetType
from msgspec import field

from csaf_toolkit.errors import InvalidAdvisoryError

ADVISORY_URL_TEMPLATE = "https://rustsec.org/advisories/{}.html"


class Metadata(Struct, kw_only=True, omit_defaults=True):
    id: Annotated[
        str,
        Meta(description="Identifier of the advisory.", examples=["RUSTSEC-2021-0001"]),
    ]
    package: Union[
        Annotated[str, Meta(description="Name of the affected crate.")],
        UnsetType,
    ] = UNSET
    date: Annotated[
        datetime.date,
        Meta(description="Date the advisory was disclosed."),
    ]
    title: Union[str, UnsetType] = UNSET
    description: Union[str, UnsetType] = UNSET
    url: Union[
        Annotated[str, Meta(description="URL of the original report.")],
        UnsetType,
    ] = UNSET
    references: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    aliases: Annotated[
        List[str],
        Meta(description="Other identifiers of the vulnerability, such as CVE ids."),
    ] = field(default_factory=list)
    related: Annotated[
        List[str],
        Meta(description="Identifiers of related, but distinct, vulnerabilities."),
    ] = field(default_factory=list)
    cvss: Union[
        Annotated[str, Meta(description="CVSS v3 vector string.")],
        UnsetType,
    ] = UNSET
    informational: Union[
        Annotated[
            str,
            Meta(
                description="Kind of informational advisory.",
                examples=["notice", "unmaintained", "unsound"],
            ),
        ],
        UnsetType,
    ] = UNSET
    withdrawn: Union[
        Annotated[datetime.date, Meta(description="Date the advisory was withdrawn.")],
        UnsetType,
    ] = UNSET
    license: Union[str, UnsetType] = UNSET


class Affected(Struct, kw_only=True, omit_defaults=True):
    arch: List[str] = field(default_factory=list)
    os: List[str] = field(default_factory=list)
    functions: Annotated[
        Dict[str, List[str]],
        Meta(description="Mapping of affected function paths to version requirements."),
    ] = field(default_factory=dict)


class Versions(Struct, kw_only=True, omit_defaults=True):
    patched: Annotated[
        List[str],
        Meta(description="Version requirements of the versions with a fix."),
    ] = field(default_factory=list)
    unaffected: Annotated[
        List[str],
        Meta(description="Version requirements of the versions never affected."),
    ] = field(default_factory=list)


class Advisory(Struct, kw_only=True, omit_defaults=True):
    metadata: Metadata = field(name="advisory")
    affected: Union[Affected, UnsetType] = UNSET
    versions: Versions = field(default_factory=Versions)

    @property
    def url(self):
        """Return the URL of this advisory on rustsec.org."""
        return ADVISORY_URL_TEMPLATE.format(self.metadata.id)


def split_front_matter(text):
    """
    Return a tuple of (TOML text, Markdown text) from a RustSec advisory
    `text`. The whole `text` is returned as TOML when there is no
    triple-backtick TOML block.

    For example::

    >>> text = '''```toml
    ... [advisory]
    ... id = "RUST-001"
    ... ```
    ... # Use-after-free
    ... '''
    >>> split_front_matter(text)
    ('[advisory]\\nid = "RUST-001"', '# Use-after-free')
    """
    lines = text.strip().splitlines()
    if not lines or not lines[0].strip().startswith("```toml"):
        return text, ""

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == "```":
            toml_text = "\n".join(lines[1:index])
            markdown_text = "\n".join(lines[index + 1 :]).strip()
            return toml_text, markdown_text

    raise InvalidAdvisoryError("Unterminated TOML front matter block.")


def get_title_and_description(markdown_text):
    """
    Return a tuple of (title, description) from the Markdown body of an
    advisory. The title is the leading level 1 heading, if any.

    >>> get_title_and_description("# Title\\n\\nSome details.")
    ('Title', 'Some details.')
    """
    lines = markdown_text.strip().splitlines()
    if lines and lines[0].startswith("# "):
        title = lines[0][2:].strip()
        description = "\n".join(lines[1:]).strip()
        return title, description
    return "", markdown_text.strip()


def loads(text):
    """
    Return an Advisory decoded from a RustSec advisory `text`, either a
    Markdown document with TOML front matter or a plain TOML document.
    The title and description found in the Markdown body take precedence over
    the ones in the TOML metadata.
    Raise an InvalidAdvisoryError on errors, including an advisory without a
    title in either place.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")

    toml_text, markdown_text = split_front_matter(text)
    try:
        # Dates are quoted strings in most advisories, and TOML dates in others.
        data = msgspec.toml.decode(toml_text)
        advisory = msgspec.convert(data, type=Advisory)
    except msgspec.MsgspecError as error:
        raise InvalidAdvisoryError(f"Invalid RustSec advisory: {error}") from error

    if markdown_text:
        title, description = get_title_and_description(markdown_text)
        if title:
            advisory.metadata.title = title
        if description:
            advisory.metadata.description = description

    if not advisory.metadata.title:
        raise InvalidAdvisoryError(f"Advisory {advisory.metadata.id} has no title.")

    return advisory
