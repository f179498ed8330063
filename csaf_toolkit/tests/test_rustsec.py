#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

import datetime
from unittest import TestCase

from msgspec import UNSET

from csaf_toolkit import rustsec
from csaf_toolkit.errors import InvalidAdvisoryError
from csaf_toolkit.tests import testfiles_location


class RustSecTestCase(TestCase):
    data = testfiles_location / "rustsec"

    def test_rustsec_loads_markdown_advisory(self):
        advisory = rustsec.loads((self.data / "RUSTSEC-2021-0001.md").read_text())
        metadata = advisory.metadata

        self.assertEqual("RUSTSEC-2021-0001", metadata.id)
        self.assertEqual("example-crate", metadata.package)
        self.assertEqual(datetime.date(2021, 1, 1), metadata.date)
        self.assertEqual("Example", metadata.title)
        expected_description = (
            "The `parse` function frees its input buffer twice\nwhen the input is empty."
        )
        self.assertEqual(expected_description, metadata.description)
        self.assertEqual("https://github.com/example/example-crate/issues/1", metadata.url)
        self.assertEqual(["CVE-2021-0001", "GHSA-xxxx-yyyy-zzzz"], metadata.aliases)
        self.assertEqual(["RUSTSEC-2020-0100"], metadata.related)
        self.assertEqual(["memory-corruption"], metadata.categories)
        self.assertEqual("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H", metadata.cvss)
        self.assertIs(UNSET, metadata.withdrawn)
        self.assertIs(UNSET, metadata.informational)

        self.assertEqual([">= 1.2.0"], advisory.versions.patched)
        self.assertEqual(["< 0.5.0"], advisory.versions.unaffected)
        self.assertEqual({"example_crate::parse": ["< 1.2.0"]}, advisory.affected.functions)
        self.assertEqual("https://rustsec.org/advisories/RUSTSEC-2021-0001.html", advisory.url)

    def test_rustsec_loads_toml_advisory(self):
        advisory = rustsec.loads((self.data / "RUSTSEC-2020-0002.toml").read_bytes())
        metadata = advisory.metadata

        self.assertEqual("Unmaintained crate", metadata.title)
        self.assertEqual("The old-crate crate is no longer maintained.", metadata.description)
        self.assertEqual("unmaintained", metadata.informational)
        self.assertEqual(datetime.date(2020, 6, 30), metadata.withdrawn)
        self.assertEqual([], advisory.versions.patched)
        self.assertEqual([], advisory.versions.unaffected)
        self.assertIs(UNSET, advisory.affected)

    def test_rustsec_loads_without_versions(self):
        text = '[advisory]\nid = "RUSTSEC-2022-0001"\ndate = "2022-01-01"\ntitle = "Example"\n'
        advisory = rustsec.loads(text)
        self.assertEqual(rustsec.Versions(), advisory.versions)
        self.assertIs(UNSET, advisory.metadata.package)

    def test_rustsec_loads_invalid_advisory(self):
        with self.assertRaises(InvalidAdvisoryError):
            rustsec.loads("[advisory\nid =")

        # Missing mandatory date
        with self.assertRaises(InvalidAdvisoryError):
            rustsec.loads('[advisory]\nid = "RUSTSEC-2022-0001"\n')

        with self.assertRaises(InvalidAdvisoryError):
            rustsec.loads("```toml\n[advisory]\n")

    def test_rustsec_loads_requires_title(self):
        text = '[advisory]\nid = "RUSTSEC-2022-0001"\ndate = "2022-01-01"\n'
        with self.assertRaisesRegex(InvalidAdvisoryError, "RUSTSEC-2022-0001 has no title"):
            rustsec.loads(text)

        # An empty heading does not count as a title
        markdown = f"```toml\n{text}```\n\n# \n\nDetails.\n"
        with self.assertRaises(InvalidAdvisoryError):
            rustsec.loads(markdown)

        # The Markdown heading supplies a title missing from the metadata
        advisory = rustsec.loads(f"```toml\n{text}```\n\n# Heading\n")
        self.assertEqual("Heading", advisory.metadata.title)

    def test_rustsec_split_front_matter(self):
        text = '```toml\n[advisory]\nid = "X"\n```\n\n# Title\n\nBody\n'
        expected = ('[advisory]\nid = "X"', "# Title\n\nBody")
        self.assertEqual(expected, rustsec.split_front_matter(text))

        toml_text = '[advisory]\nid = "X"\n'
        self.assertEqual((toml_text, ""), rustsec.split_front_matter(toml_text))

    def test_rustsec_get_title_and_description(self):
        self.assertEqual(("Title", ""), rustsec.get_title_and_description("# Title"))
        self.assertEqual(("", "No heading."), rustsec.get_title_and_description("No heading.\n"))
