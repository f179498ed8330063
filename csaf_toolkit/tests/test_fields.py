#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from unittest import TestCase

from pydantic import ValidationError

from csaf_toolkit import csaf
from csaf_toolkit.csaf.fields import STRICT_ENUMS
from csaf_toolkit.csaf.fields import format_timestamp
from csaf_toolkit.csaf.fields import sort_ids


class OpenEnumTestCase(TestCase):
    def test_open_enum_known_value(self):
        category = csaf.PublisherCategory("vendor")
        self.assertIs(csaf.PublisherCategory.vendor, category)
        self.assertTrue(category.is_known)
        self.assertEqual("vendor", category)

    def test_open_enum_unrecognized_value_preserves_text(self):
        category = csaf.PublisherCategory("reseller")
        self.assertFalse(category.is_known)
        self.assertEqual("reseller", category.value)
        self.assertEqual("reseller", str(category))
        self.assertIsInstance(category, csaf.PublisherCategory)
        self.assertNotIn("reseller", csaf.PublisherCategory.__members__)

    def test_open_enum_unrecognized_value_is_case_sensitive(self):
        self.assertFalse(csaf.PublisherCategory("Vendor").is_known)
        self.assertFalse(csaf.TlpLabel("white").is_known)
        self.assertTrue(csaf.TlpLabel("WHITE").is_known)

    def test_open_enum_unrecognized_values_compare_by_text(self):
        self.assertEqual(csaf.PublisherCategory("reseller"), csaf.PublisherCategory("reseller"))
        self.assertNotEqual(csaf.PublisherCategory("reseller"), csaf.PublisherCategory("vendor"))

    def test_open_enum_validate_in_model(self):
        publisher = csaf.Publisher(category="reseller", name="Name", namespace="https://x.org")
        self.assertEqual("reseller", publisher.category)
        self.assertFalse(publisher.category.is_known)

        data = {"category": "reseller", "name": "Name", "namespace": "https://x.org"}
        with self.assertRaises(ValidationError) as context:
            csaf.Publisher.model_validate(data, context={STRICT_ENUMS: True})
        error = context.exception.errors()[0]
        self.assertEqual("unknown_variant", error["type"])
        self.assertEqual(("category",), error["loc"])
        self.assertEqual("PublisherCategory", error["ctx"]["enum_name"])

    def test_open_enum_validate_rejects_non_string(self):
        data = {"category": 1, "name": "Name", "namespace": "https://x.org"}
        with self.assertRaises(ValidationError) as context:
            csaf.Publisher.model_validate(data)
        self.assertEqual("string_type", context.exception.errors()[0]["type"])

    def test_open_enum_serialization(self):
        publisher = csaf.Publisher(category="reseller", name="Name", namespace="https://x.org")
        expected = {"category": "reseller", "name": "Name", "namespace": "https://x.org"}
        self.assertEqual(expected, publisher.model_dump(mode="json", exclude_none=True))


class TimestampTestCase(TestCase):
    def test_format_timestamp_utc(self):
        value = datetime(2021, 7, 21, 10, 0, tzinfo=UTC)
        self.assertEqual("2021-07-21T10:00:00Z", format_timestamp(value))

    def test_format_timestamp_fractional_seconds(self):
        value = datetime(2021, 7, 21, 10, 0, 0, 500000, tzinfo=UTC)
        self.assertEqual("2021-07-21T10:00:00.500000Z", format_timestamp(value))

    def test_format_timestamp_offset(self):
        value = datetime(2021, 7, 21, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual("2021-07-21T12:00:00+02:00", format_timestamp(value))

    def test_timestamp_zero_fraction_is_canonicalized(self):
        revision = csaf.Revision.model_validate_json(
            '{"date": "2021-07-21T10:00:00.000Z", "number": "1", "summary": "Initial"}'
        )
        self.assertEqual(datetime(2021, 7, 21, 10, 0, tzinfo=UTC), revision.date)
        self.assertEqual(
            '{"date":"2021-07-21T10:00:00Z","number":"1","summary":"Initial"}',
            revision.model_dump_json(exclude_none=True),
        )


class ProductIdSetTestCase(TestCase):
    def test_sort_ids(self):
        self.assertEqual(["a", "b", "c"], sort_ids({"c", "a", "b"}))

    def test_product_id_set_deduplicates_and_sorts(self):
        product_status = csaf.ProductStatus(fixed=["P2", "P1", "P2"])
        self.assertEqual({"P1", "P2"}, product_status.fixed)
        self.assertEqual('{"fixed":["P1","P2"]}', product_status.model_dump_json(exclude_none=True))

    def test_product_id_set_order_does_not_matter(self):
        self.assertEqual(
            csaf.ProductStatus(known_affected=["B", "A"]),
            csaf.ProductStatus(known_affected=["A", "B"]),
        )
