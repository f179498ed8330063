#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

import datetime
from pathlib import Path

from csaf_toolkit import csaf
from csaf_toolkit import rustsec

testfiles_location = Path(__file__).parent / "testfiles"


def make_csaf(vulnerabilities=None, product_tree=None, **document_data):
    """Create a minimal Csaf document for test purposes."""
    release_date = datetime.datetime(2021, 7, 21, 10, 0, tzinfo=datetime.UTC)
    default_document_data = {
        "category": "generic_csaf",
        "csaf_version": "2.0",
        "publisher": csaf.Publisher(
            category="other",
            name="OASIS CSAF TC",
            namespace="https://csaf.io",
        ),
        "title": "Template",
        "tracking": csaf.Tracking(
            current_release_date=release_date,
            id="TEMPLATE-0001",
            initial_release_date=release_date,
            revision_history=[
                csaf.Revision(date=release_date, number="1", summary="Initial version."),
            ],
            status="final",
            version="1",
        ),
    }

    return csaf.Csaf(
        document=csaf.Document(**{**default_document_data, **document_data}),
        product_tree=product_tree,
        vulnerabilities=vulnerabilities,
    )


def make_advisory(advisory_id="RUSTSEC-2021-0001", patched=None, unaffected=None, **data):
    """Create a RustSec Advisory for test purposes."""
    default_data = {
        "package": "example-crate",
        "date": datetime.date(2021, 1, 1),
        "title": "Example",
    }
    metadata = rustsec.Metadata(id=advisory_id, **{**default_data, **data})
    versions = rustsec.Versions(patched=patched or [], unaffected=unaffected or [])
    return rustsec.Advisory(metadata=metadata, versions=versions)
