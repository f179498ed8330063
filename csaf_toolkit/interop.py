#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

"""
Conversion between RustSec advisories and CSAF documents.

``from_minimal_advisory`` builds a complete CSAF document from a RustSec
advisory, synthesizing the structure the RustSec format does not carry:
tracking data, publisher, product tree and product ids.

``to_minimal_advisory`` is a projection, not an inverse. Only the fields of
the RustSec format are recovered; the synthesized structure (product ids,
publisher, rustsec.org reference) is dropped, as are the CSAF fields with no
RustSec counterpart. The advisory id, title and date are always recovered
from a document built by ``from_minimal_advisory``.
"""

from dataclasses import dataclass
from datetime import UTC
from datetime import datetime
from datetime import time

from cvss import CVSS3
from cvss.exceptions import CVSS3Error
from msgspec import UNSET
from packageurl import PackageURL

from csaf_toolkit import csaf
from csaf_toolkit import get_settings
from csaf_toolkit import logger
from csaf_toolkit import rustsec
from csaf_toolkit.errors import MissingRequiredFieldError
from csaf_toolkit.errors import MultipleVulnerabilitiesError

CSAF_VERSION = "2.0"
RUSTSEC_SYSTEM_NAME = "RustSec"
CARGO_PURL_TYPE = "cargo"
PRODUCT_ID_TEMPLATE = "CSAFPID-{:04d}"
ANY_VERSION = "*"

INITIAL_REVISION_SUMMARY = "Initial version"
ADVISORY_URL_SUMMARY = "Original advisory"
REFERENCE_SUMMARY = "Additional reference"
INFORMATIONAL_NOTE_TITLE = "Informational advisory"

ALIAS_PREFIX_TO_CSAF_SYSTEM_NAME = {
    "CVE": "Common Vulnerabilities and Exposures",
    "GHSA": "GitHub Security Advisory",
    "PYSEC": "Python Packaging Advisory",
    "RUSTSEC": RUSTSEC_SYSTEM_NAME,
    "USN": "Ubuntu Security Notice",
}

CVSS_V3_IMPACTS = {"H": "HIGH", "L": "LOW", "N": "NONE"}

# Maps the CVSS v3 base metrics abbreviations to the CvssV3 field and values.
CVSS_V3_BASE_METRICS = {
    "AV": (
        "attack_vector",
        {"N": "NETWORK", "A": "ADJACENT_NETWORK", "L": "LOCAL", "P": "PHYSICAL"},
    ),
    "AC": ("attack_complexity", {"L": "LOW", "H": "HIGH"}),
    "PR": ("privileges_required", {"N": "NONE", "L": "LOW", "H": "HIGH"}),
    "UI": ("user_interaction", {"N": "NONE", "R": "REQUIRED"}),
    "S": ("scope", {"U": "UNCHANGED", "C": "CHANGED"}),
    "C": ("confidentiality_impact", CVSS_V3_IMPACTS),
    "I": ("integrity_impact", CVSS_V3_IMPACTS),
    "A": ("availability_impact", CVSS_V3_IMPACTS),
}


@dataclass
class ConversionDefaults:
    """Values used for the CSAF fields that a RustSec advisory does not carry."""

    publisher: csaf.Publisher
    document_category: str = "csaf_security_advisory"

    @classmethod
    def from_settings(cls):
        publisher = csaf.Publisher(
            category=get_settings("CSAF_PUBLISHER_CATEGORY", "coordinator"),
            name=get_settings("CSAF_PUBLISHER_NAME", "RustSec"),
            namespace=get_settings("CSAF_PUBLISHER_NAMESPACE", "https://rustsec.org"),
        )
        document_category = get_settings("CSAF_DOCUMENT_CATEGORY", "csaf_security_advisory")
        return cls(publisher=publisher, document_category=document_category)


def get_value(value):
    """Return None for an UNSET `value`."""
    if value is UNSET:
        return None
    return value


def as_datetime(value):
    """Return a UTC datetime at midnight for a `value` date."""
    return datetime.combine(value, time.min, tzinfo=UTC)


def get_affected_range(versions):
    """
    Return the version range of the vulnerable versions: every version not
    matching any of the patched or unaffected requirements.

    >>> get_affected_range(rustsec.Versions(patched=[">= 1.2.0"], unaffected=["< 0.5"]))
    '!(>= 1.2.0 || < 0.5)'
    >>> get_affected_range(rustsec.Versions())
    '*'
    """
    requirements = [*versions.patched, *versions.unaffected]
    if not requirements:
        return ANY_VERSION
    return f"!({' || '.join(requirements)})"


def get_version_ranges_by_status(versions):
    """Return a mapping of {product status category: [version range]}."""
    return {
        "known_affected": [get_affected_range(versions)],
        "fixed": list(versions.patched),
        "known_not_affected": list(versions.unaffected),
    }


def get_product_ids(version_ranges_by_status):
    """
    Return a mapping of {version range: product_id} with one synthesized
    product_id for each distinct version range.
    """
    product_ids = {}
    for version_ranges in version_ranges_by_status.values():
        for version_range in version_ranges:
            if version_range not in product_ids:
                product_ids[version_range] = PRODUCT_ID_TEMPLATE.format(len(product_ids) + 1)
    return product_ids


def get_package_purl(package):
    return PackageURL(type=CARGO_PURL_TYPE, name=package).to_string()


def get_csaf_document(advisory, defaults):
    """Return a csaf.Document object using the provided RustSec `advisory`."""
    metadata = advisory.metadata
    release_date = as_datetime(metadata.date)
    is_withdrawn = metadata.withdrawn is not UNSET

    revision = csaf.Revision(
        date=release_date,
        number="1",
        summary=INITIAL_REVISION_SUMMARY,
    )
    tracking = csaf.Tracking(
        aliases=metadata.aliases or None,
        current_release_date=as_datetime(metadata.withdrawn) if is_withdrawn else release_date,
        id=metadata.id,
        initial_release_date=release_date,
        revision_history=[revision],
        status="withdrawn" if is_withdrawn else "final",
        version="1",
    )
    reference = csaf.Reference(
        category="external",
        summary=f"RustSec advisory {metadata.id}",
        url=advisory.url,
    )
    return csaf.Document(
        category=defaults.document_category,
        csaf_version=CSAF_VERSION,
        publisher=defaults.publisher.model_copy(deep=True),
        references=[reference],
        # The title is mandatory in CSAF
        title=get_value(metadata.title) or metadata.id,
        tracking=tracking,
    )


def get_csaf_product_tree(package, product_ids):
    """
    Return a csaf.ProductTree with a product_name branch for the `package`
    holding a product_version_range branch for each of the `product_ids`.
    """
    purl = get_package_purl(package)
    version_range_branches = [
        csaf.Branch(
            category="product_version_range",
            name=version_range,
            product=csaf.FullProductName(
                name=f"{package} {version_range}",
                product_id=product_id,
                product_identification_helper=csaf.ProductIdentificationHelper(purl=purl),
            ),
        )
        for version_range, product_id in product_ids.items()
    ]
    package_branch = csaf.Branch(
        category="product_name",
        name=package,
        branches=version_range_branches,
    )
    return csaf.ProductTree(branches=[package_branch])


def get_csaf_vulnerability_ids(metadata):
    ids = [csaf.VulnerabilityId(system_name=RUSTSEC_SYSTEM_NAME, text=metadata.id)]

    for alias in metadata.aliases:
        prefix = alias.split("-")[0]
        system_name = ALIAS_PREFIX_TO_CSAF_SYSTEM_NAME.get(prefix, prefix)
        ids.append(csaf.VulnerabilityId(system_name=system_name, text=alias))

    return ids


def get_cve(aliases):
    for alias in aliases:
        if alias.startswith("CVE-"):
            return alias


def get_csaf_notes(metadata):
    notes = []
    if description := get_value(metadata.description):
        notes.append(csaf.Note(category="description", text=description))
    if informational := get_value(metadata.informational):
        notes.append(
            csaf.Note(category="general", text=informational, title=INFORMATIONAL_NOTE_TITLE)
        )
    return notes


def get_csaf_references(metadata):
    references = []
    if url := get_value(metadata.url):
        reference = csaf.Reference(category="external", summary=ADVISORY_URL_SUMMARY, url=url)
        references.append(reference)
    for url in metadata.references:
        references.append(csaf.Reference(category="external", summary=REFERENCE_SUMMARY, url=url))
    return references


def get_cvss_v3(cvss_vector):
    """
    Return a csaf.CvssV3 object for the `cvss_vector`, with the base score
    and severity computed from the vector.
    Raise a CVSS3Error if the vector is malformed or misses a mandatory metric.
    """
    cvss3 = CVSS3(cvss_vector)
    base_severity = cvss3.severities()[0]

    prefix, _, metrics = cvss_vector.partition("/")
    fields = {}
    for metric in metrics.split("/"):
        abbreviation, _, value = metric.partition(":")
        if abbreviation in CVSS_V3_BASE_METRICS:
            field_name, values = CVSS_V3_BASE_METRICS[abbreviation]
            fields[field_name] = values.get(value, value)

    return csaf.CvssV3(
        version=prefix.removeprefix("CVSS:"),
        vector_string=cvss_vector,
        base_score=float(cvss3.base_score),
        base_severity=base_severity.upper(),
        **fields,
    )


def get_csaf_scores(cvss_vector, product_ids):
    if not cvss_vector:
        return []

    try:
        cvss_v3 = get_cvss_v3(cvss_vector)
    except CVSS3Error as error:
        logger.warning(f"Ignoring invalid CVSS vector {cvss_vector!r}: {error}")
        return []

    return [csaf.Score(cvss_v3=cvss_v3, products=product_ids)]


def get_csaf_vulnerability(advisory, product_ids, version_ranges_by_status):
    metadata = advisory.metadata
    patched = advisory.versions.patched

    def get_ids(status):
        return [product_ids[version_range] for version_range in version_ranges_by_status[status]]

    affected_product_ids = get_ids("known_affected") if product_ids else []

    product_status = None
    if product_ids:
        product_status = csaf.ProductStatus(
            **{
                status: get_ids(status)
                for status, version_ranges in version_ranges_by_status.items()
                if version_ranges
            }
        )

    remediations = []
    if patched:
        remediations.append(
            csaf.Remediation(
                category="vendor_fix",
                details=f"Upgrade to a version matching: {', '.join(patched)}",
                product_ids=affected_product_ids or None,
            )
        )

    return csaf.Vulnerability(
        cve=get_cve(metadata.aliases),
        ids=get_csaf_vulnerability_ids(metadata),
        notes=get_csaf_notes(metadata) or None,
        product_status=product_status,
        references=get_csaf_references(metadata) or None,
        remediations=remediations or None,
        scores=get_csaf_scores(get_value(metadata.cvss), affected_product_ids) or None,
        title=get_value(metadata.title),
    )


def from_minimal_advisory(advisory, defaults=None):
    """
    Return a csaf.Csaf document built from a RustSec `advisory`.

    The mandatory CSAF structure is synthesized: a single revision dated
    with the advisory date, a tracking id set to the advisory id, a `final`
    status (`withdrawn` for a withdrawn advisory), and the publisher of the
    `defaults` ConversionDefaults, taken from the settings when not
    provided.
    Each distinct version range of the crate gets its own product id:
    the vulnerable range, then each patched and each unaffected requirement.
    """
    if defaults is None:
        defaults = ConversionDefaults.from_settings()

    package = get_value(advisory.metadata.package)
    version_ranges_by_status = get_version_ranges_by_status(advisory.versions)
    product_ids = get_product_ids(version_ranges_by_status) if package else {}
    if not package:
        logger.debug(f"No package in {advisory.metadata.id}, no product tree is created.")

    return csaf.Csaf(
        document=get_csaf_document(advisory, defaults),
        product_tree=get_csaf_product_tree(package, product_ids) if package else None,
        vulnerabilities=[
            get_csaf_vulnerability(advisory, product_ids, version_ranges_by_status),
        ],
    )


def get_advisory_date(tracking):
    if tracking.revision_history:
        return tracking.revision_history[0].date.date()
    if tracking.initial_release_date:
        return tracking.initial_release_date.date()


def get_package_and_version_ranges(product_tree):
    """
    Return a tuple of (package name, {product_id: version range}) from the
    branches of a `product_tree`.
    """
    if not product_tree:
        return None, {}

    package_names = []
    version_ranges = {}
    purl = None
    for branch in product_tree.iter_branches():
        if branch.category == "product_name":
            package_names.append(branch.name)
        if branch.product and branch.category in ("product_version_range", "product_version"):
            version_ranges[branch.product.product_id] = branch.name
            helper = branch.product.product_identification_helper
            if not purl and helper and helper.purl:
                purl = helper.purl

    if len(package_names) > 1:
        logger.warning(f"Multiple packages in product tree, using {package_names[0]!r}.")

    if package_names:
        return package_names[0], version_ranges
    if purl:
        return get_purl_name(purl), version_ranges
    return None, version_ranges


def get_purl_name(purl):
    """Return the name of a `purl` string, or None if it is not a valid purl."""
    try:
        return PackageURL.from_string(purl).name
    except ValueError:
        logger.warning(f"Ignoring invalid package URL {purl!r}.")


def get_version_ranges(product_ids, version_ranges):
    """
    Return the version ranges of the `product_ids` set, in the order of the
    product tree.
    """
    if not product_ids:
        return []
    return [
        version_range
        for product_id, version_range in version_ranges.items()
        if product_id in product_ids
    ]


def get_description(vulnerability, document):
    for note in [*(vulnerability.notes or []), *(document.notes or [])]:
        if note.category in ("description", "summary"):
            return note.text


def get_informational(vulnerability):
    for note in vulnerability.notes or []:
        if note.title == INFORMATIONAL_NOTE_TITLE:
            return note.text


def get_aliases(tracking, vulnerability):
    aliases = list(tracking.aliases or [])
    other_ids = [vulnerability_id.text for vulnerability_id in vulnerability.ids or []]
    if vulnerability.cve:
        other_ids.append(vulnerability.cve)

    for other_id in other_ids:
        if other_id != tracking.id and other_id not in aliases:
            aliases.append(other_id)

    return aliases


def get_cvss_vector(scores):
    """Return the CVSS vector of the first score, preferring CVSS v3."""
    for score in scores or []:
        if score.cvss_v3:
            return score.cvss_v3.vector_string
        if score.cvss_v2:
            return score.cvss_v2.vector_string


def to_minimal_advisory(csaf_document):
    """
    Return a rustsec.Advisory extracted from a `csaf_document`.

    This is a best-effort projection: the document must hold exactly one
    vulnerability, else a MultipleVulnerabilitiesError is raised, and the
    advisory id, title and date must be recoverable, else a
    MissingRequiredFieldError is raised.
    """
    vulnerabilities = csaf_document.vulnerabilities or []
    if len(vulnerabilities) != 1:
        raise MultipleVulnerabilitiesError(len(vulnerabilities))

    vulnerability = vulnerabilities[0]
    document = csaf_document.document
    tracking = document.tracking

    if not tracking.id:
        raise MissingRequiredFieldError("id")

    title = vulnerability.title or document.title
    if not title:
        raise MissingRequiredFieldError("title")

    advisory_date = get_advisory_date(tracking)
    if not advisory_date:
        raise MissingRequiredFieldError("date")

    url = UNSET
    references = []
    for reference in vulnerability.references or []:
        if reference.summary == ADVISORY_URL_SUMMARY and url is UNSET:
            url = reference.url
        else:
            references.append(reference.url)

    withdrawn = UNSET
    if tracking.status == "withdrawn" and tracking.current_release_date:
        withdrawn = tracking.current_release_date.date()

    package, version_ranges = get_package_and_version_ranges(csaf_document.product_tree)

    metadata = rustsec.Metadata(
        id=tracking.id,
        package=package or UNSET,
        date=advisory_date,
        title=title,
        description=get_description(vulnerability, document) or UNSET,
        url=url,
        references=references,
        aliases=get_aliases(tracking, vulnerability),
        cvss=get_cvss_vector(vulnerability.scores) or UNSET,
        informational=get_informational(vulnerability) or UNSET,
        withdrawn=withdrawn,
    )

    product_status = vulnerability.product_status or csaf.ProductStatus()
    versions = rustsec.Versions(
        patched=get_version_ranges(product_status.fixed, version_ranges),
        unaffected=get_version_ranges(product_status.known_not_affected, version_ranges),
    )

    return rustsec.Advisory(metadata=metadata, versions=versions)
