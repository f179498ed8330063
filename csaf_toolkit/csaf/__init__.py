#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

"""
CSAF 2.0 document model.

The model is less strict than the CSAF JSON schema: every valid CSAF
document is accepted, but so are documents with unknown keys, unknown
enumeration values, or empty lists. Only the structure and the JSON types
are enforced. Content rules such as patterns, minimum lengths and product
id references are left to a CSAF validator.

Conventions:
 * A field that is not applicable is ``None`` and is not serialized.
 * For list fields, ``None`` (absent) and ``[]`` (present but empty) are
   distinct and both survive a round-trip. The only exception is
   ``Csaf.vulnerabilities`` where an empty list is read as absent.
 * Fields are declared, and serialized, in the order of the CSAF schema.
"""

from __future__ import annotations

from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic import model_serializer

from csaf_toolkit.csaf.fields import OpenEnum
from csaf_toolkit.csaf.fields import ProductIdSet
from csaf_toolkit.csaf.fields import ScoreValue
from csaf_toolkit.csaf.fields import Timestamp


class CsafModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        # Field names are accepted when building models in Python. JSON input
        # is read by alias only, see `codec.parse`.
        validate_by_name=True,
        validate_by_alias=True,
        # `model_numbers` is a CSAF field name
        protected_namespaces=(),
    )


# Enumerations


class DocumentCategory(OpenEnum):
    """
    Defines the category of the document. CSAF profiles names as well as the
    names used by the editor draft of the CSAF standard are known.
    """

    csaf_base = "csaf_base"
    csaf_informational_advisory = "csaf_informational_advisory"
    csaf_security_advisory = "csaf_security_advisory"
    csaf_security_incident_response = "csaf_security_incident_response"
    csaf_vex = "csaf_vex"
    generic_csaf = "generic_csaf"
    security_advisory = "security_advisory"
    vex = "vex"


class CsafVersion(OpenEnum):
    field_2_0 = "2.0"


class PublisherCategory(OpenEnum):
    coordinator = "coordinator"
    discoverer = "discoverer"
    other = "other"
    translator = "translator"
    user = "user"
    vendor = "vendor"


class TrackingStatus(OpenEnum):
    """
    Defines the status of the document. `withdrawn` is used for documents
    converted from a withdrawn advisory.
    """

    draft = "draft"
    final = "final"
    interim = "interim"
    withdrawn = "withdrawn"


class TlpLabel(OpenEnum):
    AMBER = "AMBER"
    GREEN = "GREEN"
    RED = "RED"
    WHITE = "WHITE"


class NoteCategory(OpenEnum):
    description = "description"
    details = "details"
    faq = "faq"
    general = "general"
    legal_disclaimer = "legal_disclaimer"
    other = "other"
    summary = "summary"


class ReferenceCategory(OpenEnum):
    external = "external"
    self = "self"


class BranchCategory(OpenEnum):
    architecture = "architecture"
    host_name = "host_name"
    language = "language"
    legacy = "legacy"
    patch_level = "patch_level"
    product_family = "product_family"
    product_name = "product_name"
    product_version = "product_version"
    product_version_range = "product_version_range"
    service_pack = "service_pack"
    specification = "specification"
    vendor = "vendor"


class RelationshipCategory(OpenEnum):
    default_component_of = "default_component_of"
    external_component_of = "external_component_of"
    installed_on = "installed_on"
    installed_with = "installed_with"
    optional_component_of = "optional_component_of"


class FlagLabel(OpenEnum):
    component_not_present = "component_not_present"
    inline_mitigations_already_exist = "inline_mitigations_already_exist"
    vulnerable_code_cannot_be_controlled_by_adversary = (
        "vulnerable_code_cannot_be_controlled_by_adversary"
    )
    vulnerable_code_not_in_execute_path = "vulnerable_code_not_in_execute_path"
    vulnerable_code_not_present = "vulnerable_code_not_present"


class InvolvementParty(OpenEnum):
    coordinator = "coordinator"
    discoverer = "discoverer"
    other = "other"
    user = "user"
    vendor = "vendor"


class InvolvementStatus(OpenEnum):
    completed = "completed"
    contact_attempted = "contact_attempted"
    disputed = "disputed"
    in_progress = "in_progress"
    not_contacted = "not_contacted"
    open = "open"


class RemediationCategory(OpenEnum):
    mitigation = "mitigation"
    no_fix_planned = "no_fix_planned"
    none_available = "none_available"
    vendor_fix = "vendor_fix"
    workaround = "workaround"


class RestartCategory(OpenEnum):
    connected = "connected"
    dependencies = "dependencies"
    machine = "machine"
    none = "none"
    parent = "parent"
    service = "service"
    system = "system"
    vulnerable_component = "vulnerable_component"
    zone = "zone"


class ThreatCategory(OpenEnum):
    exploit_status = "exploit_status"
    impact = "impact"
    target_set = "target_set"


# CVSS v2 metric values


class AccessVectorType(OpenEnum):
    NETWORK = "NETWORK"
    ADJACENT_NETWORK = "ADJACENT_NETWORK"
    LOCAL = "LOCAL"


class AccessComplexityType(OpenEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class AuthenticationType(OpenEnum):
    MULTIPLE = "MULTIPLE"
    SINGLE = "SINGLE"
    NONE = "NONE"


class CiaType(OpenEnum):
    NONE = "NONE"
    PARTIAL = "PARTIAL"
    COMPLETE = "COMPLETE"


class ExploitabilityType(OpenEnum):
    UNPROVEN = "UNPROVEN"
    PROOF_OF_CONCEPT = "PROOF_OF_CONCEPT"
    FUNCTIONAL = "FUNCTIONAL"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


class RemediationLevelType(OpenEnum):
    OFFICIAL_FIX = "OFFICIAL_FIX"
    TEMPORARY_FIX = "TEMPORARY_FIX"
    WORKAROUND = "WORKAROUND"
    UNAVAILABLE = "UNAVAILABLE"
    NOT_DEFINED = "NOT_DEFINED"


class ReportConfidenceType(OpenEnum):
    UNCONFIRMED = "UNCONFIRMED"
    UNCORROBORATED = "UNCORROBORATED"
    CONFIRMED = "CONFIRMED"
    NOT_DEFINED = "NOT_DEFINED"


class CollateralDamagePotentialType(OpenEnum):
    NONE = "NONE"
    LOW = "LOW"
    LOW_MEDIUM = "LOW_MEDIUM"
    MEDIUM_HIGH = "MEDIUM_HIGH"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


class TargetDistributionType(OpenEnum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


class CiaRequirementType(OpenEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


# CVSS v3 metric values


class AttackVectorType(OpenEnum):
    NETWORK = "NETWORK"
    ADJACENT_NETWORK = "ADJACENT_NETWORK"
    LOCAL = "LOCAL"
    PHYSICAL = "PHYSICAL"
    NOT_DEFINED = "NOT_DEFINED"


class AttackComplexityType(OpenEnum):
    HIGH = "HIGH"
    LOW = "LOW"
    NOT_DEFINED = "NOT_DEFINED"


class PrivilegesRequiredType(OpenEnum):
    HIGH = "HIGH"
    LOW = "LOW"
    NONE = "NONE"
    NOT_DEFINED = "NOT_DEFINED"


class UserInteractionType(OpenEnum):
    NONE = "NONE"
    REQUIRED = "REQUIRED"
    NOT_DEFINED = "NOT_DEFINED"


class ScopeType(OpenEnum):
    UNCHANGED = "UNCHANGED"
    CHANGED = "CHANGED"
    NOT_DEFINED = "NOT_DEFINED"


class CiaImpactType(OpenEnum):
    NONE = "NONE"
    LOW = "LOW"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


class ExploitCodeMaturityType(OpenEnum):
    UNPROVEN = "UNPROVEN"
    PROOF_OF_CONCEPT = "PROOF_OF_CONCEPT"
    FUNCTIONAL = "FUNCTIONAL"
    HIGH = "HIGH"
    NOT_DEFINED = "NOT_DEFINED"


class ConfidenceType(OpenEnum):
    UNKNOWN = "UNKNOWN"
    REASONABLE = "REASONABLE"
    CONFIRMED = "CONFIRMED"
    NOT_DEFINED = "NOT_DEFINED"


class SeverityType(OpenEnum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Document


class AggregateSeverity(CsafModel):
    """
    Urgency and criticality of the document as a whole, on a scale defined
    by the document producer.
    """

    namespace: Optional[str] = None
    text: str = Field(..., title="Text of aggregate severity")


class Tlp(CsafModel):
    label: TlpLabel = Field(..., title="Label of TLP")
    url: Optional[str] = Field(
        default=None,
        description="No default is applied: an absent url stays absent on output.",
        title="URL of TLP version",
    )


class Distribution(CsafModel):
    """Describe any constraints on how this document might be shared."""

    text: Optional[str] = None
    tlp: Optional[Tlp] = Field(default=None, title="Traffic Light Protocol (TLP)")


class Publisher(CsafModel):
    """Provides information about the publisher of the document."""

    category: PublisherCategory = Field(..., title="Category of publisher")
    contact_details: Optional[str] = None
    issuing_authority: Optional[str] = None
    name: str = Field(..., title="Name of publisher")
    namespace: str = Field(
        ...,
        description="URL under control of the issuing party, used as its unique identifier.",
        title="Namespace of publisher",
    )


class Engine(CsafModel):
    name: str
    version: Optional[str] = None


class Generator(CsafModel):
    """The date and the engine that generated the document."""

    date: Optional[Timestamp] = None
    engine: Engine


class Revision(CsafModel):
    """
    One entry of the revision history. Entries are kept in the order given
    by the document producer.
    """

    date: Timestamp
    legacy_version: Optional[str] = None
    number: str
    summary: str


class Tracking(CsafModel):
    """
    Management attributes necessary to track a CSAF document as a whole.
    """

    aliases: Optional[List[str]] = None
    current_release_date: Timestamp = Field(..., title="Current release date")
    generator: Optional[Generator] = None
    id: str = Field(
        ...,
        description="Unique identifier of the document for the publisher.",
        examples=["RHBA-2019:0024", "cisco-sa-20190513-secureboot"],
        title="Unique identifier for the document",
    )
    initial_release_date: Timestamp = Field(..., title="Initial release date")
    revision_history: List[Revision] = Field(..., title="Revision history")
    status: TrackingStatus = Field(..., title="Document status")
    version: str


class Acknowledgment(CsafModel):
    """Acknowledges contributions by describing those that contributed."""

    names: Optional[List[str]] = None
    organization: Optional[str] = None
    summary: Optional[str] = None
    urls: Optional[List[str]] = None


class Note(CsafModel):
    """A text blob related to the current context."""

    audience: Optional[str] = None
    category: NoteCategory = Field(..., title="Note category")
    text: str = Field(..., title="Note content")
    title: Optional[str] = None


class Reference(CsafModel):
    """
    A reference to a conference, paper, advisory, or any other resource
    related to the document or the vulnerability.
    """

    category: Optional[ReferenceCategory] = Field(
        default=None,
        description="CSAF reads an absent category as `external`.",
        title="Category of reference",
    )
    summary: str
    url: str


class Document(CsafModel):
    """
    Captures the meta-data about this document describing a particular set
    of security advisories.
    """

    acknowledgments: Optional[List[Acknowledgment]] = None
    aggregate_severity: Optional[AggregateSeverity] = None
    category: DocumentCategory = Field(
        ...,
        examples=["csaf_security_advisory", "csaf_vex", "generic_csaf"],
        title="Document category",
    )
    csaf_version: CsafVersion = Field(..., title="CSAF version")
    distribution: Optional[Distribution] = None
    lang: Optional[str] = Field(default=None, title="Document language")
    notes: Optional[List[Note]] = None
    publisher: Publisher
    references: Optional[List[Reference]] = None
    source_lang: Optional[str] = Field(default=None, title="Source language")
    title: str = Field(..., title="Title of this document")
    tracking: Tracking


# Product tree


class FileHash(CsafModel):
    algorithm: str
    value: str


class Hash(CsafModel):
    file_hashes: List[FileHash]
    filename: str


class GenericUri(CsafModel):
    namespace: str
    uri: str


class ProductIdentificationHelper(CsafModel):
    """
    Provides at least one method which aids in identifying the product in an
    asset database.
    """

    cpe: Optional[str] = None
    hashes: Optional[List[Hash]] = None
    model_numbers: Optional[List[str]] = None
    purl: Optional[str] = Field(default=None, title="package URL representation")
    sbom_urls: Optional[List[str]] = None
    serial_numbers: Optional[List[str]] = None
    skus: Optional[List[str]] = None
    x_generic_uris: Optional[List[GenericUri]] = None


class FullProductName(CsafModel):
    """Specifies information about the product and assigns the product_id."""

    name: str = Field(..., title="Textual description of the product")
    product_id: str
    product_identification_helper: Optional[ProductIdentificationHelper] = None


class Branch(CsafModel):
    """
    A node of the hierarchical structure of the product tree. A branch holds
    child branches, a product, or both.
    """

    branches: Optional[List[Branch]] = None
    category: BranchCategory = Field(..., title="Category of the branch")
    name: str = Field(..., title="Name of the branch")
    product: Optional[FullProductName] = None

    def iter_branches(self):
        """Yield this branch and all its descendants, parents first."""
        yield self
        yield from walk_branches(self.branches)


def walk_branches(branches):
    """
    Yield every branch of the `branches` forest depth first, parents before
    their children, in document order.
    An explicit stack is used so the depth of the tree is not bounded by the
    interpreter recursion limit.
    """
    stack = list(reversed(branches or []))
    while stack:
        branch = stack.pop()
        yield branch
        if branch.branches:
            stack.extend(reversed(branch.branches))


class Relationship(CsafModel):
    """
    Establishes a link between two existing products, defining a new product
    for their combination.
    """

    category: RelationshipCategory = Field(..., title="Relationship category")
    full_product_name: FullProductName
    product_reference: str
    relates_to_product_reference: str


class ProductGroup(CsafModel):
    group_id: str
    product_ids: List[str]
    summary: Optional[str] = None


class ProductTree(CsafModel):
    """
    Is a container for all fully qualified product names that can be
    referenced elsewhere in the document.
    """

    branches: Optional[List[Branch]] = None
    full_product_names: Optional[List[FullProductName]] = None
    product_groups: Optional[List[ProductGroup]] = None
    relationships: Optional[List[Relationship]] = None

    def iter_branches(self):
        return walk_branches(self.branches)

    def iter_full_product_names(self):
        """
        Yield the FullProductName of the tree branches, then the standalone
        full_product_names, then the products defined by relationships.
        """
        for branch in self.iter_branches():
            if branch.product:
                yield branch.product
        yield from self.full_product_names or []
        for relationship in self.relationships or []:
            yield relationship.full_product_name

    def get_full_product_name(self, product_id):
        """Return the FullProductName for `product_id` or None."""
        for full_product_name in self.iter_full_product_names():
            if full_product_name.product_id == product_id:
                return full_product_name


# Vulnerabilities


class Cwe(CsafModel):
    id: str = Field(..., examples=["CWE-22", "CWE-79"], title="Weakness ID")
    name: str = Field(..., title="Weakness name")


class Flag(CsafModel):
    """
    Product specific information in regard to this vulnerability as a single
    machine readable flag.
    """

    date: Optional[Timestamp] = None
    group_ids: Optional[List[str]] = None
    label: FlagLabel = Field(..., title="Label of the flag")
    product_ids: Optional[List[str]] = None


class VulnerabilityId(CsafModel):
    """A unique label or tracking ID for the vulnerability."""

    system_name: str = Field(..., examples=["Cisco Bug ID", "GitHub Issue"])
    text: str


class Involvement(CsafModel):
    date: Optional[Timestamp] = None
    party: InvolvementParty
    status: InvolvementStatus
    summary: Optional[str] = None


class ProductStatus(CsafModel):
    """
    Sets of product_ids for each status of the referenced products related
    to the vulnerability. Each set holds a product_id once and is serialized
    in sorted order.
    """

    first_affected: Optional[ProductIdSet] = None
    first_fixed: Optional[ProductIdSet] = None
    fixed: Optional[ProductIdSet] = None
    known_affected: Optional[ProductIdSet] = None
    known_not_affected: Optional[ProductIdSet] = None
    last_affected: Optional[ProductIdSet] = None
    recommended: Optional[ProductIdSet] = None
    under_investigation: Optional[ProductIdSet] = None

    def as_mapping(self) -> Dict[str, set]:
        """Return a mapping of {status category: product_ids} for the set statuses."""
        return {
            category: product_ids
            for category in type(self).model_fields
            if (product_ids := getattr(self, category)) is not None
        }


class RestartRequired(CsafModel):
    category: RestartCategory = Field(..., title="Category of restart")
    details: Optional[str] = None


class Remediation(CsafModel):
    """Specifies details on how to handle (and presumably, fix) a vulnerability."""

    category: RemediationCategory = Field(..., title="Category of the remediation")
    date: Optional[Timestamp] = None
    details: str = Field(..., title="Details of the remediation")
    entitlements: Optional[List[str]] = None
    group_ids: Optional[List[str]] = None
    product_ids: Optional[List[str]] = None
    restart_required: Optional[RestartRequired] = None
    url: Optional[str] = None


class CvssV2(CsafModel):
    """CVSS v2.0 score, using the key names of the FIRST JSON schema."""

    version: str
    vector_string: str = Field(..., alias="vectorString")
    access_vector: Optional[AccessVectorType] = Field(default=None, alias="accessVector")
    access_complexity: Optional[AccessComplexityType] = Field(
        default=None, alias="accessComplexity"
    )
    authentication: Optional[AuthenticationType] = None
    confidentiality_impact: Optional[CiaType] = Field(default=None, alias="confidentialityImpact")
    integrity_impact: Optional[CiaType] = Field(default=None, alias="integrityImpact")
    availability_impact: Optional[CiaType] = Field(default=None, alias="availabilityImpact")
    base_score: ScoreValue = Field(..., alias="baseScore")
    exploitability: Optional[ExploitabilityType] = None
    remediation_level: Optional[RemediationLevelType] = Field(
        default=None, alias="remediationLevel"
    )
    report_confidence: Optional[ReportConfidenceType] = Field(
        default=None, alias="reportConfidence"
    )
    temporal_score: Optional[ScoreValue] = Field(default=None, alias="temporalScore")
    collateral_damage_potential: Optional[CollateralDamagePotentialType] = Field(
        default=None, alias="collateralDamagePotential"
    )
    target_distribution: Optional[TargetDistributionType] = Field(
        default=None, alias="targetDistribution"
    )
    confidentiality_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="confidentialityRequirement"
    )
    integrity_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="integrityRequirement"
    )
    availability_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="availabilityRequirement"
    )
    environmental_score: Optional[ScoreValue] = Field(default=None, alias="environmentalScore")


class CvssV3(CsafModel):
    """CVSS v3.0 or v3.1 score, using the key names of the FIRST JSON schema."""

    version: str
    vector_string: str = Field(..., alias="vectorString")
    attack_vector: Optional[AttackVectorType] = Field(default=None, alias="attackVector")
    attack_complexity: Optional[AttackComplexityType] = Field(
        default=None, alias="attackComplexity"
    )
    privileges_required: Optional[PrivilegesRequiredType] = Field(
        default=None, alias="privilegesRequired"
    )
    user_interaction: Optional[UserInteractionType] = Field(default=None, alias="userInteraction")
    scope: Optional[ScopeType] = None
    confidentiality_impact: Optional[CiaImpactType] = Field(
        default=None, alias="confidentialityImpact"
    )
    integrity_impact: Optional[CiaImpactType] = Field(default=None, alias="integrityImpact")
    availability_impact: Optional[CiaImpactType] = Field(default=None, alias="availabilityImpact")
    base_score: ScoreValue = Field(..., alias="baseScore")
    base_severity: SeverityType = Field(..., alias="baseSeverity")
    exploit_code_maturity: Optional[ExploitCodeMaturityType] = Field(
        default=None, alias="exploitCodeMaturity"
    )
    remediation_level: Optional[RemediationLevelType] = Field(
        default=None, alias="remediationLevel"
    )
    report_confidence: Optional[ConfidenceType] = Field(default=None, alias="reportConfidence")
    temporal_score: Optional[ScoreValue] = Field(default=None, alias="temporalScore")
    temporal_severity: Optional[SeverityType] = Field(default=None, alias="temporalSeverity")
    confidentiality_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="confidentialityRequirement"
    )
    integrity_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="integrityRequirement"
    )
    availability_requirement: Optional[CiaRequirementType] = Field(
        default=None, alias="availabilityRequirement"
    )
    modified_attack_vector: Optional[AttackVectorType] = Field(
        default=None, alias="modifiedAttackVector"
    )
    modified_attack_complexity: Optional[AttackComplexityType] = Field(
        default=None, alias="modifiedAttackComplexity"
    )
    modified_privileges_required: Optional[PrivilegesRequiredType] = Field(
        default=None, alias="modifiedPrivilegesRequired"
    )
    modified_user_interaction: Optional[UserInteractionType] = Field(
        default=None, alias="modifiedUserInteraction"
    )
    modified_scope: Optional[ScopeType] = Field(default=None, alias="modifiedScope")
    modified_confidentiality_impact: Optional[CiaImpactType] = Field(
        default=None, alias="modifiedConfidentialityImpact"
    )
    modified_integrity_impact: Optional[CiaImpactType] = Field(
        default=None, alias="modifiedIntegrityImpact"
    )
    modified_availability_impact: Optional[CiaImpactType] = Field(
        default=None, alias="modifiedAvailabilityImpact"
    )
    environmental_score: Optional[ScoreValue] = Field(default=None, alias="environmentalScore")
    environmental_severity: Optional[SeverityType] = Field(
        default=None, alias="environmentalSeverity"
    )


class Score(CsafModel):
    """
    Specifies information about (at least one) score of the vulnerability and
    for which products the given value applies.
    """

    cvss_v2: Optional[CvssV2] = None
    cvss_v3: Optional[CvssV3] = None
    products: List[str]


class Threat(CsafModel):
    """Contains the vulnerability kinetic information."""

    category: ThreatCategory = Field(..., title="Category of the threat")
    date: Optional[Timestamp] = None
    details: str
    group_ids: Optional[List[str]] = None
    product_ids: Optional[List[str]] = None


class Vulnerability(CsafModel):
    """
    Is a container for the aggregation of all fields that are related to a
    single vulnerability in the document.
    """

    acknowledgments: Optional[List[Acknowledgment]] = None
    cve: Optional[str] = Field(default=None, examples=["CVE-2021-44228"], title="CVE")
    cwe: Optional[Cwe] = None
    discovery_date: Optional[Timestamp] = None
    flags: Optional[List[Flag]] = None
    ids: Optional[List[VulnerabilityId]] = None
    involvements: Optional[List[Involvement]] = None
    notes: Optional[List[Note]] = None
    product_status: Optional[ProductStatus] = None
    references: Optional[List[Reference]] = None
    release_date: Optional[Timestamp] = None
    remediations: Optional[List[Remediation]] = None
    scores: Optional[List[Score]] = None
    threats: Optional[List[Threat]] = None
    title: Optional[str] = None


class Csaf(CsafModel):
    """Representation of security advisory information as a JSON document."""

    model_config = ConfigDict(validate_assignment=True)

    document: Document = Field(..., title="Document level meta-data")
    product_tree: Optional[ProductTree] = Field(default=None, title="Product tree")
    vulnerabilities: Optional[List[Vulnerability]] = Field(default=None, title="Vulnerabilities")

    @field_validator("vulnerabilities")
    @classmethod
    def empty_vulnerabilities_as_absent(cls, value):
        return value or None

    @model_serializer(mode="wrap")
    def drop_empty_vulnerabilities(self, handler):
        """Omit `vulnerabilities` when the list was emptied in place."""
        data = handler(self)
        if data.get("vulnerabilities") == []:
            del data["vulnerabilities"]
        return data


Branch.model_rebuild()
ProductTree.model_rebuild()
