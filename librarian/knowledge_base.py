"""Static knowledge tables used by the classifier and composition stages.

Everything here is read-only: mappings are wrapped in MappingProxyType and
entries are frozen dataclasses or tuples, so one KnowledgeBase can be shared
by any number of concurrent pipeline runs.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class IndustryKnowledge:
    """What we know about one industry."""
    industry: str
    standards: Tuple[str, ...] = ()
    common_integrations: Tuple[str, ...] = ()
    regulatory_frameworks: Tuple[str, ...] = ()
    typical_patterns: Tuple[str, ...] = ()
    risk_factors: Tuple[str, ...] = ()
    retention_years: Optional[int] = None
    known: bool = True


def generic_industry(industry: str) -> IndustryKnowledge:
    """Placeholder entry for industries outside the knowledge base."""
    return IndustryKnowledge(industry=industry, known=False)


INDUSTRY_KNOWLEDGE: Mapping[str, IndustryKnowledge] = MappingProxyType({
    "pharmaceutical": IndustryKnowledge(
        industry="pharmaceutical",
        standards=("GMP", "FDA-21CFR11", "ISO-27001", "HIPAA"),
        common_integrations=("ERP", "MES", "LIMS", "Regulatory-Systems"),
        regulatory_frameworks=("FDA-21CFR11", "HIPAA", "GMP"),
        typical_patterns=("supply-chain-tracking", "batch-compliance", "clinical-trials"),
        risk_factors=("regulatory-violations", "product-recalls", "audit-failures"),
        retention_years=25,
    ),
    "financial-services": IndustryKnowledge(
        industry="financial-services",
        standards=("SOX", "PCI-DSS", "SOC2", "NIST"),
        common_integrations=("Core-Banking", "Risk-Management", "Compliance-Systems"),
        regulatory_frameworks=("SOX", "PCI-DSS", "SOC2"),
        typical_patterns=("payment-automation", "fraud-detection", "regulatory-reporting"),
        risk_factors=("security-breaches", "regulatory-fines", "fraud-losses"),
        retention_years=7,
    ),
    "insurance": IndustryKnowledge(
        industry="insurance",
        standards=("SOX", "SOC2", "NIST", "ISO-27001"),
        common_integrations=("Policy-Management", "Claims-Processing", "Oracle-Data"),
        regulatory_frameworks=("SOX", "SOC2"),
        typical_patterns=("claims-automation", "risk-assessment", "oracle-integration"),
        risk_factors=("claim-fraud", "regulatory-changes", "catastrophic-losses"),
        retention_years=10,
    ),
    "healthcare": IndustryKnowledge(
        industry="healthcare",
        standards=("HIPAA", "HITRUST", "ISO-27001"),
        common_integrations=("EHR", "Patient-Portal", "Billing-Systems"),
        regulatory_frameworks=("HIPAA", "GDPR"),
        typical_patterns=("patient-data-management", "credential-verification", "consent-tracking"),
        risk_factors=("data-breaches", "privacy-violations", "audit-failures"),
        retention_years=6,
    ),
    "manufacturing": IndustryKnowledge(
        industry="manufacturing",
        standards=("ISO-9001", "ISO-27001"),
        common_integrations=("ERP", "MES", "SCADA"),
        regulatory_frameworks=("ISO-27001",),
        typical_patterns=("quality-control", "asset-tracking", "supplier-management"),
        risk_factors=("quality-defects", "supply-disruption", "equipment-failure"),
        retention_years=10,
    ),
})


INDUSTRY_EXAMPLES: Mapping[str, str] = MappingProxyType({
    "pharmaceutical": "Drug manufacturing, clinical trials, FDA compliance",
    "financial-services": "Banking, payments, trading, regulatory reporting",
    "insurance": "Claims processing, risk assessment, parametric insurance",
    "manufacturing": "Supply chain, quality control, ISO compliance",
    "healthcare": "Patient records, HIPAA compliance, medical devices",
})


COMPLIANCE_FRAMEWORKS: Mapping[str, str] = MappingProxyType({
    "FDA-21CFR11": "Pharmaceutical electronic records and signatures",
    "SOX": "Financial reporting and internal controls",
    "GDPR": "European data protection and privacy",
    "HIPAA": "Healthcare information privacy and security",
    "SOC2": "Service organization security controls",
    "PCI-DSS": "Payment card industry data security",
    "GMP": "Good manufacturing practice for regulated production",
    "HACCP": "Food safety hazard analysis and critical control points",
    "ISO-27001": "Information security management",
})


SERVICE_CAPABILITIES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "HTS": (
        "Token Service",
        "Fungible token creation and management",
        "Non-fungible token (NFT) creation and trading",
        "Custom fee schedules and royalties",
        "Token transfers and atomic swaps",
        "Supply management (mint, burn, pause)",
    ),
    "HCS": (
        "Consensus Service",
        "Immutable message ordering and timestamping",
        "Topic-based messaging for audit trails",
        "High-throughput data integrity verification",
        "Regulatory compliance logging",
    ),
    "Smart Contracts": (
        "Smart Contract Service",
        "EVM-compatible smart contract deployment",
        "Solidity contract execution",
        "Cross-contract communication",
    ),
    "File Service": (
        "File Service",
        "Distributed file storage and retrieval",
        "Document integrity verification",
        "Regulatory document management",
    ),
    "Account Service": (
        "Account Service",
        "Multi-signature account creation",
        "Key management and rotation",
        "Threshold key configurations",
    ),
})


# Words in requirement text that name a platform service
SERVICE_MENTIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "HTS": ("hts", "token service", "fungible token", "nft"),
    "HCS": ("hcs", "consensus service", "topic message"),
    "Smart Contracts": ("smart contract", "solidity"),
    "File Service": ("file service", "document storage"),
    "Account Service": ("account service", "multi-sig", "multisig", "threshold key"),
})


TEMPLATE_INVENTORY: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "Supply Chain Compliance": MappingProxyType({
        "pharmaceutical-fda": "FDA 21 CFR Part 11 compliance",
        "food-safety-haccp": "HACCP compliance tracking",
        "manufacturing-iso": "ISO quality management",
    }),
    "Financial Automation": MappingProxyType({
        "insurance-automation": "Oracle-based claim processing",
        "royalty-distribution": "Multi-party revenue splits",
        "cross-border-payments": "Stablecoin integration",
    }),
    "B2B SaaS Integration": MappingProxyType({
        "document-verification": "Tamper-proof records",
        "credential-issuance": "Professional certifications",
        "audit-trail-integration": "Compliance logging",
    }),
    "Enterprise Identity": MappingProxyType({
        "employee-credentials": "HR system integration",
        "contractor-verification": "Supply chain identity",
        "customer-kyc": "Financial services KYC",
    }),
    "Asset Tokenization": MappingProxyType({
        "real-estate-fractionalization": "Investment products",
        "ip-licensing": "Automated royalties",
        "carbon-credit-trading": "Environmental markets",
    }),
})


INTENT_TEMPLATES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "supply-chain-compliance": ("pharmaceutical-fda", "food-safety-haccp", "manufacturing-iso"),
    "financial-automation": ("insurance-automation", "royalty-distribution", "cross-border-payments"),
    "document-verification": ("audit-trail-integration", "credential-issuance"),
    "identity-management": ("employee-credentials", "contractor-verification", "customer-kyc"),
    "asset-tokenization": ("real-estate-fractionalization", "ip-licensing", "carbon-credit-trading"),
})


INDUSTRY_TEMPLATES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "pharmaceutical": ("fda-compliance-audit", "supply-chain-tracking", "batch-verification"),
    "financial-services": ("payment-automation", "regulatory-reporting", "audit-trail"),
    "insurance": ("oracle-claims-automation", "parametric-insurance", "risk-assessment"),
    "manufacturing": ("iso-quality-management", "supply-chain-compliance", "asset-tracking"),
    "healthcare": ("hipaa-compliance", "patient-data-management", "credential-verification"),
})


INDUSTRY_PATTERNS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "pharmaceutical": (
        "Regulatory compliance: FDA 21 CFR Part 11, GMP, GDP",
        "Drug serialization and track-and-trace",
        "Clinical trial data integrity",
        "Supply chain verification",
        "Adverse event reporting",
        "Batch record management",
    ),
    "financial-services": (
        "Regulatory compliance: SOX, PCI DSS, Basel III",
        "KYC/AML automation",
        "Transaction monitoring and reporting",
        "Cross-border payment processing",
        "Digital identity verification",
    ),
    "supply-chain": (
        "End-to-end traceability",
        "Multi-party consensus mechanisms",
        "IoT sensor data integration",
        "Vendor qualification management",
        "Quality assurance workflows",
    ),
    "manufacturing": (
        "Production line monitoring",
        "Quality control automation",
        "Equipment maintenance tracking",
        "Compliance documentation",
        "Inventory optimization",
    ),
    "default": (
        "Audit trail management",
        "Document integrity verification",
        "Multi-party workflow automation",
        "Identity and access management",
        "Regulatory reporting",
    ),
})


@dataclass(frozen=True)
class KnowledgeBase:
    """Bundle of all static tables. Pass a custom instance to Librarian to override."""
    industries: Mapping[str, IndustryKnowledge] = field(default_factory=lambda: INDUSTRY_KNOWLEDGE)
    industry_examples: Mapping[str, str] = field(default_factory=lambda: INDUSTRY_EXAMPLES)
    compliance_frameworks: Mapping[str, str] = field(default_factory=lambda: COMPLIANCE_FRAMEWORKS)
    service_capabilities: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: SERVICE_CAPABILITIES)
    service_mentions: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: SERVICE_MENTIONS)
    template_inventory: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: TEMPLATE_INVENTORY)
    intent_templates: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: INTENT_TEMPLATES)
    industry_templates: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: INDUSTRY_TEMPLATES)
    industry_patterns: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: INDUSTRY_PATTERNS)


DEFAULT_KNOWLEDGE = KnowledgeBase()
