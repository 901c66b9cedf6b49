"""Requirement and enterprise context contracts."""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Industry(str, Enum):
    """Known industries. Context industry is an open string; unknown values get generic knowledge."""
    PHARMACEUTICAL = "pharmaceutical"
    FINANCIAL_SERVICES = "financial-services"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    MANUFACTURING = "manufacturing"
    SUPPLY_CHAIN = "supply-chain"
    ENERGY = "energy"
    REAL_ESTATE = "real-estate"
    GOVERNMENT = "government"
    TECHNOLOGY = "technology"


class OrganizationSize(str, Enum):
    """Size of the requesting organization."""
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class RegulatoryFramework(str, Enum):
    """Regulatory frameworks the classifier knows how to detect."""
    FDA_21CFR11 = "FDA-21CFR11"
    SOX = "SOX"
    GDPR = "GDPR"
    HIPAA = "HIPAA"
    SOC2 = "SOC2"
    PCI_DSS = "PCI-DSS"
    ISO_27001 = "ISO-27001"
    GMP = "GMP"
    HACCP = "HACCP"


class BusinessIntentCategory(str, Enum):
    """What the business is trying to achieve."""
    SUPPLY_CHAIN_COMPLIANCE = "supply-chain-compliance"
    FINANCIAL_AUTOMATION = "financial-automation"
    DOCUMENT_VERIFICATION = "document-verification"
    IDENTITY_MANAGEMENT = "identity-management"
    ASSET_TOKENIZATION = "asset-tokenization"
    AUDIT_TRAIL = "audit-trail"
    REGULATORY_REPORTING = "regulatory-reporting"
    ORACLE_INTEGRATION = "oracle-integration"
    MULTI_PARTY_AUTOMATION = "multi-party-automation"
    DATA_VERIFICATION = "data-verification"


class TechnicalStack(BaseModel):
    """Technologies already in use at the organization."""
    model_config = ConfigDict(frozen=True)

    languages: List[str] = Field(default_factory=list)
    frameworks: List[str] = Field(default_factory=list)
    databases: List[str] = Field(default_factory=list)
    cloud_providers: List[str] = Field(default_factory=list)


class IntegrationRequirement(BaseModel):
    """An external system the generated code must talk to."""
    model_config = ConfigDict(frozen=True)

    system: str = Field(..., description="Name of the external system (e.g. ERP, LIMS)")
    type: str = Field(default="api", description="Integration style: api, database, file, message-queue")
    description: str = Field(default="")


class EnterpriseContext(BaseModel):
    """Partial description of the requesting organization. Every field is optional."""
    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = Field(None, description="Industry key, e.g. pharmaceutical")
    size: Optional[OrganizationSize] = None
    regulations: List[str] = Field(default_factory=list, description="Frameworks the organization must follow")
    technical_stack: Optional[TechnicalStack] = None
    integration_needs: List[IntegrationRequirement] = Field(default_factory=list)


class Requirement(BaseModel):
    """A free-text business requirement. Immutable after creation."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = Field(..., min_length=1, description="Natural-language requirement text")
    context: EnterpriseContext = Field(default_factory=EnterpriseContext)
