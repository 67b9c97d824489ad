"""Training provider models and their two visibility projections.

A provider catalog is a list of offerings: one row per (provider, skill)
pair, carrying skill-specific fees and delivery details plus the nested
provider record. Search results are projected into either a locked view
(no contact, address or capability fields) or an unlocked view.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderType(str, Enum):
    INDIVIDUAL = "individual"
    TRAINING_CENTER = "training_center"


class DeliveryMode(str, Enum):
    PHYSICAL = "Physical"
    ONLINE = "Online"
    HYBRID = "Hybrid"


# Spellings used by provider sign-up forms and older catalog exports
_PROVIDER_TYPE_ALIASES = {
    "individual": ProviderType.INDIVIDUAL,
    "trainingcenter": ProviderType.TRAINING_CENTER,
    "training_center": ProviderType.TRAINING_CENTER,
    "school": ProviderType.TRAINING_CENTER,
}

# Verification statuses that count towards local supply
VERIFIED_STATUSES = {"basic", "standard"}


class Provider(BaseModel):
    """A training provider (person or centre).

    Attributes:
        id: Provider identity
        name: Display name
        provider_type: individual / training_center
        phone, whatsapp, address: Contact details (unlocked view only)
        state, city, area: Where training takes place
        physical_delivery_percent: Default share of in-person delivery, 0-100
        mode_supported: Default delivery mode
        has_power_backup, has_training_laptops, has_internet: Capability flags
        is_active: Whether the provider is currently listed
        verification_status: e.g. "pending", "basic", "standard"
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    provider_type: ProviderType

    phone: Optional[str] = None
    whatsapp: Optional[str] = None

    state: str
    city: str
    area: Optional[str] = None
    address: Optional[str] = None

    physical_delivery_percent: Optional[int] = Field(default=None, ge=0, le=100)
    mode_supported: Optional[DeliveryMode] = None

    has_power_backup: bool = False
    has_training_laptops: bool = False
    has_internet: bool = False

    is_active: bool = True
    verification_status: Optional[str] = None

    @field_validator("provider_type", mode="before")
    @classmethod
    def normalize_provider_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _PROVIDER_TYPE_ALIASES.get(v.strip().lower(), v)
        return v


class ProviderOffering(BaseModel):
    """One provider's offering of one skill.

    Skill-specific values override the provider defaults when present.
    `provider` may be missing when the catalog join is broken; such rows
    never match.
    """

    model_config = ConfigDict(frozen=True)

    skill_code: str = Field(min_length=1)
    course_fee_min_naira: Optional[int] = Field(default=None, ge=0)
    course_fee_max_naira: Optional[int] = Field(default=None, ge=0)
    duration_weeks: Optional[int] = Field(default=None, ge=0)
    physical_delivery_percent: Optional[int] = Field(default=None, ge=0, le=100)
    mode_supported: Optional[DeliveryMode] = None
    is_active: bool = True
    provider: Optional[Provider] = None


class ProviderCapabilities(BaseModel):
    has_power_backup: bool
    has_training_laptops: bool
    has_internet: bool


class _ProviderSummary(BaseModel):
    """Fields visible regardless of unlock state."""

    model_config = ConfigDict(frozen=True)

    provider_id: str
    name: str
    provider_type: ProviderType
    state: str
    city: str
    area: Optional[str] = None
    mode_supported: Optional[DeliveryMode] = None
    physical_delivery_percent: int
    course_fee_min_naira: Optional[int] = None
    course_fee_max_naira: Optional[int] = None
    duration_weeks: Optional[int] = None
    rank: int


class LockedProvider(_ProviderSummary):
    """Redacted view: contact, address and capability fields do not exist here."""

    visibility: Literal["locked"] = "locked"


class UnlockedProvider(_ProviderSummary):
    """Full view including contact details and capabilities."""

    visibility: Literal["unlocked"] = "unlocked"
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    capabilities: ProviderCapabilities


RankedProvider = Annotated[
    Union[LockedProvider, UnlockedProvider], Field(discriminator="visibility")
]

LOCKED_MESSAGE = "Unlock to view provider contact details and exact addresses."


class ProviderSearchResult(BaseModel):
    """Response envelope for a provider search."""

    unlocked: bool
    locked: bool
    message: Optional[str] = None
    providers: list[RankedProvider] = Field(default_factory=list)
