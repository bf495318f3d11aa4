"""Pydantic models for SDL documents.

Every field a validator reports on is optional, so an incomplete document
still parses and its problems surface as validation messages.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_VERSIONS = ("2.0", "2.1")
DEFAULT_VERSION = "2.0"
VALID_PROTOCOLS = ("TCP", "UDP")


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _key_text(key: Any) -> Any:
    # YAML reads unquoted names such as 123 or true as scalars
    if isinstance(key, bool):
        return str(key).lower()
    return _as_text(key)


def _normalize_mapping(value: Any, depth: int = 0) -> Any:
    """Replace None with {} and turn scalar keys into names, down to depth nested mappings."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        return value
    if depth:
        return {_key_text(key): _normalize_mapping(item, depth - 1) for key, item in value.items()}
    return {_key_text(key): item for key, item in value.items()}


class SDLModel(BaseModel):
    """Base model: immutable, keeps unknown keys, accepts field names or aliases."""
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class ExposeTarget(SDLModel):
    """Where an exposed port is reachable from."""
    service: Optional[str] = None
    global_: Optional[bool] = Field(default=None, alias="global")

    @field_validator("service", mode="before")
    @classmethod
    def service_as_text(cls, value):
        return _as_text(value)


class ExposeRule(SDLModel):
    """Port exposure rule for a service."""
    port: Optional[int] = None
    as_: Optional[int] = Field(default=None, alias="as")
    proto: Optional[str] = None
    to: List[ExposeTarget] = Field(default_factory=list)

    @field_validator("to", mode="before")
    @classmethod
    def default_targets(cls, value):
        return [] if value is None else value


class Service(SDLModel):
    """Service definition."""
    image: Optional[str] = None
    expose: List[ExposeRule] = Field(default_factory=list)
    env: List[str] = Field(default_factory=list)
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None

    @field_validator("expose", "env", mode="before")
    @classmethod
    def default_lists(cls, value):
        return [] if value is None else value


class CPU(SDLModel):
    units: Optional[str] = None

    @field_validator("units", mode="before")
    @classmethod
    def units_as_text(cls, value):
        return _as_text(value)


class Memory(SDLModel):
    size: Optional[str] = None

    @field_validator("size", mode="before")
    @classmethod
    def size_as_text(cls, value):
        return _as_text(value)


class StorageVolume(SDLModel):
    """Storage volume request."""
    name: Optional[str] = None
    size: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "size", mode="before")
    @classmethod
    def name_and_size_as_text(cls, value):
        return _as_text(value)


class Resources(SDLModel):
    """Compute resources requested by a profile."""
    cpu: Optional[CPU] = None
    memory: Optional[Memory] = None
    storage: List[StorageVolume] = Field(default_factory=list)

    @field_validator("storage", mode="before")
    @classmethod
    def storage_as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value


class ComputeProfile(SDLModel):
    resources: Optional[Resources] = None


class SignedBy(SDLModel):
    """Auditor signatures required of a provider."""
    all_of: List[str] = Field(default_factory=list, alias="allOf")
    any_of: List[str] = Field(default_factory=list, alias="anyOf")


class Price(SDLModel):
    """Bid price for a service."""
    denom: Optional[str] = None
    amount: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, value):
        return _as_text(value)


class PlacementProfile(SDLModel):
    """Provider attributes, auditors and per-service pricing."""
    attributes: Dict[str, str] = Field(default_factory=dict)
    signed_by: Optional[SignedBy] = Field(default=None, alias="signedBy")
    pricing: Dict[str, Price] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def attributes_as_text(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {_key_text(key): str(item).lower() if isinstance(item, bool) else str(item)
                    for key, item in value.items()}
        return value

    @field_validator("pricing", mode="before")
    @classmethod
    def default_pricing(cls, value):
        return _normalize_mapping(value)


class Profiles(SDLModel):
    compute: Optional[Dict[str, ComputeProfile]] = None
    placement: Optional[Dict[str, PlacementProfile]] = None

    @field_validator("compute", "placement", mode="before")
    @classmethod
    def default_profiles(cls, value):
        return value if value is None else _normalize_mapping(value, depth=1)


class DeploymentEntry(SDLModel):
    """Compute profile and replica count of a service under one placement."""
    profile: Optional[str] = None
    count: Optional[int] = None

    @field_validator("profile", mode="before")
    @classmethod
    def profile_as_text(cls, value):
        return _as_text(value)


class ServiceDefinition(SDLModel):
    """Root SDL document."""
    version: Optional[str] = None
    services: Dict[str, Service] = Field(default_factory=dict)
    profiles: Optional[Profiles] = None
    deployment: Dict[str, Dict[str, DeploymentEntry]] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value):
        return _as_text(value)

    @field_validator("services", mode="before")
    @classmethod
    def default_services(cls, value):
        return _normalize_mapping(value, depth=1)

    @field_validator("deployment", mode="before")
    @classmethod
    def default_deployment(cls, value):
        return _normalize_mapping(value, depth=2)

    @property
    def compute_profiles(self) -> Dict[str, ComputeProfile]:
        if self.profiles is None or self.profiles.compute is None:
            return {}
        return self.profiles.compute

    @property
    def placement_profiles(self) -> Dict[str, PlacementProfile]:
        if self.profiles is None or self.profiles.placement is None:
            return {}
        return self.profiles.placement

    def iter_deployments(self):
        """Yield (service name, placement name, entry) in declaration order."""
        for service_name, placements in self.deployment.items():
            for placement_name, entry in placements.items():
                yield service_name, placement_name, entry


DocumentInput = Union[str, bytes, Dict[str, Any], ServiceDefinition]
