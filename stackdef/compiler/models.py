"""Data models for compiled manifest groups."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class StorageUnits:
    """Resolved storage volume."""
    size: int
    name: Optional[str] = None


@dataclass(frozen=True)
class ResourceUnits:
    """Resolved compute resources of one replica."""
    cpu: Decimal
    memory: int
    storage: Tuple[StorageUnits, ...] = ()

    @property
    def millicpu(self) -> int:
        """Cpu in thousandths of a core."""
        return int(self.cpu * 1000)

    @property
    def total_storage(self) -> int:
        return sum(volume.size for volume in self.storage)


@dataclass(frozen=True)
class Price:
    """Bid price for one replica."""
    denom: str
    amount: str


@dataclass(frozen=True)
class PlacementRequirements:
    """Provider requirements of a placement."""
    attributes: Tuple[Tuple[str, str], ...] = ()
    signed_by_all_of: Tuple[str, ...] = ()
    signed_by_any_of: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExposedPort:
    """Exposed port of a service."""
    port: int
    external_port: int
    proto: str = "TCP"
    service: Optional[str] = None
    global_: bool = False


@dataclass(frozen=True)
class ManifestGroup:
    """Compiled resource request for one service under one placement."""
    name: str
    placement: str
    image: Optional[str]
    resources: ResourceUnits
    count: int
    price: Price
    requirements: PlacementRequirements = field(default_factory=PlacementRequirements)
    expose: Tuple[ExposedPort, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain data for JSON or YAML output."""
        return {
            "name": self.name,
            "placement": self.placement,
            "image": self.image,
            "resources": {
                "cpu": str(self.resources.cpu),
                "memory": self.resources.memory,
                "storage": [
                    {"name": volume.name, "size": volume.size} for volume in self.resources.storage
                ],
            },
            "count": self.count,
            "price": {"denom": self.price.denom, "amount": self.price.amount},
            "requirements": {
                "attributes": dict(self.requirements.attributes),
                "signedBy": {
                    "allOf": list(self.requirements.signed_by_all_of),
                    "anyOf": list(self.requirements.signed_by_any_of),
                },
            },
            "expose": [
                {
                    "port": rule.port,
                    "externalPort": rule.external_port,
                    "proto": rule.proto,
                    "service": rule.service,
                    "global": rule.global_,
                } for rule in self.expose
            ],
        }
