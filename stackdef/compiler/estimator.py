"""Resource and cost totals for a compiled deployment."""
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from ..sdl.units import parse_price_amount
from .models import ManifestGroup


@dataclass
class GroupEstimate:
    """Totals for one service under one placement."""
    service: str
    placement: str
    count: int
    cpu: Decimal
    memory: int
    storage: int
    denom: str
    unit_cost: Decimal

    @property
    def total_cost(self) -> Decimal:
        return self.unit_cost * self.count


@dataclass
class ResourceEstimate:
    """Totals across all groups of a deployment."""
    total_cpu: Decimal = Decimal(0)
    total_memory: int = 0
    total_storage: int = 0
    cost: Dict[str, Decimal] = field(default_factory=dict)
    breakdown: List[GroupEstimate] = field(default_factory=list)


class ResourceEstimator:
    """Sums requested resources and bid prices, multiplied by replica count."""

    @staticmethod
    def estimate(groups: List[ManifestGroup]) -> ResourceEstimate:
        """Estimate totals for compiled groups.

        Args:
            groups: Output of ManifestCompiler.compile.

        Returns:
            ResourceEstimate: Resource totals and cost per denomination.

        Raises:
            ValueError: If a price amount is not a non-negative number.
        """
        estimate = ResourceEstimate()
        cost = defaultdict(Decimal)

        for group in groups:
            unit_cost = parse_price_amount(group.price.amount)
            if unit_cost is None:
                raise ValueError(f"Invalid price amount '{group.price.amount}' for {group.name}")
            resources = group.resources
            entry = GroupEstimate(
                service=group.name,
                placement=group.placement,
                count=group.count,
                cpu=resources.cpu * group.count,
                memory=resources.memory * group.count,
                storage=resources.total_storage * group.count,
                denom=group.price.denom,
                unit_cost=unit_cost,
            )
            estimate.breakdown.append(entry)
            estimate.total_cpu += entry.cpu
            estimate.total_memory += entry.memory
            estimate.total_storage += entry.storage
            cost[entry.denom] += entry.total_cost

        estimate.cost = dict(cost)
        return estimate
