"""Compiles validated SDL documents into manifest groups."""
from typing import List, Tuple

from ..sdl.errors import ValidationError
from ..sdl.schema import ComputeProfile, PlacementProfile, Service, ServiceDefinition
from ..sdl.units import (
    is_whole_millicores,
    parse_cpu_units,
    parse_memory_size,
    parse_price_amount,
    parse_storage_size,
)
from .models import (
    ExposedPort,
    ManifestGroup,
    PlacementRequirements,
    Price,
    ResourceUnits,
    StorageUnits,
)


class ManifestCompiler:
    """Resolves each deployment entry into a ready-to-bid manifest group.

    The compiler expects a document that already passed SDLValidator. It
    still re-checks every reference and aborts on the first one it cannot
    resolve; no partial manifest is returned.
    """

    def __init__(self, debug: bool = False):
        """Initialize the compiler.

        Args:
            debug: If True, print verbose debug information.
        """
        self.debug = debug

    def compile(self, sdl: ServiceDefinition) -> List[ManifestGroup]:
        """Compile the deployment mapping into manifest groups.

        Args:
            sdl: Parsed, validated document.

        Returns:
            List[ManifestGroup]: One group per (service, placement) pair, in
                declaration order.

        Raises:
            ValidationError: If a service, placement, compute profile or price
                cannot be resolved, or a resource quantity is invalid.
        """
        groups = []
        compute = sdl.compute_profiles
        placements = sdl.placement_profiles

        for service_name, placement_name, entry in sdl.iter_deployments():
            service = sdl.services.get(service_name)
            profile = compute.get(entry.profile) if entry.profile else None
            placement = placements.get(placement_name)

            if service is None or profile is None or placement is None:
                raise ValidationError(
                    f"Missing service or compute profile for {service_name}",
                    context={"placement": placement_name, "profile": entry.profile},
                )

            price = placement.pricing.get(service_name)
            if price is None or not price.denom or not price.amount:
                raise ValidationError(
                    f"Missing pricing for {service_name} in placement {placement_name}",
                    context={"placement": placement_name},
                )
            if parse_price_amount(price.amount) is None:
                raise ValidationError(
                    f"Invalid price amount for {service_name} in placement {placement_name}",
                    context={"placement": placement_name, "amount": price.amount},
                )

            group = ManifestGroup(
                name=service_name,
                placement=placement_name,
                image=service.image,
                resources=self._resolve_resources(service_name, entry.profile, profile),
                count=entry.count,
                price=Price(denom=price.denom, amount=price.amount),
                requirements=self._resolve_requirements(placement),
                expose=self._resolve_expose(service),
            )
            groups.append(group)

            if self.debug:
                print(f"Debug: Compiled {service_name} on {placement_name}: "
                      f"{group.resources.millicpu}m cpu, {group.resources.memory} bytes memory, "
                      f"count {group.count}")

        return groups

    def _resolve_resources(self, service_name: str, profile_name: str,
                           profile: ComputeProfile) -> ResourceUnits:
        resources = profile.resources
        error = ValidationError(
            f"Invalid resources in compute profile '{profile_name}' for {service_name}",
            context={"profile": profile_name},
        )
        if resources is None or resources.cpu is None or resources.memory is None:
            raise error

        cpu = parse_cpu_units(resources.cpu.units)
        memory = parse_memory_size(resources.memory.size)
        if cpu is None or cpu <= 0 or not is_whole_millicores(cpu) or memory == 0:
            raise error

        storage = []
        for volume in resources.storage:
            size = parse_storage_size(volume.size)
            if size == 0:
                raise error
            storage.append(StorageUnits(size=size, name=volume.name))

        return ResourceUnits(cpu=cpu, memory=memory, storage=tuple(storage))

    def _resolve_requirements(self, placement: PlacementProfile) -> PlacementRequirements:
        signed_by = placement.signed_by
        return PlacementRequirements(
            attributes=tuple(placement.attributes.items()),
            signed_by_all_of=tuple(signed_by.all_of) if signed_by else (),
            signed_by_any_of=tuple(signed_by.any_of) if signed_by else (),
        )

    def _resolve_expose(self, service: Service) -> Tuple[ExposedPort, ...]:
        ports = []
        for rule in service.expose:
            target = rule.to[0] if rule.to else None
            ports.append(ExposedPort(
                port=rule.port,
                external_port=rule.as_ or rule.port,
                proto=(rule.proto or "TCP").upper(),
                service=target.service if target else None,
                global_=bool(target.global_) if target else False,
            ))
        return tuple(ports)
