"""Structural checks of an SDL document."""
from ..sdl.schema import (
    SUPPORTED_VERSIONS,
    VALID_PROTOCOLS,
    ComputeProfile,
    PlacementProfile,
    Service,
    ServiceDefinition,
)
from ..sdl.units import (
    is_size_literal,
    is_whole_millicores,
    parse_cpu_units,
    parse_memory_size,
    parse_price_amount,
    parse_storage_size,
)
from .models import ValidationResult


class StructuralValidator:
    """Checks required sections and the shape of each service, profile and deployment.

    Problems are accumulated on the result instead of raised, in document
    declaration order.
    """

    def __init__(self, debug: bool = False):
        """Initialize the validator.

        Args:
            debug: If True, print verbose debug information.
        """
        self.debug = debug

    def validate(self, sdl: ServiceDefinition, result: ValidationResult) -> ValidationResult:
        """Run all structural checks.

        Args:
            sdl: Parsed document.
            result: Result to append errors and warnings to.

        Returns:
            ValidationResult: The same result object.
        """
        self._validate_version(sdl, result)
        self._validate_services(sdl, result)
        self._validate_profiles(sdl, result)
        self._validate_deployment(sdl, result)

        if self.debug:
            print(f"Debug: Structural validation found {len(result.errors)} errors, "
                  f"{len(result.warnings)} warnings")

        return result

    def _validate_version(self, sdl: ServiceDefinition, result: ValidationResult) -> None:
        if not sdl.version:
            result.error("SDL version is required")
        elif sdl.version not in SUPPORTED_VERSIONS:
            result.warn(f"SDL version {sdl.version} may not be supported")

    def _validate_services(self, sdl: ServiceDefinition, result: ValidationResult) -> None:
        if not sdl.services:
            result.error("At least one service must be defined")
            return

        for name, service in sdl.services.items():
            self._validate_service(name, service, sdl, result)

    def _validate_service(self, name: str, service: Service, sdl: ServiceDefinition,
                          result: ValidationResult) -> None:
        if not service.image:
            result.error(f"Service '{name}' must specify an image")

        for rule in service.expose:
            if not rule.port:
                result.error(f"Service '{name}' expose configuration must specify a port")
            if rule.proto and rule.proto.upper() not in VALID_PROTOCOLS:
                result.error(f"Service '{name}' expose protocol must be TCP or UDP")
            for target in rule.to:
                if target.service and target.service not in sdl.services:
                    result.warn(f"Service '{name}' exposes to undefined service '{target.service}'")

    def _validate_profiles(self, sdl: ServiceDefinition, result: ValidationResult) -> None:
        if sdl.profiles is None:
            result.error("Profiles section is required")
            return

        if not sdl.profiles.compute:
            result.error("Compute profiles are required")
        else:
            for name, profile in sdl.profiles.compute.items():
                self._validate_compute_profile(name, profile, result)

        if not sdl.profiles.placement:
            result.error("Placement profiles are required")
        else:
            for name, placement in sdl.profiles.placement.items():
                self._validate_placement(name, placement, sdl, result)

    def _validate_compute_profile(self, name: str, profile: ComputeProfile,
                                  result: ValidationResult) -> None:
        resources = profile.resources
        if resources is None:
            result.error(f"Compute profile '{name}' must specify resources")
            return

        units = resources.cpu.units if resources.cpu else None
        if not units:
            result.error(f"Compute profile '{name}' must specify cpu units")
        else:
            cores = parse_cpu_units(units)
            if cores is None or cores <= 0:
                result.error("Invalid CPU units: must be positive")
            elif not is_whole_millicores(cores):
                result.error("Invalid CPU units: must be a whole number of millicores")

        size = resources.memory.size if resources.memory else None
        if not size:
            result.error(f"Compute profile '{name}' must specify memory size")
        elif not is_size_literal(size):
            result.error("Invalid memory size format")
        elif parse_memory_size(size) == 0:
            result.error("Invalid memory size: must be greater than 0")

        for volume in resources.storage:
            if not is_size_literal(volume.size):
                result.error("Invalid storage size format")
            elif parse_storage_size(volume.size) == 0:
                result.error("Invalid storage size: must be greater than 0")

    def _validate_placement(self, name: str, placement: PlacementProfile, sdl: ServiceDefinition,
                            result: ValidationResult) -> None:
        for service_name, price in placement.pricing.items():
            if service_name not in sdl.services:
                result.error(f"Placement '{name}' has pricing for undefined service '{service_name}'")
            if not price.denom or not price.amount:
                result.error(f"Pricing for service '{service_name}' in placement '{name}' "
                             f"must specify denom and amount")
            elif parse_price_amount(price.amount) is None:
                result.error(f"Pricing for service '{service_name}' in placement '{name}' "
                             f"must have a non-negative numeric amount")

    def _validate_deployment(self, sdl: ServiceDefinition, result: ValidationResult) -> None:
        if not sdl.deployment:
            result.error("Deployment section is required")
            return

        for service_name, placement_name, entry in sdl.iter_deployments():
            key = f"{service_name}.{placement_name}"
            if not entry.profile:
                result.error(f"Deployment '{key}' must specify a profile")
            if entry.count is None:
                result.error(f"Deployment '{key}' must specify a count")
            elif entry.count <= 0:
                result.error(f"Deployment count must be positive for '{key}'")
