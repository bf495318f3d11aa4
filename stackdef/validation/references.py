"""Cross-reference checks between the deployment mapping and its targets."""
from ..sdl.schema import ServiceDefinition
from .models import ValidationResult


class CrossReferenceValidator:
    """Checks that every deployment entry names an existing service, placement and profile."""

    def __init__(self, debug: bool = False):
        """Initialize the validator.

        Args:
            debug: If True, print verbose debug information.
        """
        self.debug = debug

    def validate(self, sdl: ServiceDefinition, result: ValidationResult) -> ValidationResult:
        """Check each (service, placement) -> profile triple in the deployment mapping.

        Args:
            sdl: Parsed document.
            result: Result to append errors to.

        Returns:
            ValidationResult: The same result object.
        """
        compute = sdl.compute_profiles
        placements = sdl.placement_profiles
        reported_services = set()

        for service_name, placement_name, entry in sdl.iter_deployments():
            if self.debug:
                print(f"Debug: Checking deployment {service_name}.{placement_name} "
                      f"-> profile {entry.profile}")

            if service_name not in sdl.services and service_name not in reported_services:
                result.error(f"Deployment references undefined service '{service_name}'")
                reported_services.add(service_name)

            placement = placements.get(placement_name)
            if placement is None:
                result.error(f"Deployment references undefined placement profile '{placement_name}'")
            elif service_name not in placement.pricing:
                result.error(f"Placement '{placement_name}' has no pricing for service '{service_name}'")

            if entry.profile and entry.profile not in compute:
                result.error(f"Deployment references undefined compute profile '{entry.profile}'")

        return result
