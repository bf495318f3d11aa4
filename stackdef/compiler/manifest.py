"""Provider-facing manifest built from compiled groups."""
from typing import Any, Dict, List

from ..sdl.schema import DEFAULT_VERSION
from .models import ManifestGroup


class ManifestBuilder:
    """Groups compiled services by placement into the provider manifest layout."""

    @staticmethod
    def build(groups: List[ManifestGroup], version: str = DEFAULT_VERSION) -> Dict[str, Any]:
        """Build the provider manifest.

        Args:
            groups: Output of ManifestCompiler.compile.
            version: SDL version of the source document.

        Returns:
            Dict[str, Any]: Manifest with one group per placement, in the order
                placements first appear.
        """
        by_placement: Dict[str, Dict[str, Any]] = {}

        for group in groups:
            if group.placement not in by_placement:
                requirements = group.requirements
                by_placement[group.placement] = {
                    "name": group.placement,
                    "requirements": {
                        "signedBy": {
                            "allOf": list(requirements.signed_by_all_of),
                            "anyOf": list(requirements.signed_by_any_of),
                        },
                        "attributes": [
                            {"key": key, "value": value} for key, value in requirements.attributes
                        ],
                    },
                    "services": [],
                }
            by_placement[group.placement]["services"].append(ManifestBuilder._service(group))

        return {
            "version": version,
            "groups": list(by_placement.values()),
        }

    @staticmethod
    def _service(group: ManifestGroup) -> Dict[str, Any]:
        resources = group.resources
        return {
            "name": group.name,
            "image": group.image,
            "count": group.count,
            "resources": {
                "cpu": {"units": {"val": resources.millicpu}},
                "memory": {"quantity": {"val": resources.memory}},
                "storage": [
                    {"name": volume.name or "default", "quantity": {"val": volume.size}}
                    for volume in resources.storage
                ],
            },
            "price": {"denom": group.price.denom, "amount": group.price.amount},
            "expose": [
                {
                    "port": rule.port,
                    "externalPort": rule.external_port,
                    "proto": rule.proto,
                    "service": rule.service,
                    "global": rule.global_,
                } for rule in group.expose
            ],
        }
