"""Conversion of legacy SDL v1 documents to the v2 layout."""
from typing import Any, Dict

from .schema import DEFAULT_VERSION


class SDLConverter:
    """Rewrites SDL v1 data into v2 structure."""

    @staticmethod
    def convert_to_v2(sdl_v1: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a v1 document to v2.

        v1 profiles are flat (cpu/memory/storage on the profile) and each
        deployment names a single profile; v2 nests resources and keys
        deployments by placement. Converted deployments use a "default"
        placement.

        Args:
            sdl_v1: Parsed v1 document.

        Returns:
            Dict[str, Any]: New v2 document; the input is left untouched.
        """
        sdl_v2 = {
            "version": DEFAULT_VERSION,
            "services": {},
            "profiles": {
                "compute": {},
                "placement": {},
            },
            "deployment": {},
        }

        for name, service in (sdl_v1.get("services") or {}).items():
            converted = {"image": service.get("image")}
            if service.get("expose"):
                converted["expose"] = [
                    {
                        "port": rule.get("port"),
                        "as": rule.get("port"),
                        "to": [{"global": rule.get("global", False)}],
                    } for rule in service["expose"]
                ]
            sdl_v2["services"][name] = converted

        for name, profile in (sdl_v1.get("profiles") or {}).items():
            sdl_v2["profiles"]["compute"][name] = {
                "resources": {
                    "cpu": {"units": str(profile.get("cpu", 1))},
                    "memory": {"size": profile.get("memory", "512Mi")},
                    "storage": [{"size": profile.get("storage", "1Gi")}],
                }
            }

        for name, deployment in (sdl_v1.get("deployment") or {}).items():
            sdl_v2["deployment"][name] = {
                "default": {
                    "profile": deployment.get("profile", name),
                    "count": deployment.get("count", 1),
                }
            }

        return sdl_v2
