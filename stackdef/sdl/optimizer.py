"""Right-sizing of over-provisioned compute profiles."""
import copy
import math
from typing import Any, Dict

from .units import format_memory_size, parse_cpu_units, parse_memory_size, parse_storage_size

CPU_THRESHOLD = 2
MEMORY_THRESHOLD = 1024 ** 3
STORAGE_THRESHOLD = 5 * 1024 ** 3


class SDLOptimizer:
    """Halves compute profile requests that exceed the right-sizing thresholds."""

    @staticmethod
    def optimize(sdl: Dict[str, Any]) -> Dict[str, Any]:
        """Shrink over-provisioned compute profiles.

        Cpu above 2 cores is halved and rounded up to whole cores, memory
        above 1Gi is halved, and the first storage volume is halved when it
        is above 5Gi. Other sections are copied as they are.

        Args:
            sdl: Parsed v2 document as plain data.

        Returns:
            Dict[str, Any]: New document; the input is left untouched.
        """
        optimized = copy.deepcopy(sdl)
        compute = (optimized.get("profiles") or {}).get("compute") or {}

        for profile in compute.values():
            resources = (profile or {}).get("resources")
            if not isinstance(resources, dict):
                continue

            cpu = resources.get("cpu")
            if isinstance(cpu, dict):
                cores = parse_cpu_units(cpu.get("units"))
                if cores is not None and cores > CPU_THRESHOLD:
                    halved = math.ceil(cores / 2)
                    cpu["units"] = str(halved) if isinstance(cpu["units"], str) else halved

            memory = resources.get("memory")
            if isinstance(memory, dict):
                size = parse_memory_size(memory.get("size"))
                if size > MEMORY_THRESHOLD:
                    memory["size"] = format_memory_size(size / 2)

            storage = resources.get("storage")
            volume = storage[0] if isinstance(storage, list) and storage else storage
            if isinstance(volume, dict):
                size = parse_storage_size(volume.get("size"))
                if size > STORAGE_THRESHOLD:
                    volume["size"] = format_memory_size(size / 2)

        return optimized
