"""Data models for validation results."""
from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass
class ValidationResult:
    """Outcome of validating an SDL document."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """A document is valid when no errors were reported."""
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Union[bool, List[str]]]:
        """Convert to the plain {valid, errors, warnings} structure."""
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
