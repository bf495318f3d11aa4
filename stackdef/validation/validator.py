"""SDL validation entry point."""
from ..sdl.errors import SDLError
from ..sdl.parser import SDLParser
from ..sdl.schema import DocumentInput, ServiceDefinition
from .models import ValidationResult
from .references import CrossReferenceValidator
from .structural import StructuralValidator


class SDLValidator:
    """Collects every structural and cross-reference problem of a document."""

    def __init__(self, debug: bool = False):
        """Initialize the validator.

        Args:
            debug: If True, print verbose debug information.
        """
        self.debug = debug
        self.structural = StructuralValidator(debug=debug)
        self.references = CrossReferenceValidator(debug=debug)

    def validate(self, sdl: ServiceDefinition) -> ValidationResult:
        """Validate a parsed document without raising.

        Args:
            sdl: Parsed document.

        Returns:
            ValidationResult: All errors and warnings found.
        """
        result = ValidationResult()
        self.structural.validate(sdl, result)
        self.references.validate(sdl, result)
        return result

    def validate_content(self, content: DocumentInput) -> ValidationResult:
        """Parse and validate raw SDL content.

        Parse failures are reported as a single error instead of raised.

        Args:
            content: JSON or YAML text, a mapping, or a parsed document.

        Returns:
            ValidationResult: All errors and warnings found.
        """
        try:
            sdl = SDLParser.parse(content)
        except SDLError as e:
            if self.debug:
                print(f"Debug: {e.describe()}")
            return ValidationResult(errors=[e.message])
        return self.validate(sdl)
