"""SDL document parser (JSON or YAML)."""
import json
from typing import Any

import yaml

from .errors import ParseError, SDLError, ValidationError
from .schema import DocumentInput, ServiceDefinition

REQUIRED_FIELDS = ("version", "services", "deployment")


class SDLParser:
    """Parser for Stack Definition Language documents."""

    @staticmethod
    def parse(content: DocumentInput) -> ServiceDefinition:
        """Parse raw SDL text or already structured data into a document.

        Args:
            content: JSON or YAML text, a mapping, or an existing document.

        Returns:
            ServiceDefinition: Parsed document tree.

        Raises:
            ParseError: If the content is not a well-formed SDL document.
            ValidationError: If required top-level fields are missing.
        """
        if isinstance(content, ServiceDefinition):
            return content

        try:
            data = SDLParser._load_data(content)

            if not isinstance(data, dict):
                raise ParseError("Invalid SDL syntax")

            missing = [field for field in REQUIRED_FIELDS if data.get(field) in (None, "")]
            if missing:
                raise ValidationError("Missing required SDL fields", context={"missing": missing})

            return ServiceDefinition.model_validate(data)
        except SDLError:
            raise
        except Exception as e:
            raise ParseError(f"Failed to parse SDL: {e}", cause=e) from e

    @staticmethod
    def load(file_path: str) -> ServiceDefinition:
        """Load and parse an SDL file.

        Args:
            file_path: Path to the SDL file (YAML or JSON).

        Returns:
            ServiceDefinition: Parsed document tree.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ParseError: If the file is not a well-formed SDL document.
            ValidationError: If required top-level fields are missing.
        """
        with open(file_path, 'r') as f:
            content = f.read()
        return SDLParser.parse(content)

    @staticmethod
    def _load_data(content: Any) -> Any:
        """Turn text into plain data, trying JSON before YAML."""
        if isinstance(content, bytes):
            content = content.decode("utf-8")

        if not isinstance(content, str):
            return content

        try:
            return json.loads(content)
        except ValueError:
            pass

        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ParseError("Invalid SDL syntax", cause=e) from e
