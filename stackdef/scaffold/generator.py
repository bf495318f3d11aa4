"""SDL template generator for common workloads."""
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..sdl.parser import SDLParser
from ..sdl.schema import DEFAULT_VERSION, ServiceDefinition

# Per-template defaults; any of them can be overridden when rendering
TEMPLATE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "web-app": {"name": "web", "image": "nginx:latest", "port": 80, "count": 1, "amount": "1000"},
    "api-server": {"name": "api", "image": "node:18-alpine", "port": 3000, "count": 2, "amount": "2000"},
    "database": {"name": "db", "image": "postgres:15", "port": 5432, "count": 1, "amount": "5000"},
    "worker": {"name": "worker", "image": "python:3.11-slim", "port": None, "count": 3, "amount": "8000"},
}


class TemplateGenerator:
    """Renders starter SDL documents from bundled templates."""

    def __init__(self, debug: bool = False):
        """Initialize the generator.

        Args:
            debug: If True, print verbose debug information.
        """
        self.debug = debug

        # Set up Jinja2 environment
        template_dir = Path(__file__).parent / "templates"
        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    @staticmethod
    def kinds() -> List[str]:
        """List the available template kinds."""
        return list(TEMPLATE_DEFAULTS)

    def render(self, kind: str, **params: Any) -> str:
        """Render a template to SDL YAML text.

        Args:
            kind: Template kind, one of kinds().
            **params: Overrides for name, image, port, count, denom, amount.

        Returns:
            str: SDL document text.

        Raises:
            ValueError: If the template kind is unknown.
        """
        if kind not in TEMPLATE_DEFAULTS:
            raise ValueError(f"Unknown template '{kind}'. Choose from: {', '.join(self.kinds())}")

        context = {"version": DEFAULT_VERSION, "denom": "uakt", **TEMPLATE_DEFAULTS[kind]}
        context.update({key: value for key, value in params.items() if value is not None})

        if self.debug:
            print(f"Debug: Rendering template {kind}.yaml.j2 with {context}")

        template = self.jinja_env.get_template(f"{kind}.yaml.j2")
        return template.render(**context)

    def generate(self, kind: str, **params: Any) -> ServiceDefinition:
        """Render a template and parse it into a document.

        Args:
            kind: Template kind, one of kinds().
            **params: Overrides passed to render().

        Returns:
            ServiceDefinition: Parsed document.
        """
        return SDLParser.parse(self.render(kind, **params))
