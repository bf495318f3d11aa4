"""Tests for SDL template generation."""
import pytest
from stackdef.compiler.compiler import ManifestCompiler
from stackdef.scaffold.generator import TemplateGenerator
from stackdef.validation.validator import SDLValidator

@pytest.fixture
def generator():
    return TemplateGenerator()

@pytest.mark.parametrize("kind", ["web-app", "api-server", "database", "worker"])
def test_templates_validate_and_compile(generator, kind):
    """Test that every bundled template is a valid, compilable document."""
    sdl = generator.generate(kind)
    result = SDLValidator().validate(sdl)
    assert result.valid, result.errors
    assert result.warnings == []
    assert len(ManifestCompiler().compile(sdl)) == 1

def test_web_app_defaults(generator):
    """Test the web-app template defaults."""
    sdl = generator.generate("web-app")
    assert sdl.version == "2.0"
    assert sdl.services["web"].image == "nginx:latest"
    assert sdl.placement_profiles["datacenter"].signed_by.any_of == [
        "akash1365yvmc4s7awdyj3n2sav7xfx76adc6dnmlx63"
    ]

def test_template_contents(generator):
    """Test template specific settings."""
    assert "NODE_ENV=production" in generator.generate("api-server").services["api"].env
    assert "POSTGRES_DB=myapp" in generator.generate("database").services["db"].env
    assert generator.generate("worker").services["worker"].command == ["python", "worker.py"]

def test_overrides(generator):
    """Test overriding name, image and count."""
    sdl = generator.generate("web-app", name="site", image="ghcr.io/acme/site:1.2", count=4)
    assert sdl.services["site"].image == "ghcr.io/acme/site:1.2"
    assert sdl.deployment["site"]["datacenter"].count == 4
    assert sdl.placement_profiles["datacenter"].pricing["site"].amount == "1000"

def test_none_overrides_keep_defaults(generator):
    """Test that unset options fall back to the template defaults."""
    sdl = generator.generate("database", name=None, image=None)
    assert sdl.services["db"].image == "postgres:15"

def test_unknown_template(generator):
    """Test that an unknown template kind is rejected."""
    with pytest.raises(ValueError, match="Unknown template 'mainframe'"):
        generator.render("mainframe")

def test_kinds():
    """Test listing template kinds."""
    assert TemplateGenerator.kinds() == ["web-app", "api-server", "database", "worker"]
