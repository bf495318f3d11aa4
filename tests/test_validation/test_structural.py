"""Tests for structural SDL validation."""
import copy

import pytest
from stackdef.sdl.parser import SDLParser
from stackdef.sdl.schema import ServiceDefinition
from stackdef.validation.models import ValidationResult
from stackdef.validation.structural import StructuralValidator

@pytest.fixture
def sdl_data():
    """Create a valid SDL document as plain data."""
    return {
        "version": "2.0",
        "services": {
            "web": {
                "image": "nginx:latest",
                "expose": [{"port": 80, "as": 80, "proto": "TCP", "to": [{"global": True}]}],
            }
        },
        "profiles": {
            "compute": {
                "web": {
                    "resources": {
                        "cpu": {"units": "0.5"},
                        "memory": {"size": "512Mi"},
                        "storage": [{"size": "1Gi"}],
                    }
                }
            },
            "placement": {
                "datacenter": {
                    "attributes": {"host": "akash"},
                    "pricing": {"web": {"denom": "uakt", "amount": "1000"}},
                }
            },
        },
        "deployment": {"web": {"datacenter": {"profile": "web", "count": 1}}},
    }

def run(data) -> ValidationResult:
    sdl = SDLParser.parse(data)
    return StructuralValidator().validate(sdl, ValidationResult())

def test_valid_document(sdl_data):
    """Test that a complete document has no structural errors."""
    result = run(sdl_data)
    assert result.valid
    assert result.errors == []
    assert result.warnings == []

def test_missing_version():
    """Test that a document without a version is reported."""
    result = StructuralValidator().validate(ServiceDefinition(), ValidationResult())
    assert result.errors[0] == "SDL version is required"

def test_unsupported_version_is_warning(sdl_data):
    """Test that an unknown version only warns."""
    sdl_data["version"] = "3.0"
    result = run(sdl_data)
    assert result.valid
    assert "SDL version 3.0 may not be supported" in result.warnings

def test_empty_services(sdl_data):
    """Test that at least one service is required."""
    sdl_data["services"] = {}
    result = run(sdl_data)
    assert "At least one service must be defined" in result.errors

def test_service_without_image(sdl_data):
    """Test that every service needs an image."""
    del sdl_data["services"]["web"]["image"]
    result = run(sdl_data)
    assert "Service 'web' must specify an image" in result.errors

def test_expose_rules(sdl_data):
    """Test port and protocol checks on expose rules."""
    sdl_data["services"]["web"]["expose"] = [{"proto": "HTTP"}]
    result = run(sdl_data)
    assert "Service 'web' expose configuration must specify a port" in result.errors
    assert "Service 'web' expose protocol must be TCP or UDP" in result.errors

def test_expose_to_undefined_service_warns(sdl_data):
    """Test that exposing to an unknown service only warns."""
    sdl_data["services"]["web"]["expose"][0]["to"] = [{"service": "cache"}]
    result = run(sdl_data)
    assert result.valid
    assert "Service 'web' exposes to undefined service 'cache'" in result.warnings

def test_missing_profiles(sdl_data):
    """Test that the profiles section is required."""
    del sdl_data["profiles"]
    result = run(sdl_data)
    assert result.errors == ["Profiles section is required"]

def test_missing_compute_profiles(sdl_data):
    """Test that compute profiles are required."""
    del sdl_data["profiles"]["compute"]
    result = run(sdl_data)
    assert "Compute profiles are required" in result.errors

def test_missing_placement_profiles(sdl_data):
    """Test that placement profiles are required."""
    sdl_data["profiles"]["placement"] = {}
    result = run(sdl_data)
    assert "Placement profiles are required" in result.errors

def test_invalid_resources(sdl_data):
    """Test cpu, memory and storage checks."""
    resources = sdl_data["profiles"]["compute"]["web"]["resources"]
    resources["cpu"]["units"] = "-1"
    resources["memory"]["size"] = "lots"
    resources["storage"] = [{"size": "0Gi"}]
    result = run(sdl_data)
    assert result.errors == [
        "Invalid CPU units: must be positive",
        "Invalid memory size format",
        "Invalid storage size: must be greater than 0",
    ]

def test_zero_cpu_and_memory(sdl_data):
    """Test that zero cpu and memory are rejected."""
    resources = sdl_data["profiles"]["compute"]["web"]["resources"]
    resources["cpu"]["units"] = "0"
    resources["memory"]["size"] = "0Mi"
    result = run(sdl_data)
    assert "Invalid CPU units: must be positive" in result.errors
    assert "Invalid memory size: must be greater than 0" in result.errors

@pytest.mark.parametrize("size", ["invalid-size-format", "not-a-valid-size", None])
def test_invalid_storage_size_format(sdl_data, size):
    """Test that a malformed storage size is reported."""
    sdl_data["profiles"]["compute"]["web"]["resources"]["storage"] = [{"size": size}]
    result = run(sdl_data)
    assert not result.valid
    assert result.errors == ["Invalid storage size format"]

def test_missing_resource_fields(sdl_data):
    """Test that cpu units and memory size are required."""
    sdl_data["profiles"]["compute"]["web"]["resources"] = {"storage": []}
    result = run(sdl_data)
    assert "Compute profile 'web' must specify cpu units" in result.errors
    assert "Compute profile 'web' must specify memory size" in result.errors

def test_missing_resources(sdl_data):
    """Test that a compute profile needs resources."""
    sdl_data["profiles"]["compute"]["web"] = {}
    result = run(sdl_data)
    assert result.errors == ["Compute profile 'web' must specify resources"]

def test_pricing_for_undefined_service(sdl_data):
    """Test that pricing keys must name defined services."""
    sdl_data["profiles"]["placement"]["datacenter"]["pricing"]["db"] = {"denom": "uakt", "amount": "10"}
    result = run(sdl_data)
    assert result.errors == ["Placement 'datacenter' has pricing for undefined service 'db'"]

def test_incomplete_pricing(sdl_data):
    """Test that pricing needs denom and amount."""
    sdl_data["profiles"]["placement"]["datacenter"]["pricing"]["web"] = {"denom": "uakt"}
    result = run(sdl_data)
    assert result.errors == ["Pricing for service 'web' in placement 'datacenter' must specify denom and amount"]

@pytest.mark.parametrize("amount", ["abc", "-5", "NaN"])
def test_non_numeric_amount(sdl_data, amount):
    """Test that a price amount must be a non-negative number."""
    sdl_data["profiles"]["placement"]["datacenter"]["pricing"]["web"]["amount"] = amount
    result = run(sdl_data)
    assert result.errors == [
        "Pricing for service 'web' in placement 'datacenter' must have a non-negative numeric amount"
    ]

def test_decimal_amount(sdl_data):
    """Test that a fractional price amount is accepted."""
    sdl_data["profiles"]["placement"]["datacenter"]["pricing"]["web"]["amount"] = "0.5"
    assert run(sdl_data).valid

def test_sub_millicore_cpu(sdl_data):
    """Test that cpu units must be a whole number of millicores."""
    sdl_data["profiles"]["compute"]["web"]["resources"]["cpu"]["units"] = "0.0001"
    result = run(sdl_data)
    assert result.errors == ["Invalid CPU units: must be a whole number of millicores"]

def test_deployment_shape(sdl_data):
    """Test that deployment entries need a profile and a positive count."""
    sdl_data["deployment"]["web"] = {
        "datacenter": {"count": 0},
        "eastcoast": {"profile": "web"},
        "westcoast": {"profile": "web", "count": -1},
    }
    result = run(sdl_data)
    assert result.errors == [
        "Deployment 'web.datacenter' must specify a profile",
        "Deployment count must be positive for 'web.datacenter'",
        "Deployment 'web.eastcoast' must specify a count",
        "Deployment count must be positive for 'web.westcoast'",
    ]

def test_empty_deployment():
    """Test that a document without deployments is reported."""
    sdl = ServiceDefinition(version="2.0")
    result = StructuralValidator().validate(sdl, ValidationResult())
    assert "Deployment section is required" in result.errors

def test_errors_follow_declaration_order(sdl_data):
    """Test that messages come out in document order."""
    second = copy.deepcopy(sdl_data["services"]["web"])
    del second["image"]
    del sdl_data["services"]["web"]["image"]
    sdl_data["services"]["api"] = second
    result = run(sdl_data)
    assert result.errors == [
        "Service 'web' must specify an image",
        "Service 'api' must specify an image",
    ]
