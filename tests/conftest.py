"""Configuration options and fixtures for testing"""
import pytest

from isoenrich import FractionType
from isoenrich.data import defaultRegistry


@pytest.fixture
def registry():
    """Fresh registry with the built-in elements and materials"""
    return defaultRegistry()


@pytest.fixture
def molybdenum(registry):
    return registry.element("Mo")


@pytest.fixture
def momet(registry):
    return registry.material("momet")


@pytest.fixture
def moo3(registry):
    return registry.material("moo3")


@pytest.fixture(params=[FractionType.AMOUNT, FractionType.MASS], ids=["amount", "mass"])
def fractionType(request):
    return request.param
