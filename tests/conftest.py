import pytest

from triage_rulesets.catalog import load_catalog
from triage_rulesets.engine import DecisionEngine


@pytest.fixture(scope="session")
def catalog():
    """The packaged 7-question catalog, loaded once per test session."""
    return load_catalog()


@pytest.fixture
def engine(catalog):
    return DecisionEngine(catalog)
