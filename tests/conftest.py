import pytest

from factories import make_incident


@pytest.fixture
def incident_factory():
    return make_incident
