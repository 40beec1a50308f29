import pytest

from fixtures import ENDPOINT, JWT_KEY, TOKEN, FakeSession
from services.plugin import Plugin


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def events():
    recorded = []

    def sink(name, data):
        recorded.append((name, data))

    sink.recorded = recorded
    return sink


@pytest.fixture
def plugin(session, events):
    return Plugin(endpoint=ENDPOINT, jwt_key=JWT_KEY, session=session, events=events)


@pytest.fixture
def token():
    return dict(TOKEN)
