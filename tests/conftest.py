import pytest

from tests.fixtures.transport_fixtures import FakeClock, FakeTransport
from twitch_irc.irc.client import TwitchIRCClient
from twitch_irc.logging_config import error_aggregator


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(transport, clock):
    """Client with a fake transport and clock, not yet connected."""
    return TwitchIRCClient(transport=transport, clock=clock)


@pytest.fixture
def connected_client(client, transport):
    """Client after connect + join, with the handshake lines cleared."""
    assert client.connect("irc.example", 6667, "bot", "oauth:secret")
    client.join_channel("#Room")
    transport.sent.clear()
    return client


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    yield
    error_aggregator.reset()
