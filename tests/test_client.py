"""
Tests for the TwitchIRCClient connect / send / poll cycle
"""

from __future__ import annotations

import logging

import pytest

from tests.fixtures.transport_fixtures import FakeTransport
from twitch_irc.config.model import ClientConfig
from twitch_irc.errors.internal import ClientError, TwitchIRCError
from twitch_irc.irc.client import TwitchIRCClient
from twitch_irc.irc.models import ChatMessage, ConnectionState


class TestConnect:
    def test_initial_state(self, client):
        assert client.state is ConnectionState.UNCONNECTED
        assert client.min_send_interval_ms == 2000
        assert client.pending_count == 0
        assert client.channel is None

    def test_connect_sends_auth_sequence_in_order(self, client, transport):
        result = client.connect("irc.example", 6667, "bot", "oauth:secret")
        assert result
        assert result.error is None
        assert client.state is ConnectionState.CONNECTED
        assert transport.connect_calls == [("irc.example", 6667)]
        assert transport.sent_lines == ["PASS oauth:secret", "USER bot", "NICK bot"]

    def test_connect_failure_reports_unable_to_connect(self, clock):
        transport = FakeTransport(connect_ok=False)
        client = TwitchIRCClient(transport=transport, clock=clock)
        result = client.connect("irc.example", 6667, "bot", "oauth:secret")
        assert not result
        assert result.error is ClientError.UNABLE_TO_CONNECT
        assert client.state is ConnectionState.UNCONNECTED
        assert transport.sent == []
        with pytest.raises(TwitchIRCError) as exc:
            result.raise_for_error()
        assert exc.value.kind is ClientError.UNABLE_TO_CONNECT

    def test_auth_lines_ignore_rate_limit(self, client, transport):
        client.connect("irc.example", 6667, "bot", "oauth:secret")
        # All three went out back to back on the same clock tick.
        assert len(transport.sent) == 3

    def test_join_channel_records_channel_and_sends_immediately(
        self, client, transport
    ):
        client.connect("irc.example", 6667, "bot", "oauth:secret")
        result = client.join_channel("#SomeRoom")
        assert result
        assert client.channel == "someroom"
        assert transport.sent_lines[-1] == "JOIN #someroom"

    def test_close_moves_to_closed(self, connected_client, transport):
        connected_client.close()
        assert connected_client.state is ConnectionState.CLOSED
        assert transport.close_calls == 1
        assert not connected_client.connected

    def test_context_manager_closes(self, transport, clock):
        with TwitchIRCClient(transport=transport, clock=clock) as client:
            client.connect("irc.example", 6667, "bot", "oauth:x")
        assert client.state is ConnectionState.CLOSED
        assert transport.close_calls == 1

    def test_from_config_connects_and_joins(self, transport, clock):
        config = ClientConfig(
            username="Bot_Name",
            oauth_token="token123",
            channel="#Room",
            host="localhost",
            port=7000,
            min_send_interval_ms=500,
        )
        client = TwitchIRCClient.from_config(config, transport=transport, clock=clock)
        assert client.min_send_interval_ms == 500
        assert client.connect_from_config()
        assert transport.connect_calls == [("localhost", 7000)]
        assert transport.sent_lines == [
            "PASS oauth:token123",
            "USER bot_name",
            "NICK bot_name",
            "JOIN #room",
        ]

    def test_connect_from_config_requires_config(self, client):
        with pytest.raises(ValueError):
            client.connect_from_config()


class TestSend:
    def test_send_when_not_connected_fails(self, client):
        result = client.send("PRIVMSG #x :hi")
        assert not result
        assert result.error is ClientError.UNABLE_TO_CONNECT

    def test_channel_message_format(self, connected_client, clock, transport):
        clock.advance(2001)
        assert connected_client.send_channel_message("hello chat")
        assert transport.sent_lines == ["PRIVMSG #room :hello chat"]

    def test_channel_message_without_channel_is_not_sent(self, client, transport):
        client.connect("irc.example", 6667, "bot", "oauth:x")
        transport.sent.clear()
        result = client.send_channel_message("hello")
        assert not result
        assert result.error is None
        assert transport.sent == []

    def test_second_message_inside_interval_is_queued(
        self, connected_client, clock, transport
    ):
        clock.advance(2001)
        assert connected_client.send_channel_message("one")
        clock.advance(100)
        result = connected_client.send_channel_message("two", should_queue=True)
        assert not result
        assert result.queued
        assert connected_client.pending_count == 1
        assert transport.sent_lines == ["PRIVMSG #room :one"]

    def test_min_send_interval_setter(self, connected_client, clock, transport):
        connected_client.min_send_interval_ms = 50
        assert connected_client.min_send_interval_ms == 50
        clock.advance(51)
        assert connected_client.send_channel_message("quick")
        with pytest.raises(ValueError):
            connected_client.min_send_interval_ms = -5

    def test_send_after_connection_drop_marks_closed(
        self, connected_client, transport, caplog
    ):
        caplog.set_level(logging.WARNING, logger="twitch_irc")
        transport.connected = False
        result = connected_client.send("PRIVMSG #room :x")
        assert result.error is ClientError.UNABLE_TO_CONNECT
        assert connected_client.state is ConnectionState.CLOSED
        assert "Connection lost" in caplog.text


class TestPoll:
    def test_poll_when_disconnected_fails(self, client):
        result = client.poll()
        assert not result
        assert result.error is ClientError.UNABLE_TO_CONNECT

    def test_poll_dispatches_chat_messages_with_timestamp(
        self, connected_client, transport, clock
    ):
        received: list[ChatMessage] = []
        connected_client.add_listener("", "", lambda m, c: received.append(m))
        transport.feed(":nick!nick@h PRIVMSG #room :hello")
        clock.advance(7)

        result = connected_client.poll()

        assert result
        assert result.lines_read == 1
        assert received == [
            ChatMessage(timestamp_ms=clock.now, username="nick", text="hello")
        ]
        assert result.dispatched == received

    def test_poll_drains_every_available_line(self, connected_client, transport):
        seen: list[str] = []
        connected_client.add_listener("", "", lambda m, c: seen.append(m.text))
        transport.feed(
            ":a!a@h PRIVMSG #room :one",
            ":tmi.twitch.tv 366 bot #room :End of /NAMES list",
            ":b!b@h PRIVMSG #room :two",
        )
        result = connected_client.poll()
        assert result.lines_read == 3
        assert seen == ["one", "two"]
        assert connected_client.poll().lines_read == 0

    def test_keepalive_is_answered_immediately_and_not_dispatched(
        self, connected_client, transport, clock
    ):
        fired: list[ChatMessage] = []
        connected_client.add_listener("", "", lambda m, c: fired.append(m))
        # Rate budget is exhausted by the JOIN; the PONG must still go out.
        transport.feed("PING :tmi.twitch.tv")
        result = connected_client.poll()
        assert result.keepalives == 1
        assert transport.sent_lines == ["PONG :tmi.twitch.tv"]
        assert fired == []
        assert connected_client.get_stats()["keepalives_answered"] == 1

    def test_handler_receives_client_handle_and_can_reply(
        self, connected_client, transport, clock
    ):
        def reply(message, client):
            client.send_channel_message(f"hi {message.username}", should_queue=True)

        connected_client.add_listener("greet", "hello", reply)
        clock.advance(2001)
        transport.feed(":nick!n@h PRIVMSG #room :hello bot")
        connected_client.poll()
        assert transport.sent_lines == ["PRIVMSG #room :hi nick"]

    def test_queue_drains_in_fifo_order_one_per_poll(
        self, connected_client, transport, clock
    ):
        for text in ("A", "B", "C"):
            connected_client.send_channel_message(text, should_queue=True)
        assert connected_client.pending_count == 3

        # Interval not yet elapsed since the JOIN: nothing drains.
        assert connected_client.poll().drained is False
        assert transport.sent == []

        sent_per_poll = []
        for _ in range(3):
            clock.advance(2001)
            result = connected_client.poll()
            assert result.drained
            sent_per_poll.append(transport.sent_lines[-1])

        assert sent_per_poll == [
            "PRIVMSG #room :A",
            "PRIVMSG #room :B",
            "PRIVMSG #room :C",
        ]
        assert connected_client.pending_count == 0

    def test_only_one_queued_entry_per_poll_even_after_long_wait(
        self, connected_client, transport, clock
    ):
        connected_client.send_channel_message("A", should_queue=True)
        connected_client.send_channel_message("B", should_queue=True)
        clock.advance(60_000)
        connected_client.poll()
        assert transport.sent_lines == ["PRIVMSG #room :A"]
        assert connected_client.pending_count == 1

    def test_handler_error_does_not_abort_poll(self, connected_client, transport):
        seen: list[str] = []

        def boom(message, client):
            raise ValueError("nope")

        connected_client.add_listener("bad", "boom", boom)
        connected_client.add_listener("", "", lambda m, c: seen.append(m.text))
        transport.feed(":a!a@h PRIVMSG #room :boom", ":b!b@h PRIVMSG #room :fine")
        result = connected_client.poll()
        assert result.lines_read == 2
        assert seen == ["fine"]
        assert connected_client.get_stats()["handler_errors"] == 1

    def test_handler_error_propagates_when_requested(self, transport, clock):
        client = TwitchIRCClient(
            transport=transport, clock=clock, propagate_handler_errors=True
        )
        client.connect("irc.example", 6667, "bot", "oauth:x")

        def boom(message, client):
            raise ValueError("nope")

        client.add_listener("bad", "boom", boom)
        transport.feed(":a!a@h PRIVMSG #room :boom")
        with pytest.raises(ValueError, match="nope"):
            client.poll()

    def test_handler_closing_client_skips_queue_drain(
        self, connected_client, transport, clock
    ):
        connected_client.send_channel_message("later", should_queue=True)
        connected_client.add_listener("quit", "!quit", lambda m, c: c.close())
        transport.feed(":a!a@h PRIVMSG #room :!quit")
        clock.advance(2001)

        result = connected_client.poll()

        assert not result
        assert result.error is ClientError.UNABLE_TO_CONNECT
        assert result.lines_read == 1
        assert result.drained is False
        assert transport.sent == []
        assert connected_client.pending_count == 1
        assert connected_client.state is ConnectionState.CLOSED

    def test_poll_after_connection_drop(self, connected_client, transport):
        transport.connected = False
        result = connected_client.poll()
        assert result.error is ClientError.UNABLE_TO_CONNECT
        assert connected_client.state is ConnectionState.CLOSED


class TestListeners:
    def test_remove_and_clear(self, connected_client, transport):
        seen: list[str] = []
        connected_client.add_listener("kw", "foo", lambda m, c: seen.append("kw"))
        connected_client.add_listener("", "", lambda m, c: seen.append("all"))

        assert connected_client.remove_listener("missing") is False
        transport.feed(":a!a@h PRIVMSG #room :foo")
        connected_client.poll()
        assert seen == ["kw"]

        assert connected_client.remove_listener("kw") is True
        transport.feed(":a!a@h PRIVMSG #room :foo")
        connected_client.poll()
        assert seen == ["kw", "all"]

        connected_client.clear_listeners()
        transport.feed(":a!a@h PRIVMSG #room :foo")
        connected_client.poll()
        assert seen == ["kw", "all"]

    def test_listener_decorator(self, connected_client, transport):
        seen: list[str] = []

        @connected_client.listener("cmd", "!roll")
        def roll(message, client):
            seen.append(message.text)

        transport.feed(":a!a@h PRIVMSG #room :!roll d20")
        connected_client.poll()
        assert seen == ["!roll d20"]
        assert "cmd" in connected_client.registry


def test_stats_snapshot(connected_client, transport, clock):
    connected_client.add_listener("", "", lambda m, c: None)
    transport.feed(":a!a@h PRIVMSG #room :x", "PING :tmi.twitch.tv")
    connected_client.poll()
    connected_client.send_channel_message("late", should_queue=True)
    connected_client.send_channel_message("dropped")
    stats = connected_client.get_stats()
    assert stats["state"] == "CONNECTED"
    assert stats["connected"] is True
    assert stats["channel"] == "room"
    assert stats["lines_received"] == 2
    assert stats["messages_dispatched"] == 1
    assert stats["queued"] == 1
    assert stats["dropped"] == 1
    assert stats["pending"] == 1
    # PASS, USER, NICK, JOIN, PONG
    assert stats["sent"] == 5
