"""
Tests for the command Client against the fake 0-db connection.
"""

import hashlib

import pytest
from redis.exceptions import ResponseError, TimeoutError

from zdb.client import Client
from zdb.config import ClientConfig
from zdb.models.exceptions import (
    CommandError,
    CursorExhaustedError,
    KeyNotFoundError,
    ProtocolFormatError,
    StoreIOError,
)


class TestCoreCommands:
    """Tests for point commands."""

    def test_set_and_get(self, client):
        client.set(b"key", b"value")
        assert client.get(b"key") == b"value"

    def test_get_missing_returns_none(self, client):
        assert client.get(b"missing") is None

    def test_exists(self, client):
        client.set(b"key", b"value")
        assert client.exists(b"key") is True
        assert client.exists(b"other") is False

    def test_delete(self, client):
        client.set(b"key", b"value")
        client.delete(b"key")
        assert client.get(b"key") is None

    def test_delete_missing_is_not_an_error(self, client):
        client.delete(b"missing")

    def test_delete_propagates_other_errors(self, client, fake_connection):
        fake_connection.fail("DEL", ResponseError("Namespace is in read-only mode"))
        with pytest.raises(CommandError):
            client.delete(b"key")

    def test_mget(self, client):
        client.set(b"a", b"1")
        assert client.mget([b"a", b"b"]) == [b"1", None]

    def test_ping(self, client, fake_connection):
        client.ping()
        assert fake_connection.commands == [("PING",)]


class TestErrorMapping:
    """Tests for translating transport errors."""

    def test_error_reply_becomes_command_error(self, client, fake_connection):
        fake_connection.fail("GET", ResponseError("Permission denied"))
        with pytest.raises(CommandError) as exc_info:
            client.get(b"key")
        assert exc_info.value.reply == "Permission denied"
        assert exc_info.value.command == "GET"

    def test_connection_error_becomes_io_error(self, client, fake_connection):
        fake_connection.fail("SET")
        with pytest.raises(StoreIOError):
            client.set(b"key", b"value")

    def test_timeout_becomes_io_error(self, client, fake_connection):
        fake_connection.fail("PING", TimeoutError("Timeout reading from socket"))
        with pytest.raises(StoreIOError):
            client.ping()

    def test_wrong_reply_type(self, client, fake_connection):
        fake_connection.reply_once("EXISTS", b"yes")
        with pytest.raises(ProtocolFormatError):
            client.exists(b"key")


class TestKeyCursor:
    """Tests for KEYCUR."""

    def test_existing_key(self, client):
        client.set(b"key", b"value")
        assert isinstance(client.key_cursor(b"key"), bytes)

    def test_missing_key_error_reply(self, client):
        with pytest.raises(KeyNotFoundError):
            client.key_cursor(b"missing")

    def test_missing_key_nil_reply(self, client, fake_connection):
        fake_connection.reply_once("KEYCUR", None)
        with pytest.raises(KeyNotFoundError):
            client.key_cursor(b"missing")

    def test_other_failures_propagate(self, client, fake_connection):
        fake_connection.fail("KEYCUR")
        with pytest.raises(StoreIOError) as exc_info:
            client.key_cursor(b"key")
        assert not isinstance(exc_info.value, KeyNotFoundError)


class TestScan:
    """Tests for SCAN and RSCAN."""

    def test_scan_first_page(self, client, fake_connection):
        for key in (b"a", b"b", b"c"):
            client.set(key, b"v")

        page = client.scan()
        assert [k.key for k in page.keys] == [b"a", b"b"]
        assert fake_connection.commands[-1] == ("SCAN",)

    def test_scan_continues_from_cursor(self, client):
        for key in (b"a", b"b", b"c"):
            client.set(key, b"v")

        first = client.scan()
        second = client.scan(first.next)
        assert [k.key for k in second.keys] == [b"c"]

    def test_rscan_descends(self, client):
        for key in (b"a", b"b", b"c"):
            client.set(key, b"v")

        first = client.rscan()
        second = client.rscan(first.next)
        assert [k.key for k in first.keys] == [b"c", b"b"]
        assert [k.key for k in second.keys] == [b"a"]

    def test_no_more_data(self, client):
        with pytest.raises(CursorExhaustedError):
            client.scan()

    def test_malformed_page(self, client, fake_connection):
        fake_connection.reply_once("SCAN", [b"cursor"])
        with pytest.raises(ProtocolFormatError):
            client.scan()


class TestAdministration:
    """Tests for INFO, namespaces and authentication pass-through."""

    def test_info(self, client):
        info = client.info()
        assert info["server_name"] == "0-db (zdb)"
        assert info["entries"] == "0"

    def test_dbsize(self, client):
        client.set(b"a", b"123")
        assert client.dbsize() == 3

    def test_time(self, client):
        assert client.time() == 1700000000

    def test_time_wrong_reply_type(self, client, fake_connection):
        fake_connection.reply_once("TIME", [b"1700000000", b"0"])
        with pytest.raises(ProtocolFormatError):
            client.time()

    def test_stop(self, client, fake_connection):
        client.stop()
        assert fake_connection.stopped
        assert fake_connection.commands[-1] == ("STOP",)

    def test_stop_rejected(self, client, fake_connection):
        fake_connection.fail("STOP", ResponseError("Unauthorized"))
        with pytest.raises(CommandError):
            client.stop()

    def test_namespaces(self, client):
        client.new_namespace("users")
        assert client.list_namespaces() == ["default", "users"]

        client.delete_namespace("users")
        assert client.list_namespaces() == ["default"]

    def test_namespace_info(self, client):
        assert client.namespace_info("users")["name"] == "users"

    def test_select_secure(self, client, fake_connection):
        client.select("users", "secret")
        assert fake_connection.commands[-1] == ("SELECT", "users", "SECURE", "secret")

    def test_auth_secure_sends_digest(self, client, fake_connection):
        client.auth_secure("secret")

        expected = hashlib.sha1(b"abcdef0123456789:secret").hexdigest()
        assert fake_connection.commands[-1] == ("AUTH", "SECURE", expected)


class TestLifecycle:
    """Tests for closing the client."""

    def test_close_disconnects_once(self, fake_connection):
        client = Client(fake_connection)
        client.close()
        client.close()
        assert fake_connection.disconnected

    def test_context_manager(self, fake_connection):
        with Client(fake_connection):
            pass
        assert fake_connection.disconnected

    def test_connect_failure(self):
        # Nothing listens on port 1
        config = ClientConfig(host="127.0.0.1", port=1, connect_timeout=0.5)
        with pytest.raises(StoreIOError):
            Client.connect(config)
