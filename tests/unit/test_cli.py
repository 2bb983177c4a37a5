"""Unit tests for the querycache command-line interface."""

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from querycache.cache.keys import derive_key
from querycache.cache.models import SerializedQuery
from querycache.cli.main import cli
from querycache.core.exceptions import StoreError


def mock_store(**methods):
    store = AsyncMock()
    for name, value in methods.items():
        setattr(store, name, value)
    return store


class TestKeyCommand:
    """Tests for `querycache key`."""

    def test_prints_derived_key(self):
        """Test the printed key matches derive_key()."""
        runner = CliRunner()

        result = runner.invoke(cli, ["key", "select * from t where id = ?", "-b", "[7]"])

        expected = derive_key(
            SerializedQuery(command_text="select * from t where id = ?", parameters=[7])
        )
        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_custom_prefix(self):
        """Test --prefix changes the namespace."""
        result = CliRunner().invoke(cli, ["key", "select 1", "--prefix", "reports"])

        assert result.exit_code == 0
        assert result.output.startswith("reports:")

    def test_invalid_bindings(self):
        """Test non-array bindings are rejected."""
        result = CliRunner().invoke(cli, ["key", "select 1", "-b", '{"a": 1}'])

        assert result.exit_code != 0
        assert "JSON array" in result.output

    def test_malformed_json(self):
        """Test unparsable bindings are rejected."""
        result = CliRunner().invoke(cli, ["key", "select 1", "-b", "[1,"])

        assert result.exit_code != 0


class TestGetCommand:
    """Tests for `querycache get`."""

    def test_prints_structured_value(self):
        """Test structured values are printed as JSON."""
        store = mock_store(get=AsyncMock(return_value={"rows": [1, 2]}))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(cli, ["get", "knex:abc"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"rows": [1, 2]}
        store.get.assert_awaited_once_with("knex:abc")
        store.close.assert_awaited_once()

    def test_missing_key(self):
        """Test a missing key exits non-zero."""
        store = mock_store(get=AsyncMock(return_value=None))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(cli, ["get", "knex:abc"])

        assert result.exit_code == 1

    def test_store_error(self):
        """Test store failures exit non-zero."""
        store = mock_store(get=AsyncMock(side_effect=StoreError("down")))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(cli, ["get", "knex:abc"])

        assert result.exit_code == 1
        store.close.assert_awaited_once()

    def test_malformed_url(self):
        """Test an unparsable --url is reported without a traceback."""
        result = CliRunner().invoke(cli, ["get", "knex:abc", "--url", "notaurl://host"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_url_override(self):
        """Test --url is passed into the store configuration."""
        store = mock_store(get=AsyncMock(return_value="cached"))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(
                cli, ["get", "knex:abc", "--url", "redis://other:6379/2"]
            )

        assert result.output.strip() == "cached"
        config = mock_cls.from_config.call_args[0][0]
        assert config.url == "redis://other:6379/2"


class TestPingCommand:
    """Tests for `querycache ping`."""

    def test_ping_ok(self):
        """Test successful ping prints PONG."""
        store = mock_store(ping=AsyncMock(return_value=True))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(cli, ["ping"])

        assert result.exit_code == 0
        assert "PONG" in result.output

    def test_ping_failure(self):
        """Test unreachable store exits non-zero."""
        store = mock_store(ping=AsyncMock(side_effect=StoreError("refused")))

        with patch("querycache.cli.main.RedisStore") as mock_cls:
            mock_cls.from_config.return_value = store
            result = CliRunner().invoke(cli, ["ping"])

        assert result.exit_code == 1

    def test_ping_malformed_url(self):
        """Test an unparsable --url exits with an error message."""
        result = CliRunner().invoke(cli, ["ping", "--url", "notaurl://host"])

        assert result.exit_code == 1
        assert "Error:" in result.output


def test_version():
    """Test version command."""
    result = CliRunner().invoke(cli, ["version"])

    assert result.exit_code == 0
    assert "querycache v" in result.output
