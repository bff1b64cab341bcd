"""
Tests for the exporter runner
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from sentry_exporter.run_exporter import build_parser, main
from sentry_exporter.secure_config import SecureConfig


@pytest.fixture
def secure_config():
    with patch("sentry_exporter.secure_config.load_dotenv"):
        config = SecureConfig()
    with patch("sentry_exporter.run_exporter.get_config", return_value=config):
        yield config


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParser:
    """Test command-line flags"""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.listen_address == ":9096"
        assert args.telemetry_path == "/metrics"
        assert args.sentry_url == ""
        assert args.sentry_timeout == 10.0
        assert args.sentry_concurrency == 40
        assert args.log_level == "info"
        assert args.log_json is False

    def test_dotted_flags(self):
        args = build_parser().parse_args(
            [
                "--web.listen-address",
                "127.0.0.1:9200",
                "--sentry.url",
                "https://sentry.example.com",
                "--sentry.timeout",
                "2.5",
                "--sentry.concurrency",
                "8",
                "--log.level",
                "DEBUG",
            ]
        )

        assert args.listen_address == "127.0.0.1:9200"
        assert args.sentry_url == "https://sentry.example.com"
        assert args.sentry_timeout == 2.5
        assert args.sentry_concurrency == 8
        assert args.log_level == "debug"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log.level", "verbose"])


class TestMain:
    """Test startup wiring"""

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_url_exits_with_error(self, secure_config):
        with patch("sentry_exporter.run_exporter.uvicorn.run") as mock_run:
            assert main(["--sentry.auth-token", "sntrys_abc"]) == 1

        mock_run.assert_not_called()

    @patch.dict("os.environ", {}, clear=True)
    def test_zero_concurrency_exits_with_error(self, secure_config):
        with patch("sentry_exporter.run_exporter.uvicorn.run") as mock_run:
            code = main(
                ["--sentry.url", "https://sentry.example.com", "--sentry.auth-token", "t", "--sentry.concurrency", "0"]
            )

        assert code == 1
        mock_run.assert_not_called()

    @patch.dict("os.environ", {}, clear=True)
    def test_invalid_listen_address_exits_with_error(self, secure_config):
        with patch("sentry_exporter.run_exporter.uvicorn.run"):
            code = main(
                ["--sentry.url", "https://sentry.example.com", "--sentry.auth-token", "t", "--web.listen-address", "x"]
            )

        assert code == 1

    @patch.dict("os.environ", {"SENTRY_URL": "https://sentry.example.com", "SENTRY_AUTH_TOKEN": "sntrys_abc"})
    def test_starts_server(self, secure_config):
        client = MagicMock()
        with (
            patch("sentry_exporter.run_exporter.get_sentry_rest_client", return_value=client) as mock_factory,
            patch("sentry_exporter.run_exporter.uvicorn.run") as mock_run,
        ):
            code = main(["--web.listen-address", "127.0.0.1:9200", "--sentry.concurrency", "3"])

        assert code == 0
        assert mock_factory.call_args[0][0].concurrency == 3
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9200
        client.close.assert_called_once()

    @patch.dict("os.environ", {"SENTRY_URL": "https://sentry.example.com", "SENTRY_AUTH_TOKEN": "sntrys_abc"})
    def test_client_closed_when_server_fails(self, secure_config):
        client = MagicMock()
        with (
            patch("sentry_exporter.run_exporter.get_sentry_rest_client", return_value=client),
            patch("sentry_exporter.run_exporter.uvicorn.run", side_effect=OSError("address in use")),
        ):
            with pytest.raises(OSError):
                main([])

        client.close.assert_called_once()
