"""Tests for the metadata server client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from metadata_scripts.config import Config
from metadata_scripts.metadata import MetadataFetchError, get_metadata


def _response(text="{}", status_error=None):
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


class TestGetMetadata:
    """Tests for get_metadata function."""

    def test_request_shape(self):
        """Should long-poll the attributes endpoint with the flavor header."""
        with patch("metadata_scripts.metadata.requests.get") as mock_get:
            mock_get.return_value = _response('{"windows-startup-script-ps1": "Write-Output hi"}')

            result = get_metadata(Config())

        assert result == {"windows-startup-script-ps1": "Write-Output hi"}
        mock_get.assert_called_once_with(
            "http://metadata.google.internal/computeMetadata/v1/instance/attributes"
            "/?recursive=true&alt=json&timeout_sec=10&last_etag=NONE",
            headers={"Metadata-Flavor": "Google"},
            timeout=20.0,
        )

    def test_custom_endpoint(self):
        """Should honor configured endpoint and timeout."""
        config = Config(metadata_url="http://127.0.0.1:8080/attrs", metadata_timeout=3.0)

        with patch("metadata_scripts.metadata.requests.get") as mock_get:
            mock_get.return_value = _response("{}")
            get_metadata(config)

        args, kwargs = mock_get.call_args
        assert args[0].startswith("http://127.0.0.1:8080/attrs/?recursive=true")
        assert kwargs["timeout"] == 3.0

    def test_network_error(self):
        with patch("metadata_scripts.metadata.requests.get") as mock_get:
            mock_get.side_effect = requests.Timeout("timed out")

            with pytest.raises(MetadataFetchError, match="timed out"):
                get_metadata(Config())

    def test_http_error(self):
        with patch("metadata_scripts.metadata.requests.get") as mock_get:
            mock_get.return_value = _response(status_error=requests.HTTPError("503 Server Error"))

            with pytest.raises(MetadataFetchError, match="503"):
                get_metadata(Config())

    @pytest.mark.parametrize("body", ["not json", "[1, 2]", '{"a": 1}', '{"a": {"b": "c"}}'])
    def test_invalid_body(self, body):
        """Should reject anything but a flat object of strings."""
        with patch("metadata_scripts.metadata.requests.get") as mock_get:
            mock_get.return_value = _response(body)

            with pytest.raises(MetadataFetchError):
                get_metadata(Config())
