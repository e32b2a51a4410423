"""
Unit tests for ServerConfig.
"""

import pytest

from statichttpd import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 2728
        assert config.backlog == 20
        assert config.buffer_size == 1024
        assert config.document_root == "htdocs"
        assert config.index_file == "index.html"
        assert config.default_extension == ".html"

    def test_defaults_are_valid(self):
        ServerConfig().validate()

    @pytest.mark.parametrize("field,value", [
        ("port", -1),
        ("port", 65536),
        ("backlog", 0),
        ("buffer_size", 8),
        ("accept_poll_interval", 0),
        ("document_root", ""),
        ("default_extension", "html"),
    ])
    def test_invalid_values(self, field, value):
        config = ServerConfig(**{field: value})

        with pytest.raises(ValueError):
            config.validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()
