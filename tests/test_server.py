"""
Tests for the require-detective MCP tool server.

The tool functions are thin JSON wrappers around the payload helpers; both
are tested, the tools through their undecorated ``fn``.
"""

import json

import pytest

from require_detective.server import (
    detective_payload,
    detective_requires,
    find_payload,
    find_requires,
    mcp,
)


class TestToolServer:
    """Test the FastMCP server instance."""

    def test_server_module_exists(self):
        """Test that the server module can be imported."""
        import require_detective.server
        assert require_detective.server is not None

    def test_mcp_instance_exists(self):
        """Test that the MCP instance is created."""
        assert mcp is not None
        assert mcp.name == "require-detective"


class TestFindPayload:
    """Test the find tool payload."""

    def test_success(self):
        """Both lists are reported on success."""
        payload = find_payload("require('a'); require(b);")
        assert payload == {"status": "success", "strings": ["a"], "expressions": ["b"]}

    def test_custom_word(self):
        """The word parameter selects the identifier."""
        payload = find_payload("load('a'); require('b');", word="load")
        assert payload["strings"] == ["a"]

    def test_bytes_source(self):
        """UTF-8 bytes are accepted like text."""
        payload = find_payload("require('ü')".encode("utf-8"))
        assert payload["strings"] == ["ü"]

    def test_syntax_error_becomes_message(self):
        """Parse failures are returned as a plain message."""
        payload = find_payload("require('a'")
        assert payload["status"] == "error"
        assert isinstance(payload["message"], str)
        assert payload["message"]

    def test_empty_source(self):
        """An empty source yields empty lists."""
        assert find_payload("") == {"status": "success", "strings": [], "expressions": []}


class TestDetectivePayload:
    """Test the detective tool payload."""

    def test_success(self):
        """Only resolved names are reported."""
        payload = detective_payload("require('a'); require(b); require(`c`)")
        assert payload == {"status": "success", "dependencies": ["a", "c"]}

    def test_error(self):
        """Errors keep the find payload shape."""
        payload = detective_payload("var = require('a')")
        assert payload["status"] == "error"
        assert "dependencies" not in payload


class TestTools:
    """Test the registered tool functions."""

    @pytest.mark.asyncio
    async def test_find_requires(self):
        """find_requires returns the find payload as JSON."""
        result = await find_requires.fn("load('a'); load(b);", word="load")
        assert json.loads(result) == {"status": "success", "strings": ["a"], "expressions": ["b"]}

    @pytest.mark.asyncio
    async def test_detective_requires(self):
        """detective_requires returns the dependency list as JSON."""
        result = await detective_requires.fn("require('a'); require(b);")
        assert json.loads(result) == {"status": "success", "dependencies": ["a"]}

    @pytest.mark.asyncio
    async def test_error_is_json(self):
        """Syntax errors are reported inside the JSON result."""
        result = await find_requires.fn("require('a'")
        assert json.loads(result)["status"] == "error"
