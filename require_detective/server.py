"""MCP tool server exposing dependency detection to other runtimes.

Results are serialised to JSON strings and every detection error is turned
into a plain message, so clients never see a Python exception.
"""

import json
import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from pydantic import Field

from .constants import DEFAULT_WORD, SERVER_NAME, log_level_from_env, word_from_env
from .detective import find
from .exceptions import DetectiveError
from .logging_config import configure_logging
from .models import Options

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp: FastMCP = FastMCP(SERVER_NAME)


def _to_text(source: str | bytes) -> str:
    # Buffers are read the way Buffer#toString does
    if isinstance(source, bytes):
        return source.decode("utf-8", errors="replace")
    return source


def find_payload(source: str | bytes, word: str | None = None) -> dict[str, Any]:
    """Run ``find`` and describe the outcome as a JSON-compatible dict.

    Args:
        source: JavaScript source text, or UTF-8 encoded bytes.
        word: Target identifier; the configured default when omitted.

    Returns:
        ``{"status": "success", "strings": [...], "expressions": [...]}`` or
        ``{"status": "error", "message": "..."}``.
    """
    try:
        found = find(_to_text(source), Options(word=word or word_from_env()))
    except DetectiveError as e:
        logger.warning(f"Dependency detection failed: {e}")
        return {"status": "error", "message": str(e)}
    return {"status": "success", **found.model_dump()}


def detective_payload(source: str | bytes, word: str | None = None) -> dict[str, Any]:
    """Like ``find_payload`` but only reports the resolved names."""
    payload = find_payload(source, word)
    if payload["status"] != "success":
        return payload
    return {"status": "success", "dependencies": payload["strings"]}


@mcp.tool
async def find_requires(
    source: Annotated[
        str,
        Field(description="JavaScript source text to scan"),
    ],
    word: Annotated[
        str,
        Field(
            description="Identifier treated as the module loader, e.g. 'require' or 'load'",
            min_length=1,
        ),
    ] = DEFAULT_WORD,
) -> str:
    """Find every require()-style call in a JavaScript source text.

    Returns JSON with the statically known module names ("strings") and the
    source text of arguments that are computed at runtime ("expressions"),
    both in source order.
    """
    return json.dumps(find_payload(source, word), indent=2)


@mcp.tool
async def detective_requires(
    source: Annotated[
        str,
        Field(description="JavaScript source text to scan"),
    ],
    word: Annotated[
        str,
        Field(
            description="Identifier treated as the module loader, e.g. 'require' or 'load'",
            min_length=1,
        ),
    ] = DEFAULT_WORD,
) -> str:
    """List the module names a JavaScript source text loads statically.

    Returns JSON with a "dependencies" list in source order. Calls whose
    argument is computed at runtime are left out; use find_requires to see
    them.
    """
    return json.dumps(detective_payload(source, word), indent=2)


def main() -> None:
    """Run the tool server over stdio."""
    configure_logging(log_level_from_env())
    logger.info(f"Starting {SERVER_NAME} tool server")
    mcp.run()


if __name__ == "__main__":
    main()
