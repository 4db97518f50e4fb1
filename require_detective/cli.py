"""Command line entry point: print the dependencies of one JavaScript file.

Usage::

    require-detective path/to/file.js

Prints every resolved dependency name on its own line. The target
identifier can be changed with the ``REQUIRE_DETECTIVE_WORD`` environment
variable.
"""

import sys
from pathlib import Path
from typing import NoReturn

from .constants import log_level_from_env, word_from_env
from .detective import detective
from .exceptions import DetectiveError
from .logging_config import configure_logging
from .models import Options


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Run the command line tool.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when
            omitted.
    """
    args = sys.argv[1:] if argv is None else argv
    if not args:
        _fail("")

    try:
        logger = configure_logging(log_level_from_env())
    except ValueError as e:
        _fail(str(e))

    path = Path(args[0])
    options = Options(word=word_from_env())

    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read source", extra={"path": str(path), "error": str(e)})
        _fail(str(e))

    try:
        names = detective(source, options)
    except DetectiveError as e:
        logger.debug("Could not parse source", extra={"path": str(path), "error": str(e)})
        _fail(str(e))

    logger.info(
        "Scanned source",
        extra={"path": str(path), "word": options.word, "strings": len(names)},
    )
    for name in names:
        print(name)


if __name__ == "__main__":
    main()
