"""Source file helpers: existence checks and concatenation."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

LOGGER = logging.getLogger(__name__)


def missing_sources(paths: Sequence[Path]) -> List[Path]:
    return [path for path in paths if not path.is_file()]


def read_optional_text(path: Optional[Path]) -> str:
    """Read a header/footer file; ``None`` means no text."""
    if path is None:
        return ""
    return path.read_text(encoding="utf-8")


def concat_sources(paths: Sequence[Path], logger: Optional[logging.Logger] = None) -> str:
    """Join source files in order with no separator.

    A file that vanished since validation contributes nothing and is reported
    as a warning rather than aborting the build.
    """
    logger = logger or LOGGER
    chunks: List[str] = []
    for path in paths:
        try:
            chunks.append(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("%s does not exist; skipping", path)
            continue
        logger.debug("Read %s", path)
    return "".join(chunks)


def assemble(
    paths: Sequence[Path],
    header: str = "",
    footer: str = "",
    logger: Optional[logging.Logger] = None,
) -> str:
    return header + concat_sources(paths, logger=logger) + footer
