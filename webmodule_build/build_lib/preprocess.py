"""Label-based block stripping for concatenated JavaScript sources.

Blocks are delimited by paired markers carrying the same label::

    {@dev console.log("single line"); }@dev

    {@dev
        assertArgs(arguments);
    }@dev

Every block for each requested label is replaced by a single space. Labels are
applied in the order given, each pass working on the output of the previous
one. This is plain pattern matching: markers inside string literals or
comments are stripped too, and same-label blocks do not nest.

Unbalanced markers never raise; an opener without a closer (or a closer
without an opener) is left in the output untouched.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Tuple

# CRLF first so it collapses to one LF rather than two.
NEWLINE_RE = re.compile(r"\r\n|\r|\n")

BLOCK_REPLACEMENT = " "


def normalize_newlines(text: str) -> str:
    """Replace CRLF, lone CR and LF with a single LF."""
    return NEWLINE_RE.sub("\n", text)


@lru_cache(maxsize=64)
def block_patterns(label: str) -> Tuple[re.Pattern, re.Pattern]:
    """Return the (single-line, multi-line) patterns for ``label``."""
    escaped = re.escape(label)
    open_marker = r"\{@" + escaped + r"\b"
    close_marker = r"\}@" + escaped + r"\b"
    # {@label ... }@label
    single_line = re.compile(open_marker + r"[^\n]*?" + close_marker)
    # {@label
    #   ...
    # }@label
    multi_line = re.compile(open_marker + r"[^\n]*\n.*?" + close_marker, re.DOTALL)
    return single_line, multi_line


def strip_label(text: str, label: str) -> str:
    """Run one strip pass for ``label``; ``text`` must already be LF-normalized."""
    single_line, multi_line = block_patterns(label)
    text = single_line.sub(BLOCK_REPLACEMENT, text)
    return multi_line.sub(BLOCK_REPLACEMENT, text)


def strip_labels(text: str, labels: Iterable[str]) -> str:
    """Normalize line endings, then strip every block for each label in order."""
    text = normalize_newlines(text)
    for label in labels:
        text = strip_label(text, label)
    return text

