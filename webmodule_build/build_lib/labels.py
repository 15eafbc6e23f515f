"""Small helpers for strip-label parsing and de-duplication."""
from __future__ import annotations

import re
from typing import Iterable, List

DEFAULT_LABELS = ("dev", "debug", "assert")

LABEL_RE = re.compile(r"^[A-Za-z0-9_]+$")


def is_label_token(value: str) -> bool:
    """Return True for bare command-line words written as ``@label``."""
    return value.startswith("@")


def parse_label(value: str) -> str:
    """Strip one leading ``@`` and reject empty labels."""
    label = value[1:] if value.startswith("@") else value
    if not label:
        raise ValueError(f"Empty label: {value!r}")
    return label


def is_identifier_label(label: str) -> bool:
    return bool(LABEL_RE.match(label))


def merge_labels(*groups: Iterable[str]) -> List[str]:
    """Concatenate label groups, keeping the first occurrence of each label."""
    merged: List[str] = []
    seen = set()
    for group in groups:
        for label in group:
            if label in seen:
                continue
            seen.add(label)
            merged.append(label)
    return merged
