"""Shared helpers for the WebModule build toolchain."""

from . import config, log, labels, preprocess, sources, compiler, pipeline  # noqa: F401

__all__ = [
    "config",
    "log",
    "labels",
    "preprocess",
    "sources",
    "compiler",
    "pipeline",
]
