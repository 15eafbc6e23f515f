"""Command-line entry points for the WebModule build toolchain."""
