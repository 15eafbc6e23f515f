"""Closure Compiler invocation.

The preprocessed source is written to a temp file inside the work dir, the
compiler jar is run on it with ``java -jar`` and the minified output is read
back. Any text on stderr counts as a failure, so compiler warnings fail the
build the same way errors do.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from .config import LANGUAGE_LEVELS, BuildOptions

TMP_FILENAME = ".Minify.tmp.js"
OUTPUT_FILENAME = ".Minify.output.js"
JAVA_BINARY = "java"

# WebModule idiom; the compiler substitutes %output%.
OUTPUT_WRAPPER = "(function(global){\n%output%\n})((this||0).self||global);"

LOGGER = logging.getLogger(__name__)


class CompilerError(RuntimeError):
    def __init__(self, message: str, *, stderr: str = "", returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


def _language_flag(level: Optional[str], strict: bool) -> str:
    name = LANGUAGE_LEVELS[level or "es5"]
    return f"{name}_STRICT" if strict else name


def build_compiler_args(options: BuildOptions) -> List[str]:
    """Translate build options into Closure Compiler command-line flags."""
    args: List[str] = []
    if options.advanced:
        args += ["--compilation_level", "ADVANCED_OPTIMIZATIONS"]
    else:
        args += ["--compilation_level", "SIMPLE_OPTIMIZATIONS"]
    if options.wrap:
        args += ["--output_wrapper", OUTPUT_WRAPPER]
    args += ["--language_in", _language_flag(options.language_in, options.strict)]
    if options.language_out:
        args += ["--language_out", _language_flag(options.language_out, options.strict)]
    if options.pretty:
        args += ["--formatting", "pretty_print"]
    for extra in options.extra_options:
        parts = shlex.split(extra)
        if not parts:
            continue
        args.append("--" + parts[0].lstrip("-"))
        args.extend(parts[1:])
    return args


def describe_command(cmd: List[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def compile_source(js: str, options: BuildOptions, logger: Optional[logging.Logger] = None) -> str:
    """Minify ``js`` with the Closure Compiler and return the compiled text."""
    logger = logger or LOGGER
    work_dir = options.resolved_work_dir()
    jar = Path(options.compiler_jar)
    if not jar.is_file():
        raise CompilerError(f"Closure Compiler jar not found: {jar}")
    work_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = work_dir / TMP_FILENAME
    output_path = work_dir / OUTPUT_FILENAME
    tmp_path.write_text(js, encoding="utf-8")

    cmd = [
        JAVA_BINARY,
        "-jar",
        str(jar),
        "--js_output_file",
        str(output_path),
        "--js",
        str(tmp_path),
        *build_compiler_args(options),
    ]
    logger.log(logging.INFO if options.verbose else logging.DEBUG, "Compile command: %s", describe_command(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise CompilerError(f"{JAVA_BINARY} not found; cannot run {jar}") from exc

    if result.returncode != 0 or result.stderr.strip():
        output_path.unlink(missing_ok=True)
        logger.error("Closure Compiler failed (exit=%s); input kept at %s", result.returncode, tmp_path)
        raise CompilerError(
            "Closure Compiler reported errors",
            stderr=result.stderr,
            returncode=result.returncode,
        )

    minified = output_path.read_text(encoding="utf-8")
    output_path.unlink()
    if options.keep:
        logger.info("Keeping preprocessed input at %s", tmp_path)
    else:
        tmp_path.unlink()
    return minified
