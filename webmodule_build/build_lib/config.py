"""Build configuration: options value object and package.json loading."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .labels import DEFAULT_LABELS

COMPILER_JAR_ENV = "CLOSURE_COMPILER_JAR"
DEFAULT_COMPILER_JAR = Path("vendor") / "compiler.jar"
PACKAGE_MANIFEST = Path("package.json")
LANGUAGE_LEVELS = {"es5": "ECMASCRIPT5", "es6": "ECMASCRIPT6"}


@dataclass(frozen=True)
class BuildOptions:
    sources: Tuple[Path, ...]
    output: Path
    labels: Tuple[str, ...] = DEFAULT_LABELS
    header: str = ""
    footer: str = ""
    wrap: bool = True
    compile: bool = True
    advanced: bool = True
    strict: bool = False
    pretty: bool = False
    language_in: Optional[str] = None  # es5|es6, None -> es5
    language_out: Optional[str] = None  # es5|es6, None -> compiler default
    extra_options: Tuple[str, ...] = ()
    keep: bool = False
    verbose: bool = False
    work_dir: Optional[Path] = None
    compiler_jar: Path = field(default=DEFAULT_COMPILER_JAR)
    summary_path: Optional[Path] = None

    def resolved_work_dir(self) -> Path:
        return self.work_dir if self.work_dir is not None else resolve_work_dir(self.output)


@dataclass(frozen=True)
class PackageManifest:
    source: List[str]
    output: str


def resolve_work_dir(output: Path) -> Path:
    """Directory holding the output file; temp files are written there."""
    return Path(output).parent


def default_compiler_jar() -> Path:
    """``$CLOSURE_COMPILER_JAR``, else ``vendor/compiler.jar`` under the current directory."""
    env_value = os.environ.get(COMPILER_JAR_ENV)
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_COMPILER_JAR


def load_package_manifest(path: Path = PACKAGE_MANIFEST) -> PackageManifest:
    """Read ``webmodule.source``/``webmodule.output`` from a package.json."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Package manifest not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    section = data.get("webmodule") if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ValueError(f"{path} has no 'webmodule' section")
    source = section.get("source")
    output = section.get("output")
    if not isinstance(source, list) or not all(isinstance(item, str) for item in source):
        raise ValueError(f"{path}: webmodule.source must be a list of paths")
    if not isinstance(output, str) or not output:
        raise ValueError(f"{path}: webmodule.output must be a path string")
    return PackageManifest(source=list(source), output=output)
