"""Build orchestration for concat → preprocess → compile → write."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import Dict, Optional

from . import compiler, sources
from .config import BuildOptions
from .preprocess import strip_labels

LOGGER = logging.getLogger(__name__)


class MinifyRunner:
    def __init__(self, options: BuildOptions, *, logger: Optional[logging.Logger] = None) -> None:
        self.options = options
        self.logger = logger or LOGGER
        self._timings: Dict[str, float] = {}

    def plan_description(self) -> str:
        opts = self.options
        lines = ["Build plan:"]
        for idx, path in enumerate(opts.sources, start=1):
            lines.append(f"  Source {idx}: {path}")
        lines.append(f"  Output: {opts.output}")
        lines.append(f"  Labels: {', '.join(opts.labels) or 'none'}")
        lines.append(f"  Header/footer: {len(opts.header)}/{len(opts.footer)} chars")
        if opts.compile:
            lines.append(f"  Compiler: {opts.compiler_jar}")
            lines.append(f"  Work dir: {opts.resolved_work_dir()}")
            lines.append(f"  Compile options: {compiler.describe_command(compiler.build_compiler_args(opts))}")
        else:
            lines.append("  Compiler: disabled (--nocompile)")
        return "\n".join(lines)

    def run(self) -> Dict[str, object]:
        opts = self.options
        summary: Dict[str, object] = {
            "run_at": datetime.now(timezone.utc).isoformat(),
            "sources": [str(path) for path in opts.sources],
            "labels": list(opts.labels),
            "output": str(opts.output),
            "compiled": opts.compile,
        }
        js = self._time_step(
            "concat",
            lambda: sources.assemble(opts.sources, opts.header, opts.footer, logger=self.logger),
        )
        summary["bytes_in"] = len(js.encode("utf-8"))
        if opts.labels:
            js = self._time_step("preprocess", lambda: strip_labels(js, opts.labels))
        if opts.compile:
            js = self._time_step("compile", lambda: compiler.compile_source(js, opts, logger=self.logger))
        self._time_step("write", lambda: self._write_output(js))
        summary["bytes_out"] = len(js.encode("utf-8"))
        summary["timings"] = self._timings
        self._write_summary_file(summary)
        return summary

    def _write_output(self, js: str) -> None:
        output = Path(self.options.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(js, encoding="utf-8")
        self.logger.info("Wrote %s", output)

    def _write_summary_file(self, summary: Dict[str, object]) -> None:
        path = self.options.summary_path
        if path is None:
            return
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(summary, handle, indent=2)

    def _time_step(self, name: str, func):
        start = perf_counter()
        result = func()
        self._timings[name] = self._timings.get(name, 0.0) + (perf_counter() - start)
        return result
