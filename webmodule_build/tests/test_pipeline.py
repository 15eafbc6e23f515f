"""Tests for MinifyRunner orchestration."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from build_lib import compiler
from build_lib.compiler import CompilerError
from build_lib.config import BuildOptions
from build_lib.pipeline import MinifyRunner


@pytest.fixture
def sources(tmp_path):
    first = tmp_path / "A.js"
    first.write_text("function a() {\r\n{@dev\r\n  log('a');\r\n}@dev\r\n}\r\n", encoding="utf-8")
    second = tmp_path / "B.js"
    second.write_text("var b = 1; {@assert check(b); }@assert\n", encoding="utf-8")
    return (first, second)


def test_nocompile_writes_preprocessed_source(tmp_path, sources):
    output = tmp_path / "release" / "Mod.js"
    opts = BuildOptions(sources=sources, output=output, compile=False, header="/*h*/", footer="/*f*/")
    summary = MinifyRunner(opts).run()
    assert output.read_text(encoding="utf-8") == "/*h*/function a() {\n \n}\nvar b = 1;  \n/*f*/"
    assert summary["compiled"] is False
    assert summary["labels"] == ["dev", "debug", "assert"]
    assert set(summary["timings"]) == {"concat", "preprocess", "write"}
    assert summary["bytes_out"] < summary["bytes_in"]


def test_without_labels_source_is_untouched(tmp_path, sources):
    output = tmp_path / "Mod.js"
    opts = BuildOptions(sources=sources, output=output, compile=False, labels=())
    MinifyRunner(opts).run()
    expected = "".join(path.read_text(encoding="utf-8") for path in sources)
    assert output.read_text(encoding="utf-8") == expected


def test_compile_step_feeds_preprocessed_source(tmp_path, sources, monkeypatch):
    seen = {}

    def _fake_compile(js, options, logger=None):
        seen["js"] = js
        return "compiled();"

    monkeypatch.setattr(compiler, "compile_source", _fake_compile)
    output = tmp_path / "Mod.min.js"
    summary_path = tmp_path / "summary.json"
    opts = BuildOptions(sources=sources, output=output, summary_path=summary_path)
    summary = MinifyRunner(opts).run()
    assert "{@dev" not in seen["js"]
    assert output.read_text(encoding="utf-8") == "compiled();"
    assert "compile" in summary["timings"]
    written = json.loads(summary_path.read_text(encoding="utf-8"))
    assert written["output"] == str(output)
    assert written["compiled"] is True


def test_compile_failure_leaves_output_unwritten(tmp_path, sources, monkeypatch):
    def _fail(js, options, logger=None):
        raise CompilerError("boom", stderr="ERROR", returncode=1)

    monkeypatch.setattr(compiler, "compile_source", _fail)
    output = tmp_path / "Mod.min.js"
    with pytest.raises(CompilerError):
        MinifyRunner(BuildOptions(sources=sources, output=output)).run()
    assert not output.exists()


def test_plan_description(tmp_path, sources):
    opts = BuildOptions(sources=sources, output=Path("release/Mod.min.js"), labels=("dev",))
    plan = MinifyRunner(opts).plan_description()
    assert "Source 1:" in plan and "Source 2:" in plan
    assert "Labels: dev" in plan
    assert "ADVANCED_OPTIMIZATIONS" in plan
    assert "Work dir: release" in plan

    plan = MinifyRunner(BuildOptions(sources=sources, output=Path("x.js"), compile=False)).plan_description()
    assert "disabled" in plan


def test_summary_directory_is_created(tmp_path, sources):
    output = tmp_path / "Mod.js"
    summary_path = tmp_path / "reports" / "nightly" / "summary.json"
    opts = BuildOptions(sources=sources, output=output, compile=False, summary_path=summary_path)
    MinifyRunner(opts).run()
    assert json.loads(summary_path.read_text(encoding="utf-8"))["compiled"] is False
