"""Concatenate, strip labeled blocks and minify WebModule sources."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set, Tuple

import click
import typer
from typer.core import TyperCommand

from build_lib import config as config_mod, labels as labels_mod, log as log_mod
from build_lib.compiler import CompilerError
from build_lib.pipeline import MinifyRunner
from build_lib.sources import missing_sources, read_optional_text

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Concatenate sources, strip {@label ... }@label blocks, then minify with Closure Compiler.",
)

LABEL_ORDER_KEY = "label_order"


def _labels_in_argv_order(args: List[str], value_options: Set[str]) -> List[str]:
    """Return `--label X` values and `@X` words in the order they were given."""
    tokens: List[str] = []
    remaining = iter(args)
    for token in remaining:
        if token == "--":
            tokens.extend(rest for rest in remaining if labels_mod.is_label_token(rest))
            break
        if token == "--label":
            value = next(remaining, None)
            if value is not None:
                tokens.append(value)
        elif token.startswith("--label="):
            tokens.append(token.split("=", 1)[1])
        elif token in value_options:
            next(remaining, None)
        elif labels_mod.is_label_token(token):
            tokens.append(token)
    return tokens


class LabelOrderCommand(TyperCommand):
    """Records the command-line order of labels before click groups them by parameter."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        value_options: Set[str] = set()
        for param in self.get_params(ctx):
            if isinstance(param, click.Option) and not param.is_flag and not param.count:
                value_options.update(param.opts)
        ctx.meta[LABEL_ORDER_KEY] = _labels_in_argv_order(list(args), value_options)
        return super().parse_args(ctx, args)


def _collect_labels(
    positional: List[str],
    ordered: List[str],
    include_defaults: bool,
    logger: logging.Logger,
) -> List[str]:
    for token in positional:
        if not labels_mod.is_label_token(token):
            raise typer.BadParameter(f"Unknown option: {token}")
    try:
        extra = [labels_mod.parse_label(value) for value in ordered]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    defaults = labels_mod.DEFAULT_LABELS if include_defaults else ()
    merged = labels_mod.merge_labels(defaults, extra)
    for label in merged:
        if not labels_mod.is_identifier_label(label):
            logger.warning("Label %r is not an identifier; matching may be surprising", label)
    return merged


def _language_level(es5: bool, es6: bool, flag: str) -> Optional[str]:
    if es5 and es6:
        raise typer.BadParameter(f"Use either --es5{flag} or --es6{flag}, not both")
    if es6:
        return "es6"
    if es5:
        return "es5"
    return None


def _resolve_inputs(
    source: List[Path],
    output: Optional[Path],
    package: bool,
    manifest_path: Path,
) -> Tuple[List[Path], Path]:
    if package:
        try:
            manifest = config_mod.load_package_manifest(manifest_path)
        except (FileNotFoundError, ValueError) as exc:
            raise typer.BadParameter(str(exc)) from exc
        base = manifest_path.parent
        source = [base / item for item in manifest.source]
        output = base / manifest.output
    if not source:
        raise typer.BadParameter("Input source are empty.")
    if output is None or not str(output):
        raise typer.BadParameter("Output file is empty.")
    missing = missing_sources(source)
    if missing:
        raise typer.BadParameter("File not found: " + ", ".join(str(path) for path in missing))
    return source, output


@app.command(cls=LabelOrderCommand)
def main(
    ctx: typer.Context,
    label_args: Optional[List[str]] = typer.Argument(None, metavar="[@label ...]", help="Extra strip labels"),
    source: Optional[List[Path]] = typer.Option(None, "--source", help="Source file (can be repeated)"),
    output: Optional[Path] = typer.Option(None, "--output", help="Output file"),
    label: Optional[List[str]] = typer.Option(None, "--label", help="Strip label, e.g. @dev (can be repeated)"),
    no_default_labels: bool = typer.Option(
        False, "--no-default-labels", help="Do not strip the dev/debug/assert labels by default"
    ),
    header: Optional[Path] = typer.Option(None, "--header", exists=True, dir_okay=False, help="Header file"),
    footer: Optional[Path] = typer.Option(None, "--footer", exists=True, dir_okay=False, help="Footer file"),
    nowrap: bool = typer.Option(False, "--nowrap", help="Do not wrap output in the WebModule idiom"),
    nocompile: bool = typer.Option(False, "--nocompile", help="Skip Closure Compiler; write preprocessed source"),
    es5in: bool = typer.Option(False, "--es5in", help="Input is ES5"),
    es6in: bool = typer.Option(False, "--es6in", help="Input is ES6"),
    es5out: bool = typer.Option(False, "--es5out", help="Output ES5"),
    es6out: bool = typer.Option(False, "--es6out", help="Output ES6"),
    strict: bool = typer.Option(False, "--strict", help="Use strict language modes"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty print compiled output"),
    simple: bool = typer.Option(False, "--simple", help="SIMPLE_OPTIMIZATIONS instead of ADVANCED"),
    option: Optional[List[str]] = typer.Option(
        None, "--option", help='Raw compiler option, e.g. "define DEBUG=false" (can be repeated)'
    ),
    keep: bool = typer.Option(False, "--keep", help="Keep the preprocessed temp file"),
    package: bool = typer.Option(False, "--package", help="Read source/output from package.json webmodule section"),
    manifest: Path = typer.Option(config_mod.PACKAGE_MANIFEST, "--manifest", help="package.json used by --package"),
    compiler_jar: Optional[Path] = typer.Option(
        None,
        "--compiler-jar",
        help=(
            f"Closure Compiler jar (defaults to ${config_mod.COMPILER_JAR_ENV}, "
            f"else {config_mod.DEFAULT_COMPILER_JAR} relative to the current directory)"
        ),
    ),
    summary: Optional[Path] = typer.Option(None, "--summary", help="Write a JSON run summary here"),
    plan: bool = typer.Option(False, "--plan", help="Show plan and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    try:
        log_mod.setup_logging(log_level, log_file, verbose=verbose)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    logger = logging.getLogger("cli.minify")

    sources, output_path = _resolve_inputs(source or [], output, package, manifest)
    ordered = ctx.meta.get(LABEL_ORDER_KEY, (label or []) + (label_args or []))
    labels = _collect_labels(label_args or [], ordered, not no_default_labels, logger)
    options = config_mod.BuildOptions(
        sources=tuple(sources),
        output=output_path,
        labels=tuple(labels),
        header=read_optional_text(header),
        footer=read_optional_text(footer),
        wrap=not nowrap,
        compile=not nocompile,
        advanced=not simple,
        strict=strict,
        pretty=pretty,
        language_in=_language_level(es5in, es6in, "in"),
        language_out=_language_level(es5out, es6out, "out"),
        extra_options=tuple(option or []),
        keep=keep,
        verbose=verbose,
        compiler_jar=compiler_jar or config_mod.default_compiler_jar(),
        summary_path=summary,
    )
    runner = MinifyRunner(options, logger=logger)
    if plan:
        typer.echo(runner.plan_description())
        raise typer.Exit(code=0)
    try:
        result = runner.run()
    except CompilerError as exc:
        typer.echo(exc.stderr.strip() or str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {output_path} ({result['bytes_in']} -> {result['bytes_out']} bytes)")


if __name__ == "__main__":  # pragma: no cover
    app()
