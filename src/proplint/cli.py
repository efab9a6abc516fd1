"""CLI entry point for proplint."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from proplint import __version__
from proplint.config import ConfigError, load_config
from proplint.render._helpers import verdict
from proplint.scanner import ScanResult, scan


@click.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.option(
    "-f", "--format", "fmt",
    type=click.Choice(["text", "md", "json", "pdf"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "-o", "--output",
    type=click.Path(resolve_path=True),
    default=None,
    help="Output file path. Defaults to stdout, or report.pdf for pdf.",
)
@click.option("--marker", default=None, help="Annotation spelling to check for.")
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    default=None,
    help="YAML config file (default: .proplint.yaml / [tool.proplint]).",
)
@click.option(
    "--frontend",
    type=click.Choice(["auto", "native", "clang"], case_sensitive=False),
    default=None,
    help="Tree document format (default: auto).",
)
@click.option("--exit-zero", is_flag=True, default=False, help="Exit 0 even when diagnostics are reported.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
@click.version_option(version=__version__)
def main(
    path: str,
    fmt: str,
    output: str | None,
    marker: str | None,
    config_file: str | None,
    frontend: str | None,
    exit_zero: bool,
    verbose: bool,
) -> None:
    """Check that exception propagation is annotated in the tree documents under PATH."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    target = Path(path)
    try:
        config = load_config(
            target if target.is_dir() else target.parent,
            config_file=Path(config_file) if config_file else None,
            overrides={"marker": marker, "frontend": frontend},
        )
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    result = scan(target, config)

    if fmt == "json":
        _output_json(result, output)
    elif fmt == "pdf":
        _output_pdf(result, output)
    elif fmt == "md":
        _output_md(result, output)
    else:
        _output_text(result, output)

    state = verdict(result)
    if state == "error":
        sys.exit(2)
    if state == "findings" and not exit_zero:
        sys.exit(1)


def _write_or_echo(text: str, output: str | None, what: str) -> None:
    if output:
        Path(output).write_text(text)
        click.echo(f"{what} written to {output}", err=True)
    else:
        click.echo(text)


def _output_text(result: ScanResult, output: str | None) -> None:
    from proplint.render.text import render_text
    _write_or_echo(render_text(result), output, "Diagnostics")


def _output_md(result: ScanResult, output: str | None) -> None:
    from proplint.render.markdown import render_markdown
    _write_or_echo(render_markdown(result), output, "Report")


def _output_pdf(result: ScanResult, output: str | None) -> None:
    from proplint.render.pdf import render_pdf
    dest = Path(output) if output else Path("report.pdf")
    render_pdf(result, dest)
    click.echo(f"PDF report written to {dest}", err=True)


def _output_json(result: ScanResult, output: str | None) -> None:
    data = {
        "config": result.config.model_dump(),
        "reports": [r.model_dump(mode="json") for r in result.reports],
        "failures": [f.model_dump() for f in result.failures],
    }
    _write_or_echo(json.dumps(data, indent=2), output, "JSON report")


if __name__ == "__main__":
    main()
