"""Workspace audit (wsaudit) - consolidated multi-framework compliance report.

Reads the collected check results and produces the scored report.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .. import __version__

console = Console(stderr=True)

INPUT_ERROR_EXIT = 11


def _split(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [s.strip() for s in value.split(",") if s.strip()]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="wsaudit")
def wsaudit_cli() -> None:
    """Workspace compliance audit - findings aggregation and scoring."""


@wsaudit_cli.command()
@click.option("--findings", "-i", "findings_file", type=click.File("r", encoding="utf-8"), required=True,
              help="JSON file with check results ('-' for stdin)")
@click.option("--domain", "-d", type=str, help="Audited domain")
@click.option("--framework", "-F", "frameworks", multiple=True, help="Framework to assess (repeatable)")
@click.option("--profile", type=str, help="Framework profile name")
@click.option("--add-frameworks", type=str, help="Comma-separated frameworks to add")
@click.option("--skip-frameworks", type=str, help="Comma-separated frameworks to skip")
@click.option("--context", "-c", "context_notes", type=str, default="", help="Additional context notes")
@click.option("--context-file", type=click.Path(exists=True, dir_okay=False), help="Read context notes from a file")
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), default=".", help="Project path")
@click.option("--output-format", "-f", type=click.Choice(["json", "markdown", "junit"]))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
@click.option("--ci", is_flag=True, help="CI mode: exit 1 when the report needs attention")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def report(
    findings_file: TextIO,
    domain: str | None,
    frameworks: tuple[str, ...],
    profile: str | None,
    add_frameworks: str | None,
    skip_frameworks: str | None,
    context_notes: str,
    context_file: str | None,
    project: str,
    output_format: str | None,
    output: str | None,
    ci: bool,
    verbose: bool,
) -> None:
    """Generate the consolidated compliance report from collected findings."""
    from ..core.config import get_control_map, get_effective_config
    from ..core.engine import generate_comprehensive_report, serialize_document
    from ..core.synthesis import get_exit_code, render_markdown_report
    from ..formatters.junit import export_junit_results
    from ..models.report import ErrorDocument

    config = get_effective_config(
        Path(project),
        profile=profile,
        add_frameworks=_split(add_frameworks),
        skip_frameworks=_split(skip_frameworks),
    )
    _configure_logging("DEBUG" if verbose else str(config["logging"].get("level", "WARNING")))

    domain = domain or config["audit"].get("domain") or ""
    if not domain:
        console.print("[red]Error:[/red] --domain/-d is required (or set audit.domain in config).")
        sys.exit(INPUT_ERROR_EXIT)

    active = list(frameworks) or config["_effective_frameworks"]
    if context_file:
        context_notes = Path(context_file).read_text(encoding="utf-8").strip()

    document = generate_comprehensive_report(
        domain,
        active,
        findings_file.read(),
        context_notes=context_notes,
        control_map=get_control_map(config),
        audit_scope=config["audit"].get("scope", ""),
    )
    indent = int(config["output"].get("indent", 2))

    if isinstance(document, ErrorDocument):
        console.print(f"[red]Error:[/red] {document.error}")
        click.echo(serialize_document(document, indent=indent))
        sys.exit(INPUT_ERROR_EXIT)

    fmt = output_format or config["output"].get("format", "json")
    if fmt == "junit":
        if not output:
            console.print("[red]Error:[/red] --output/-o is required for junit output.")
            sys.exit(INPUT_ERROR_EXIT)
        result = export_junit_results(document, Path(output))
        console.print(f"  JUnit XML: {result['path']} ({result['failures']} failures)")
    else:
        text = render_markdown_report(document) if fmt == "markdown" else serialize_document(document, indent=indent)
        if output:
            out_path = Path(output)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(text + "\n", encoding="utf-8")
            console.print(f"  Report written to {out_path}")
        else:
            click.echo(text)

    summary = document.executive_summary
    color = "green" if get_exit_code(summary.overall_status) == 0 else "yellow"
    console.print(
        f"  [{color}]{summary.overall_status}[/{color}] "
        f"score {summary.overall_compliance_score} "
        f"({summary.critical_issues} critical, {summary.high_priority_issues} high, "
        f"{summary.medium_priority_issues} medium)"
    )
    if ci:
        sys.exit(get_exit_code(summary.overall_status))


@wsaudit_cli.command()
def frameworks() -> None:
    """List the supported compliance frameworks."""
    from ..compliance.frameworks import FRAMEWORK_INFO

    table = Table(title="Supported frameworks")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Audience")
    for framework_id, info in FRAMEWORK_INFO.items():
        table.add_row(framework_id, info["name"], info["audience"])
    Console().print(table)


@wsaudit_cli.command()
@click.argument("check_id", required=False)
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), default=".")
def controls(check_id: str | None, project: str) -> None:
    """Show the effective control map, or one check's mapping."""
    from ..core.config import get_control_map, get_effective_config

    control_map = get_control_map(get_effective_config(Path(project)))
    if check_id:
        if check_id not in control_map:
            console.print(f"[yellow]No control mapping for {check_id}[/yellow]")
            sys.exit(1)
        click.echo(json.dumps(control_map.get(check_id), indent=2))
        return
    click.echo(json.dumps(control_map.to_dict(), indent=2))


@wsaudit_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
def init(project: str) -> None:
    """Initialize .wsaudit/config.yaml in a project."""
    from ..core.config import CONFIG_DIR

    project_path = Path(project)
    cfg_dir = project_path / CONFIG_DIR
    cfg_dir.mkdir(parents=True, exist_ok=True)

    config_path = cfg_dir / "config.yaml"
    if config_path.exists():
        console.print(f"  [yellow]Exists[/yellow] {config_path}")
        return

    config_path.write_text(
        "# Workspace audit configuration\n"
        "\n"
        f"wsaudit_version: \"{__version__}\"\n"
        "\n"
        "audit:\n"
        '  domain: ""\n'
        "\n"
        "frameworks:\n"
        "  default:\n"
        "    - CMMC\n"
        "\n"
        "controls:\n"
        '  map_file: ""\n'
        "\n"
        "output:\n"
        "  format: json\n",
        encoding="utf-8",
    )
    console.print(f"  [green]Initialized[/green] {CONFIG_DIR}/ in {project_path.name}")


def main() -> None:
    wsaudit_cli()


if __name__ == "__main__":
    main()
