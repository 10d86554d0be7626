"""Preliminary notice CLI.

Usage:
    prelim states
    prelim deadline California 2025-01-01
    prelim templates
    prelim template new-mexico
    prelim merge california --set owner_name="Jane Doe" --values job.yaml
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prelim.config import get_settings
from prelim.log import setup_logging

app = typer.Typer(name="prelim", help="Preliminary notice deadlines and documents for US construction liens")
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    setup_logging("DEBUG" if verbose else settings.log_level)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_date(value: str, label: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid {label}: {value!r} (expected YYYY-MM-DD)[/red]")
        raise typer.Exit(1)


def _table():
    from prelim.errors import RuleTableError
    from prelim.rules.loader import load_rule_table

    settings = get_settings()
    try:
        return load_rule_table(settings.rules_path)
    except RuleTableError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _read_values(values_file: Path | None, pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    if values_file:
        if not values_file.exists():
            console.print(f"[red]Values file not found: {values_file}[/red]")
            raise typer.Exit(1)
        try:
            # BaseLoader keeps every scalar a string (no 0755 -> 493, yes -> True)
            data = yaml.load(values_file.read_text(encoding="utf-8"), Loader=yaml.BaseLoader) or {}
        except yaml.YAMLError as e:
            console.print(f"[red]{values_file}: invalid YAML: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        if not isinstance(data, dict):
            console.print(f"[red]{values_file} must contain a mapping of placeholder to value[/red]")
            raise typer.Exit(1)
        for k, v in data.items():
            if isinstance(v, (dict, list)):
                console.print(f"[red]{values_file}: value for {k!r} must be text[/red]")
                raise typer.Exit(1)
            values[str(k)] = v
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            console.print(f"[red]Invalid --set {pair!r} (expected key=value)[/red]")
            raise typer.Exit(1)
        values[key.strip()] = value
    return values


# ---------------------------------------------------------------------------
# prelim states
# ---------------------------------------------------------------------------

@app.command()
def states():
    """Show notice requirements for every US state."""
    from prelim.states import US_STATES

    table = _table()

    out = Table(title="Preliminary Notice Requirements")
    out.add_column("State", style="bold")
    out.add_column("Required")
    out.add_column("Days", justify="right")
    out.add_column("Certified Mail")
    out.add_column("Notary")

    for name in US_STATES:
        rule = table.get(name)
        out.add_row(
            name,
            "[green]yes[/green]" if rule and rule.notice_required else "[dim]no rule[/dim]",
            str(rule.deadline_days) if rule else "",
            "yes" if rule and rule.certified_mail_required else "",
            "[yellow]yes[/yellow]" if rule and rule.notary_required else "",
        )

    console.print(out)


# ---------------------------------------------------------------------------
# prelim deadline
# ---------------------------------------------------------------------------

@app.command()
def deadline(
    state: str = typer.Argument(..., help="Canonical state name (e.g., 'New Mexico')"),
    job_start: str = typer.Argument(..., help="First furnishing date, YYYY-MM-DD"),
    today: str = typer.Option(None, "--today", help="Evaluate status as of this date"),
):
    """Show whether notice is required and when it is due."""
    from prelim.engine.deadlines import DeadlineResolver, deadline_status, format_time_until_deadline

    settings = get_settings()
    start = _parse_date(job_start, "job start date")
    as_of = _parse_date(today, "--today date") if today else date.today()

    result = DeadlineResolver(_table()).resolve(state, start, settings.reminder_offsets)

    console.print(f"\n[bold]{state}[/bold] — job start {result.job_start_date}")
    if not result.notice_required:
        console.print("  [yellow]No preliminary notice rule on file for this state.[/yellow]")
        return

    status = deadline_status(result.due_date, as_of)
    color = {"upcoming": "green", "due_soon": "yellow", "due_today": "red", "overdue": "red bold"}[status.value]
    console.print(f"  Notice required: [green]yes[/green] ({result.deadline_days} calendar days)")
    console.print(f"  Due: [bold]{result.due_date}[/bold]")
    console.print(f"  Status: [{color}]{status.value.upper()}[/{color}] — {format_time_until_deadline(result.due_date, as_of)}")
    for r in result.reminders:
        console.print(f"  Reminder: {r.send_date} ({r.days_before} days before)")


# ---------------------------------------------------------------------------
# prelim templates / prelim template
# ---------------------------------------------------------------------------

@app.command()
def templates():
    """List the available notice templates."""
    from prelim.engine.templates import TemplateResolver

    out = Table(title="Notice Templates")
    out.add_column("State", style="bold")
    out.add_column("Slug", style="dim")
    out.add_column("Summary")

    for d in TemplateResolver(_table()).list_templates():
        out.add_row(d.full_name, d.slug, d.description)

    console.print(out)


@app.command()
def template(state: str = typer.Argument(..., help="State name or slug (e.g., 'new-mexico')")):
    """Show a state's template sections with placeholders unfilled."""
    from prelim.engine.templates import TemplateResolver

    descriptor = TemplateResolver(_table()).get_descriptor(state)
    if descriptor is None:
        console.print("[red]State or slug is required.[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{descriptor.full_name}[/bold] ({descriptor.slug}) — {descriptor.description}")
    if descriptor.is_default:
        console.print("  [yellow]No state-specific template; showing the generic notice.[/yellow]")
    for section in descriptor.sections:
        console.print(f"\n[dim]\\[{section.type.value}][/dim]")
        typer.echo(section.content)


# ---------------------------------------------------------------------------
# prelim merge
# ---------------------------------------------------------------------------

@app.command()
def merge(
    state: str = typer.Argument(..., help="State name or slug"),
    set_: list[str] = typer.Option([], "--set", "-s", help="Placeholder value, key=value (repeatable)"),
    values_file: Path = typer.Option(None, "--values", help="YAML or JSON file of placeholder values"),
    defaults: bool = typer.Option(False, "--defaults", help="Fill unset fields with sample values"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the notice to a file"),
):
    """Produce the merged notice text for a state."""
    from prelim.engine.formatting import format_date
    from prelim.engine.templates import TemplateResolver, build_placeholders

    resolver = TemplateResolver(_table())
    values = _read_values(values_file, set_)
    if defaults:
        values = build_placeholders(values, state_name=resolver.display_name(state),
                                    generated_date=format_date(date.today()))

    text = resolver.merge_template(state, values)
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]Notice written to {output}[/green]")
    else:
        typer.echo(text)


if __name__ == "__main__":
    app()
