"""
bioprotease Command Line Interface.

This module provides a CLI for digesting sequences, listing scissile bonds,
probing single bonds and browsing the built-in specificities. Built with
Click, with Rich for tables and log output.

Usage:
    bioprotease digest MRAERVIKP --enzyme trypsin
    bioprotease digest --file proteins.fasta --format fasta
    bioprotease sites MRAERVIKP --pattern '.{3}[KR][^P].{3}'
    bioprotease cut MRAERVIKP 2
    bioprotease check AGGALH --pattern 'AGGAL[^P]'
    bioprotease list-enzymes
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Initialize rich consoles; diagnostics go to stderr so stdout stays parseable
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Route package logging through Rich."""
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def _build_protease(enzyme: str, patterns: tuple, strict: bool = False):
    """Create a Protease from --enzyme / --pattern options, or exit."""
    from ..digestion import Protease, ProteaseConfig
    from ..specificity import SpecificityError

    config = ProteaseConfig(use_cache=False, strict_positions=strict)
    try:
        if patterns:
            return Protease(list(patterns), config=config)
        return Protease(enzyme, config=config)
    except SpecificityError as e:
        err_console.print(f"[red]✗ Invalid specificity:[/red] {e}")
        sys.exit(1)


def _collect_records(sequence: Optional[str], file: Optional[str]) -> list:
    """Gather ProteinRecords from the positional argument and/or a FASTA file."""
    from ..core.models import ProteinRecord
    from ..core.sequence import parse_fasta

    records = []
    try:
        if sequence:
            records.append(ProteinRecord(id="sequence", sequence=sequence))
        if file:
            records.extend(parse_fasta(file))
    except (ValueError, OSError) as e:
        err_console.print(f"[red]✗ Error loading sequences:[/red] {e}")
        sys.exit(1)

    if not records:
        err_console.print("[yellow]No sequence provided. Use --help for usage.[/yellow]")
        sys.exit(1)

    logger.debug(f"Loaded {len(records)} sequence(s)")
    return records


def specificity_options(func):
    """Shared --enzyme / --pattern options."""
    func = click.option(
        "--pattern", "-p",
        multiple=True,
        help="Custom 8-residue window regex; repeat to require several (AND)",
    )(func)
    func = click.option(
        "--enzyme", "-e",
        default="trypsin",
        show_default=True,
        help="Built-in specificity name (see list-enzymes)",
    )(func)
    return func


def input_options(func):
    """Shared SEQUENCE argument and --file option."""
    func = click.option(
        "--file", "-f",
        type=click.Path(exists=True, dir_okay=False),
        help="FASTA file with one or more sequences",
    )(func)
    func = click.argument("sequence", required=False)(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="bioprotease")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """
    bioprotease: predict proteolytic cleavage of protein sequences.

    \b
    • Complete digestion with built-in or custom specificities
    • Scissile bond listing with P4..P4' windows
    • Single-bond cleavage probing

    Run 'bioprotease COMMAND --help' for command-specific help.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbose=verbose, quiet=quiet)


@cli.command("digest")
@input_options
@specificity_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json", "tsv", "fasta"]),
    default="table",
    help="Output format",
)
@click.option("--min-length", type=int, default=1, help="Only report fragments at least this long")
@click.option("--max-length", type=int, default=None, help="Only report fragments at most this long")
def digest_cmd(
    sequence: Optional[str],
    file: Optional[str],
    enzyme: str,
    pattern: tuple,
    output_format: str,
    min_length: int,
    max_length: Optional[int],
):
    """
    Digest sequences completely and report the fragments.

    \b
    Examples:
        bioprotease digest MRAERVIKP
        bioprotease digest -f proteins.fasta -e lysc --format fasta
        bioprotease digest AAAACCCC -p '.{3}AC.{3}'
    """
    from ..core.sequence import to_fasta

    protease = _build_protease(enzyme, pattern)
    records = _collect_records(sequence, file)
    results = protease.digest_many(records)

    if output_format == "json":
        payload = []
        for result in results:
            data = result.model_dump()
            data["fragments"] = [
                f.model_dump() for f in result.fragments_in_range(min_length, max_length)
            ]
            data["statistics"] = result.length_statistics()
            payload.append(data)
        click.echo(json.dumps(payload, indent=2))

    elif output_format == "tsv":
        click.echo("\t".join(["protein_id", "index", "start", "end", "length", "sequence"]))
        for result in results:
            for frag in result.fragments_in_range(min_length, max_length):
                click.echo("\t".join([
                    result.sequence_id,
                    str(frag.index),
                    str(frag.start + 1),
                    str(frag.end),
                    str(frag.length),
                    frag.sequence,
                ]))

    elif output_format == "fasta":
        blocks = [
            to_fasta(result.fragments_in_range(min_length, max_length), parent_id=result.sequence_id)
            for result in results
        ]
        click.echo("\n".join(b for b in blocks if b))

    else:
        for result in results:
            table = Table(
                title=f"{result.sequence_id}: {protease.name}",
                show_header=True,
                header_style="bold cyan",
            )
            table.add_column("#", justify="right")
            table.add_column("Start", justify="right")
            table.add_column("End", justify="right")
            table.add_column("Length", justify="right")
            table.add_column("Fragment", style="bold")

            for frag in result.fragments_in_range(min_length, max_length):
                table.add_row(
                    str(frag.index),
                    str(frag.start + 1),
                    str(frag.end),
                    str(frag.length),
                    frag.sequence,
                )

            console.print(table)
            stats = result.length_statistics()
            console.print(
                f"[dim]{len(result.sites)} site(s), {stats['count']} fragment(s), "
                f"mean length {stats['mean']:.1f}[/dim]"
            )


@cli.command("sites")
@input_options
@specificity_options
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def sites_cmd(
    sequence: Optional[str],
    file: Optional[str],
    enzyme: str,
    pattern: tuple,
    as_json: bool,
):
    """
    List scissile bonds with their P4..P4' windows.

    Bonds are numbered from 1; bond i follows residue i.
    """
    protease = _build_protease(enzyme, pattern)
    records = _collect_records(sequence, file)
    results = protease.digest_many(records)

    if as_json:
        click.echo(json.dumps(
            {r.sequence_id: [s.model_dump() for s in r.sites] for r in results},
            indent=2,
        ))
        return

    for result in results:
        table = Table(title=f"{result.sequence_id}: {protease.name}", header_style="bold cyan")
        table.add_column("Bond", justify="right")
        table.add_column("P4-P1 | P1'-P4'", style="bold")
        table.add_column("P1")
        table.add_column("P1'")

        for site in result.sites:
            table.add_row(str(site.position), str(site), site.p1, site.p1_prime)

        if result.sites:
            console.print(table)
        else:
            console.print(f"[yellow]{result.sequence_id}: no scissile bonds[/yellow]")


@cli.command("cut")
@click.argument("sequence")
@click.argument("position", type=int)
@specificity_options
def cut_cmd(sequence: str, position: int, enzyme: str, pattern: tuple):
    """
    Try to cleave SEQUENCE after residue POSITION.

    Exits with status 1 if the position is out of range and 2 if the bond
    is not cleavable.
    """
    from ..digestion import InvalidPosition

    protease = _build_protease(enzyme, pattern, strict=True)
    try:
        products = protease.cut(sequence, position)
    except InvalidPosition as e:
        err_console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    if products is None:
        console.print(f"[yellow]No cut at bond {position}[/yellow]")
        sys.exit(2)

    n_term, c_term = products
    click.echo(n_term)
    click.echo(c_term)


@cli.command("check")
@input_options
@specificity_options
def check_cmd(sequence: Optional[str], file: Optional[str], enzyme: str, pattern: tuple):
    """
    Report whether each sequence is a substrate.

    Exits with status 0 if every sequence has at least one scissile bond,
    1 otherwise.
    """
    protease = _build_protease(enzyme, pattern)
    records = _collect_records(sequence, file)

    all_substrates = True
    for record in records:
        if protease.is_substrate(record.sequence):
            console.print(f"[green]✓[/green] {record.id}: substrate")
        else:
            all_substrates = False
            console.print(f"[red]✗[/red] {record.id}: not a substrate")

    sys.exit(0 if all_substrates else 1)


@cli.command("list-enzymes")
@click.option("--detailed", "-d", is_flag=True, help="Show the patterns of each specificity")
def list_enzymes_cmd(detailed: bool):
    """
    List all available specificities.
    """
    from ..specificity import get_specificity, list_specificities

    table = Table(
        title="Available Specificities",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    if detailed:
        table.add_column("Patterns")

    for name in list_specificities():
        info = get_specificity(name).get_info()
        row = [name, info["kind"]]
        if detailed:
            row.append(escape("\n".join(info.get("patterns", []))) or "-")
        table.add_row(*row)

    console.print(table)


@cli.command("enzyme-info")
@click.argument("name")
def enzyme_info_cmd(name: str):
    """
    Show details about a specificity.
    """
    from ..specificity import UnknownSpecificity, get_specificity

    try:
        info = get_specificity(name).get_info()
    except UnknownSpecificity:
        err_console.print(f"[red]Specificity '{name}' not found.[/red]")
        err_console.print("Run 'bioprotease list-enzymes' to see available options.")
        sys.exit(1)

    patterns = "\n".join(f"  {escape(p)}" for p in info.get("patterns", [])) or "  -"
    panel_content = f"""
[bold]Kind:[/bold] {info['kind']}
[bold]Description:[/bold] {info.get('description') or '-'}
[bold]Patterns (all must match):[/bold]
{patterns}
"""

    console.print(Panel(
        panel_content.strip(),
        title=f"[bold]{info['name']}[/bold]",
        border_style="blue",
    ))


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
