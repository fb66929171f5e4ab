"""dotgraph CLI application entry point.

Built with `Typer <https://typer.tiangolo.com/>`_ and
`Rich <https://rich.readthedocs.io/>`_.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dotgraph.cli.config import DotGraphConfig, load_config, write_default_config
from dotgraph.cli.errors import CLIError, error_handler
from dotgraph.cli.logging_setup import setup_logging
from dotgraph.models.graph import Graph
from dotgraph.parser.api import DotParser
from dotgraph.render import render_dot

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="dotgraph",
    help="dotgraph – parse, check and reformat Graphviz DOT files.",
    add_completion=False,
    no_args_is_help=True,
)

_console = Console(stderr=True)
_out = Console()


# ---------------------------------------------------------------------------
# Version callback
# ---------------------------------------------------------------------------

def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from dotgraph import __version__

        _out.print(f"dotgraph {__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Main callback (global options)
# ---------------------------------------------------------------------------

@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) output.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration TOML file.",
    ),
) -> None:
    """Global options for the dotgraph CLI."""
    with error_handler(_console):
        cfg = load_config(config)
    level = "DEBUG" if verbose else cfg.log_level
    setup_logging(level, cfg.log_file, console=_console)
    ctx.obj = cfg


def _config(ctx: typer.Context) -> DotGraphConfig:
    return ctx.obj if isinstance(ctx.obj, DotGraphConfig) else DotGraphConfig()


def _load(ctx: typer.Context, path: Path) -> Graph:
    if not path.is_file():
        raise CLIError(f"File not found: {path}")
    graph = DotParser(_config(ctx).parser_config()).parse_file(path)
    logger.info(
        "Parsed %s: %d nodes, %d edges", path, graph.node_count, graph.edge_count
    )
    return graph


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def parse(
    ctx: typer.Context,
    dot_file: Path = typer.Argument(..., help="DOT file to parse."),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the parsed graph model as JSON to stdout.",
    ),
) -> None:
    """Parse a DOT file and summarise the resulting graph.

    Example::

        dotgraph parse pipeline.dot
        dotgraph parse pipeline.dot --json
    """
    with error_handler(_console):
        graph = _load(ctx, dot_file)
        if json_output:
            typer.echo(graph.to_json())
            return

        table = Table(title=f"Graph {graph.name!r}")
        table.add_column("Property", style="bold")
        table.add_column("Value")
        table.add_row("kind", "digraph" if graph.directed else "graph")
        table.add_row("strict", str(graph.strict).lower())
        table.add_row("nodes", str(graph.node_count))
        table.add_row("edges", str(graph.edge_count))
        table.add_row("subgraphs", str(sum(1 for _ in graph.walk_subgraphs())))
        table.add_row("clusters", ", ".join(sg.name for sg in graph.clusters()) or "-")
        _out.print(table)


@app.command()
def check(
    ctx: typer.Context,
    dot_file: Path = typer.Argument(..., help="DOT file to check."),
) -> None:
    """Exit 0 if the file is valid DOT, 1 with a diagnostic otherwise."""
    with error_handler(_console):
        graph = _load(ctx, dot_file)
        _out.print(
            f"[green]OK[/green] {dot_file}: "
            f"{graph.node_count} nodes, {graph.edge_count} edges"
        )


@app.command("fmt")
def fmt(
    ctx: typer.Context,
    dot_file: Path = typer.Argument(..., help="DOT file to reformat."),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the canonical DOT here instead of stdout.",
    ),
) -> None:
    """Re-render a DOT file in canonical form."""
    with error_handler(_console):
        graph = _load(ctx, dot_file)
        text = render_dot(graph, indent=" " * _config(ctx).indent)
        if output is None:
            typer.echo(text, nl=False)
            return
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        _console.print(f"[green]Wrote {output}[/green]")


@app.command()
def tokens(
    ctx: typer.Context,
    dot_file: Path = typer.Argument(..., help="DOT file to tokenize."),
) -> None:
    """Dump the lexer's token stream for a DOT file."""
    with error_handler(_console):
        if not dot_file.is_file():
            raise CLIError(f"File not found: {dot_file}")
        parser = DotParser(_config(ctx).parser_config())
        table = Table(show_header=True)
        table.add_column("Pos")
        table.add_column("Type")
        table.add_column("Value")
        for tok in parser.tokenize(dot_file.read_text(encoding="utf-8")):
            table.add_row(f"{tok.line}:{tok.column}", tok.type.name, repr(tok.value))
        _out.print(table)


@app.command()
def init(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Directory to create .dotgraph/config.toml in.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing configuration file.",
    ),
) -> None:
    """Write a default configuration file for a project.

    Example::

        dotgraph init
        dotgraph init path/to/project --force
    """
    with error_handler(_console):
        config_path = write_default_config(project_dir.resolve(), force=force)
        logger.info("Wrote default configuration to %s", config_path)
        _console.print(f"[green]Created {config_path}[/green]")
