"""Command-line interface for paper discovery."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer

from .citations import format_references, to_bibtex, to_ris
from .config.factory import create_discovery_service
from .config.loader import DEFAULT_CONFIG_PATH, DiscoveryConfig, list_profiles, load_config
from .errors import ClientInputError, TotalUnavailable
from .paper_sources import DiscoveryResult

app = typer.Typer(
    name="paper-discovery",
    help="Find citable academic papers for a research topic.",
    add_completion=False,
)


@app.command()
def search(
    topic: Annotated[str, typer.Argument(help="Research topic to find papers for")],
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Configuration profile to use"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
    ris_path: Annotated[
        Path,
        typer.Option("--ris", help="Also write an RIS bibliography to this path"),
    ] = None,
    bibtex_path: Annotated[
        Path,
        typer.Option("--bibtex", help="Also write a BibTeX bibliography to this path"),
    ] = None,
):
    """
    Search for papers about a topic.

    Examples:

        # Ranked papers as text
        paper-discovery search "quantum error correction"

        # JSON payload, as served by the API
        paper-discovery search "federated learning" --format json

        # Export bibliographies
        paper-discovery search "side channels" --ris refs.ris --bibtex refs.bib
    """
    if output_format not in ("text", "json"):
        typer.echo("Error: Format must be one of: text, json", err=True)
        raise typer.Exit(1)

    try:
        config = load_config(profile=profile)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
        raise typer.Exit(1)

    try:
        result = asyncio.run(_search_async(topic, config))
    except ClientInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except TotalUnavailable as e:
        typer.echo(f"Error: paper sources unavailable, try again later ({e})", err=True)
        raise typer.Exit(1)

    if ris_path:
        ris_path.write_text(to_ris(result.papers), encoding="utf-8", newline="")
        typer.echo(f"Wrote {ris_path}", err=True)
    if bibtex_path:
        bibtex_path.write_text(to_bibtex(result.papers), encoding="utf-8")
        typer.echo(f"Wrote {bibtex_path}", err=True)

    if output_format == "json":
        typer.echo(json.dumps(result.to_payload(), indent=2))
        return

    _print_result(result)


async def _search_async(topic: str, config: DiscoveryConfig) -> DiscoveryResult:
    """Async implementation of search."""
    async with create_discovery_service(config) as service:
        return await service.discover(topic)


def _print_result(result: DiscoveryResult) -> None:
    if not result.papers:
        typer.echo("No matching papers found. Try broadening the topic.")
        return

    typer.echo(f"Found {len(result.papers)} papers:\n")
    for i, paper in enumerate(result.papers, 1):
        typer.echo(f"{i}. {paper.title}")
        typer.echo(f"   Year: {paper.year} | Venue: {paper.venue}")
        if paper.authors:
            authors = ", ".join(paper.authors[:3])
            if len(paper.authors) > 3:
                authors += f" (+{len(paper.authors) - 3} more)"
            typer.echo(f"   Authors: {authors}")
        typer.echo(f"   URL: {paper.url}")
        typer.echo()

    if result.failures:
        typer.echo(f"Note: unavailable sources: {', '.join(result.failures)}", err=True)

    typer.echo("References:")
    for line in format_references(result.papers):
        typer.echo(f"  {line}")


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port to listen on")] = 8000,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("paper_discovery.api:app", host=host, port=port)


@app.command()
def profiles(
    config_path: Annotated[
        Path,
        typer.Option("--config", help="Profiles YAML file"),
    ] = DEFAULT_CONFIG_PATH,
):
    """List available configuration profiles."""
    typer.echo("Available profiles:\n")
    for name, profile in list_profiles(config_path).items():
        typer.echo(f"  {name}")
        typer.echo(f"    Primary: {profile.semantic_scholar.base_url}")
        typer.echo(f"    Secondary: {profile.openalex.base_url}")
        typer.echo(f"    Max results: {profile.max_results}")
        typer.echo(f"    Cache: {'on' if profile.cache.enabled else 'off'}")
        typer.echo()


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
