"""Main CLI entry point."""

import asyncio
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import click

from .. import __version__
from ..config import ConfigManager
from ..core.interfaces import (
    ICatalogRepository,
    ICommandGenerator,
    IDiskClassifier,
    IImportScanner,
    IMetadataLinker,
    IMetadataProvider,
    IMetadataStore,
)
from ..core.models import (
    DiskFormat,
    ImportMode,
    MediaEntry,
    MediaKind,
    Metadata,
    TitleCandidate,
)
from ..core.services import ImportSession
from ..infrastructure import Container, setup_logging
from ..utils import ConfigurationError, MediaShelfError, parse_genres
from ..utils.naming import DEFAULT_FILM_DISK_LABEL

MAX_SEARCH_RESULTS = 10


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="media-shelf")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Media Shelf - Catalog and play backups of Blu-Ray and DVD disks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Skip configuration loading for commands that don't need it
    if ctx.invoked_subcommand == "init":
        return

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        setup_logging(app_config.logging, verbose=verbose)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
@click.option("--media-dir", type=click.Path(path_type=Path), help="Catalog root directory")
@click.option("--import-dir", type=click.Path(path_type=Path), help="Import root directory")
def init(output: Path, media_dir: Optional[Path], import_dir: Optional[Path]) -> None:
    """Initialize configuration file."""
    if output.exists():
        if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
            return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        ConfigManager.create_default_config(output, media_dir=media_dir, import_dir=import_dir)
    except OSError as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration file created at: {output}")
    if not ConfigManager(output, load_env_file=False).validate_config_file(output):
        click.echo("Set catalog.media_dir to an existing directory before use.")
    click.echo("Optionally add a TMDb API key to enable metadata linking.")


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and catalog directories."""
    container = ctx.obj["container"]
    config = ctx.obj["config"]

    with _handle_errors():
        repository = container.get(ICatalogRepository)
        entries = repository.list_entries()
        leftovers = repository.staging_leftovers()
    click.echo(f"Catalog: {config.catalog.media_dir} ({len(entries)} entries)")
    for path in leftovers:
        click.echo(f"Warning: interrupted import left {path}; move or delete it by hand")

    if config.catalog.import_dir is None:
        click.echo("Import directory: not configured")
    else:
        with _handle_errors():
            found = container.get(IImportScanner).list_candidates()
        click.echo(f"Import directory: {config.catalog.import_dir} ({len(found)} candidates)")

    click.echo(f"TMDb: {'configured' if config.tmdb.enabled else 'not configured'}")
    click.echo("Configuration is valid")


@cli.command(name="list")
@click.pass_context
def list_entries(ctx: click.Context) -> None:
    """List all media in the catalog."""
    container = ctx.obj["container"]

    with _handle_errors():
        repository = container.get(ICatalogRepository)
        entries = repository.list_entries()

    if not entries:
        click.echo("The catalog is empty.")
        return

    for entry in entries:
        _load_metadata(container, entry)
        click.echo(
            f"{entry.slug:<40} {entry.display_title} [{entry.kind.value}] "
            f"{entry.disk_count} disk(s), {_format_size(entry.total_size_gb)}"
        )


@cli.command()
@click.argument("slug")
@click.pass_context
def show(ctx: click.Context, slug: str) -> None:
    """Show one media entry with its disks and metadata."""
    container = ctx.obj["container"]

    with _handle_errors():
        entry = container.get(ICatalogRepository).get(slug)
        metadata = _load_metadata(container, entry)

    click.echo(entry.display_title)
    click.echo("=" * len(entry.display_title))
    click.echo(f"Kind: {entry.kind.value}")
    click.echo(f"Path: {entry.path}")
    if metadata.tmdb_id:
        click.echo(f"TMDb: {metadata.tmdb_id}")
    if metadata.genres:
        click.echo(f"Genres: {', '.join(metadata.genres)}")
    if metadata.has_poster:
        click.echo(f"Poster: {metadata.poster_path}")
    if metadata.description:
        click.echo("")
        click.echo(metadata.description)

    click.echo("")
    click.echo(f"Disks ({entry.disk_count}):")
    for disk in entry.disks:
        click.echo(f"  {disk.display_name:<40} {_format_size(disk.size_gb)}")


@cli.command()
@click.argument("slug")
@click.pass_context
def play(ctx: click.Context, slug: str) -> None:
    """Print VLC and MPV commands for every disk of an entry."""
    container = ctx.obj["container"]

    with _handle_errors():
        entry = container.get(ICatalogRepository).get(slug)
        generator = container.get(ICommandGenerator)

    if not entry.disks:
        click.echo(f"{entry.display_title} has no disks.")
        return

    for disk in entry.disks:
        commands = generator.generate(disk)
        click.echo(f"{disk.display_name}:")
        click.echo(f"  {commands.vlc}")
        click.echo(f"  {commands.mpv}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def classify(ctx: click.Context, path: Path) -> None:
    """Detect the disk format of a directory."""
    container = ctx.obj["container"]
    disk_format = container.get(IDiskClassifier).classify(path)
    click.echo(disk_format.value)


@cli.command()
@click.pass_context
def candidates(ctx: click.Context) -> None:
    """List directories waiting in the import folder."""
    container = ctx.obj["container"]

    with _handle_errors():
        found = container.get(IImportScanner).list_candidates()

    if not found:
        click.echo("No import candidates found.")
        return

    for candidate in found:
        year = f" ({candidate.year_guess})" if candidate.year_guess else ""
        click.echo(
            f"{candidate.name:<40} {candidate.detected_format.value:<8} "
            f"{_format_size(candidate.size_gb):>10}  {candidate.title_guess}{year}"
        )


@cli.command(name="import")
@click.option("--source", "-s", help="Import candidate name or path")
@click.pass_context
def import_disk(ctx: click.Context, source: Optional[str]) -> None:
    """Import a disk backup with an interactive wizard."""
    container = ctx.obj["container"]

    try:
        _run_import_wizard(container, source)
    except click.Abort:
        click.echo("\nImport cancelled.")
        sys.exit(1)
    except MediaShelfError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("query")
@click.option("--tv", is_flag=True, help="Search TV series instead of films")
@click.option("--year", type=int, help="Release year")
@click.pass_context
def search(ctx: click.Context, query: str, tv: bool, year: Optional[int]) -> None:
    """Search TMDb for a title."""
    container = ctx.obj["container"]
    kind = MediaKind.TV if tv else MediaKind.FILM

    with _handle_errors():
        linker = _require_linker(container)
        results = asyncio.run(_search(container, linker, query, kind, year))

    if not results:
        click.echo("No matches found.")
        return

    for candidate in results[:MAX_SEARCH_RESULTS]:
        click.echo(_format_candidate(candidate))


@cli.command()
@click.argument("slug")
@click.argument("tmdb_id")
@click.pass_context
def link(ctx: click.Context, slug: str, tmdb_id: str) -> None:
    """Set or change the TMDb id of an entry and fetch its metadata."""
    container = ctx.obj["container"]

    with _handle_errors():
        linker = _require_linker(container)
        entry = container.get(ICatalogRepository).get(slug)
        metadata = asyncio.run(_link(container, linker, entry, tmdb_id))

    click.echo(f"Linked {entry.name} to TMDb {metadata.tmdb_id}")
    if metadata.title:
        click.echo(f"Title: {metadata.title}")


@cli.command(name="set-meta")
@click.argument("slug")
@click.option("--title", help="Title override; empty string removes it")
@click.option("--description", help="Description; empty string removes it")
@click.option("--genres", help="Comma separated genres; empty string removes them")
@click.pass_context
def set_meta(
    ctx: click.Context,
    slug: str,
    title: Optional[str],
    description: Optional[str],
    genres: Optional[str],
) -> None:
    """Edit the sidecar metadata of an entry by hand."""
    container = ctx.obj["container"]

    if title is None and description is None and genres is None:
        click.echo("Nothing to change.", err=True)
        sys.exit(1)

    with _handle_errors():
        entry = container.get(ICatalogRepository).get(slug)
        store = container.get(IMetadataStore)
        if title is not None:
            store.set_title_override(entry, title)
        if description is not None:
            store.set_description(entry, description)
        if genres is not None:
            store.set_genres(entry, parse_genres(genres))

    click.echo(f"Updated metadata of {entry.name}")


def _run_import_wizard(container: Container, source: Optional[str]) -> None:
    """Drive an import session through click prompts."""
    scanner = container.get(IImportScanner)  # type: ignore
    session: ImportSession = container.get(ImportSession)

    if not source:
        found = scanner.list_candidates()
        if not found:
            click.echo("No import candidates found.")
            return
        for i, candidate in enumerate(found, 1):
            click.echo(f"{i:>3}. {candidate.name} [{candidate.detected_format.value}]")
        choice = click.prompt("Source", type=click.IntRange(1, len(found)))
        source = found[choice - 1].name

    candidate = session.select_source(source)
    click.echo(
        f"Selected {candidate.name}: {candidate.detected_format.value}, "
        f"{_format_size(candidate.size_gb)}"
    )

    modes = [mode.value for mode in session.available_modes()]
    mode = click.prompt("Mode", type=click.Choice(modes), default=ImportMode.NEW_MEDIA.value)
    session.select_mode(mode)

    if session.mode == ImportMode.NEW_MEDIA:
        kind = click.prompt(
            "Kind", type=click.Choice([k.value for k in MediaKind]), default=MediaKind.FILM.value
        )
        session.select_kind(kind)

        if container.is_registered(IMetadataLinker) and click.confirm(
            "Look up the title on TMDb?", default=False
        ):
            asyncio.run(_attach_tmdb(container, session))

        tmdb = session.tmdb_metadata
        title = click.prompt(
            "Title", default=(tmdb.title if tmdb else None) or candidate.title_guess
        )
        year = None
        if session.kind == MediaKind.FILM:
            year = click.prompt(
                "Year", type=int, default=(tmdb.year if tmdb else None) or candidate.year_guess
            )
        session.set_identity(title=title, year=year)
    else:
        entries = session.compatible_entries()
        for entry in entries:
            click.echo(f"  {entry.slug:<40} {entry.display_title}")
        slug = click.prompt("Existing media", type=click.Choice([e.slug for e in entries]))
        session.choose_existing(slug)

    format_override = None
    if candidate.detected_format == DiskFormat.UNKNOWN:
        click.echo("The disk format could not be detected.")
        format_override = click.prompt(
            f"Disk format ({DiskFormat.BLU_RAY.value}, {DiskFormat.BLU_RAY_UHD.value}, "
            f"{DiskFormat.DVD.value} or other)",
            default=DiskFormat.BLU_RAY.value,
        )

    if session.kind == MediaKind.TV:
        season = click.prompt("Season", type=click.IntRange(min=1))
        disk_number = click.prompt("Disk number", type=click.IntRange(min=1))
        session.set_placement(
            season=season, disk_number=disk_number, format_override=format_override
        )
    else:
        label = click.prompt("Disk label", default=DEFAULT_FILM_DISK_LABEL)
        session.set_placement(label=label, format_override=format_override)

    preview = session.preview()
    click.echo("")
    click.echo(f"Media:       {preview.entry_name}{' (new)' if preview.creates_entry else ''}")
    click.echo(f"Disk:        {preview.disk_dir_name}")
    click.echo(f"Destination: {preview.destination}")
    click.echo(f"Size:        {_format_size(preview.size_gb)}")
    if preview.tmdb_id:
        click.echo(f"TMDb:        {preview.tmdb_id}")

    if not click.confirm("Move the disk into the catalog?", default=True):
        session.cancel()
        click.echo("Import cancelled.")
        return

    result = session.commit()
    click.echo(f"Imported {result.disk.dir_name} into {result.entry.name}")
    if preview.tmdb_id and not result.metadata_written:
        click.echo("Warning: TMDb metadata could not be saved; use 'link' to retry.", err=True)


async def _attach_tmdb(container: Container, session: ImportSession) -> None:
    """Let the user pick a TMDb match and attach it to the session."""
    linker = container.get(IMetadataLinker)  # type: ignore
    provider = container.get(IMetadataProvider)  # type: ignore
    guess = session.source.title_guess if session.source else ""
    year = session.source.year_guess if session.source else None
    query = click.prompt("Search TMDb for", default=guess)

    try:
        results = (await linker.search(query, session.kind, year))[:MAX_SEARCH_RESULTS]
        if not results:
            click.echo("No matches found.")
            return
        for i, candidate in enumerate(results, 1):
            click.echo(f"{i:>3}. {_format_candidate(candidate)}")
        choice = click.prompt("Match (0 to skip)", type=click.IntRange(0, len(results)), default=0)
        if choice == 0:
            return
        metadata = await provider.fetch_metadata(session.kind, results[choice - 1].tmdb_id)
        session.attach_metadata(metadata)
    finally:
        await container.aclose()


async def _search(
    container: Container,
    linker: IMetadataLinker,
    query: str,
    kind: MediaKind,
    year: Optional[int],
) -> List[TitleCandidate]:
    try:
        return await linker.search(query, kind, year)
    finally:
        await container.aclose()


async def _link(
    container: Container, linker: IMetadataLinker, entry: MediaEntry, tmdb_id: str
) -> Metadata:
    try:
        return await linker.link(entry, tmdb_id)
    finally:
        await container.aclose()


def _require_linker(container: Container) -> IMetadataLinker:
    if not container.is_registered(IMetadataLinker):
        raise ConfigurationError("TMDb API key is not configured")
    return container.get(IMetadataLinker)  # type: ignore


def _load_metadata(container: Container, entry: MediaEntry) -> Metadata:
    metadata = container.get(IMetadataStore).read(entry)  # type: ignore
    entry.metadata = metadata
    return metadata


def _format_candidate(candidate: TitleCandidate) -> str:
    year = f" ({candidate.year})" if candidate.year else ""
    return f"{candidate.tmdb_id:>8}  {candidate.title}{year}"


def _format_size(size_gb: float) -> str:
    return f"{size_gb:.1f} GB"


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Print typed errors and exit with status 1."""
    try:
        yield
    except MediaShelfError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
