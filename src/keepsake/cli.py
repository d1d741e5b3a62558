"""Keepsake CLI - baby photo journal."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.age import AgeDuration, compute_age
from .core.entries import ChildProfile, JournalEntry
from .core.filters import filter_entries, unique_age_years
from .errors import JournalError
from .workflows import add_entry, edit_entry, get_backend, open_store


def _parse_date(ctx, param, value: str | None) -> date | None:
    """Click callback for YYYY-MM-DD options."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a YYYY-MM-DD date")


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def format_age(age: AgeDuration) -> str:
    """Human-readable age, e.g. '1 year 3 months 5 days'."""

    def unit(n: int, name: str) -> str:
        return f"{n} {name}" if n == 1 else f"{n} {name}s"

    parts = []
    if age.years:
        parts.append(unit(age.years, "year"))
    if age.months:
        parts.append(unit(age.months, "month"))
    if age.days or not parts:
        parts.append(unit(age.days, "day"))
    return " ".join(parts)


def _entry_json(e: JournalEntry) -> dict:
    return e.to_record()


def _show_entry(e: JournalEntry) -> None:
    tags = f" [{', '.join(e.tags)}]" if e.tags else ""
    photos = f" ({len(e.photos)} photo{'s' if len(e.photos) != 1 else ''})" if e.photos else ""
    click.echo(f"{e.id}  {e.date.isoformat()}  {format_age(e.age_at_time)}{tags}{photos}")
    if e.notes:
        for line in e.notes.strip().splitlines():
            click.echo(f"    {line}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="keepsake")
def main(debug: bool):
    """Keepsake - baby photo journal CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--name", prompt="Child's name", help="Child's name")
@click.option("--birth-date", prompt="Birth date (YYYY-MM-DD)", callback=_parse_date,
              help="Birth date (YYYY-MM-DD)")
def init(name: str, birth_date: date):
    """Create or replace the child profile."""
    try:
        profile = ChildProfile(name=name.strip(), birth_date=birth_date)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--name")

    try:
        store = open_store(load_config())
        store.save_profile(profile)
    except JournalError as e:
        _fail(e)

    click.echo(f"Profile saved: {profile.name}, born {profile.birth_date.isoformat()}")


@main.command()
def profile():
    """Show the child profile and current age."""
    try:
        p = open_store(load_config()).require_profile()
    except JournalError as e:
        _fail(e)

    age = compute_age(p.birth_date, date.today())
    click.echo(f"{p.name}")
    click.echo(f"Born: {p.birth_date.strftime('%A, %B %d, %Y')}")
    click.echo(f"Age:  {format_age(age)}")


@main.command()
@click.option("--date", "-d", "entry_date", default=None, callback=_parse_date,
              help="Date of the moment (YYYY-MM-DD), defaults to today")
@click.option("--notes", "-n", default="", help="Notes for the entry")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--photo", "-p", "photos", multiple=True,
              type=click.Path(exists=True, dir_okay=False), help="Photo file (repeatable)")
def add(entry_date: date | None, notes: str, tags: tuple[str, ...], photos: tuple[str, ...]):
    """Record a new journal entry."""
    try:
        store = open_store(load_config())
        entry = add_entry(store, entry_date or date.today(), notes, tags, photos)
    except JournalError as e:
        _fail(e)

    click.echo(f"Saved entry {entry.id} (age {format_age(entry.age_at_time)})")


@main.command()
@click.argument("entry_id")
@click.option("--date", "-d", "entry_date", default=None, callback=_parse_date,
              help="New date (YYYY-MM-DD)")
@click.option("--notes", "-n", default=None, help="Replace notes")
@click.option("--tag", "-t", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--photo", "-p", "photos", multiple=True,
              type=click.Path(exists=True, dir_okay=False), help="Add a photo file (repeatable)")
@click.option("--clear-photos", is_flag=True, help="Drop existing photos from the entry")
def edit(
    entry_id: str,
    entry_date: date | None,
    notes: str | None,
    tags: tuple[str, ...],
    photos: tuple[str, ...],
    clear_photos: bool,
):
    """Edit an existing journal entry."""
    try:
        store = open_store(load_config())
        entry = edit_entry(
            store,
            entry_id,
            entry_date=entry_date,
            notes=notes,
            tags=tags or None,
            photo_paths=photos,
            clear_photos=clear_photos,
        )
    except JournalError as e:
        _fail(e)

    click.echo(f"Updated entry {entry.id} (age {format_age(entry.age_at_time)})")


@main.command()
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def delete(entry_id: str, yes: bool):
    """Delete a journal entry (stored photos are kept)."""
    if not yes and not click.confirm(f"Delete entry {entry_id}? Stored photos will be kept"):
        return

    try:
        open_store(load_config()).delete(entry_id)
    except JournalError as e:
        _fail(e)

    click.echo(f"Deleted entry {entry_id}")


@main.command("list")
@click.option("--search", "-s", default="", help="Only entries whose notes contain this text")
@click.option("--tag", "-t", default=None, help="Only entries with this tag")
@click.option("--age", "-a", "age_years", type=int, default=None, help="Only entries at this age in years")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_entries(search: str, tag: str | None, age_years: int | None, as_json: bool):
    """List journal entries, newest first."""
    try:
        entries = open_store(load_config()).list()
    except JournalError as e:
        _fail(e)

    matches = filter_entries(entries, search=search, tag=tag, age_years=age_years)

    if as_json:
        click.echo(json.dumps([_entry_json(e) for e in matches], indent=2, ensure_ascii=False))
        return

    if not matches:
        click.echo("No entries." if not entries else "No entries match.")
        return

    for e in matches:
        _show_entry(e)

    years = unique_age_years(entries)
    if len(years) > 1 and age_years is None:
        click.echo(f"\nAges (years): {', '.join(str(y) for y in years)}")


@main.command()
@click.option("--add", "new_tags", multiple=True, help="Add a tag to the vocabulary (repeatable)")
def tags(new_tags: tuple[str, ...]):
    """Show (or extend) the tag vocabulary."""
    try:
        store = open_store(load_config())
        vocabulary = store.remember_tags(new_tags) if new_tags else store.load_tags()
    except JournalError as e:
        _fail(e)

    for tag in vocabulary:
        click.echo(f"• {tag}")


@main.command()
def auth():
    """Authenticate with Google (Sheets + Drive backend)."""
    config = load_config()

    if config.backend != "google":
        click.echo("BACKEND is not 'google' in keepsake.conf; nothing to authenticate.")
        return

    try:
        backend = get_backend(config)
    except JournalError as e:
        _fail(e)

    if backend.authenticate():
        click.echo(f"✓ Token saved to {config.google_token_file}")
    else:
        click.echo("✗ Authentication failed", err=True)
        sys.exit(1)
