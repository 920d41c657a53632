"""Entry declaration parsing and validation"""

from pathlib import Path
from typing import Any, Iterable, List, Optional

from ..api.exceptions import ConfigError, EntryNotFoundError
from ..constants import ENTRY_SEPARATOR
from ..models.entry import Entry


def parse_entry(declaration: Any) -> Entry:
    """
    Parse a single entry declaration

    Accepted forms are a bare path (``src/app.js``, published as
    ``app.js``), a ``source:destination`` string, or a two-item sequence
    ``[source, destination]``.

    Args:
        declaration: Raw declaration from the CLI or configuration

    Returns:
        Entry (not yet validated against the filesystem)

    Raises:
        ConfigError: If the declaration is malformed
    """
    if isinstance(declaration, (list, tuple)):
        if len(declaration) != 2:
            raise ConfigError(f"Invalid entry {declaration!r}: expected [source, destination]")
        source, destination = (str(part) for part in declaration)
    elif isinstance(declaration, str):
        if ENTRY_SEPARATOR in declaration:
            source, destination = declaration.split(ENTRY_SEPARATOR, 1)
        else:
            source, destination = declaration, Path(declaration).name
    else:
        raise ConfigError(f"Invalid entry {declaration!r}")

    source, destination = source.strip(), destination.strip()
    if not source:
        raise ConfigError(f"Invalid entry {declaration!r}: empty source")
    if not destination:
        raise ConfigError(f"Invalid entry {declaration!r}: empty destination")

    return Entry(source_path=Path(source), output_name=destination)


def parse_entries(positional: Iterable[Any],
                  configured: Optional[Iterable[Any]] = None) -> List[Entry]:
    """Parse positional arguments followed by configured entries, in order"""
    declarations = list(positional or []) + list(configured or [])
    return [parse_entry(declaration) for declaration in declarations]


def validate_entries(entries: List[Entry], cwd: Optional[Path] = None) -> List[Entry]:
    """
    Resolve entry sources against ``cwd`` and check that they exist

    Duplicate destinations are kept; the publish pipeline overwrites.

    Args:
        entries: Parsed entries
        cwd: Directory relative sources are resolved against

    Returns:
        Entries with absolute source paths

    Raises:
        EntryNotFoundError: If any source is missing
    """
    cwd = Path(cwd or Path.cwd())
    resolved = []
    missing = []

    for entry in entries:
        source = entry.source_path if entry.source_path.is_absolute() else cwd / entry.source_path
        if not source.is_file():
            missing.append(str(entry.source_path))
            continue
        resolved.append(Entry(source_path=source, output_name=entry.output_name))

    if missing:
        raise EntryNotFoundError(missing)
    return resolved
