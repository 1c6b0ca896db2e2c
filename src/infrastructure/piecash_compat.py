"""Loading and opening piecash books against current SQLAlchemy releases."""

from __future__ import annotations

import inspect
import warnings
from pathlib import Path
from urllib.parse import urlparse

from sqlalchemy.exc import SAWarning

_PIECASH = None


def _patch_generate_base() -> None:
    """Drop the ``constructor`` argument piecash passes to ``generate_base``.

    Newer SQLAlchemy registries no longer accept it.
    """
    try:
        from sqlalchemy.orm import decl_api
    except ImportError:
        return
    original = decl_api.registry.generate_base
    if getattr(original, "_piecash_patched", False):
        return
    if "constructor" in inspect.signature(original).parameters:
        return

    def generate_base(self, *args, **kwargs):
        kwargs.pop("constructor", None)
        return original(self, *args, **kwargs)

    generate_base._piecash_patched = True  # type: ignore[attr-defined]
    decl_api.registry.generate_base = generate_base


def load_piecash():
    """Import piecash once, with the SQLAlchemy patch applied.

    Raises:
        ImportError: If piecash is not installed.
    """
    global _PIECASH
    if _PIECASH is None:
        _patch_generate_base()
        warnings.filterwarnings("ignore", category=SAWarning)
        import piecash

        _PIECASH = piecash
    return _PIECASH


def book_location(book_path: Path | str) -> tuple[str | None, str | None]:
    """Split a book location into ``(sqlite_file, uri_conn)``.

    Database URIs are passed through; paths and ``file`` URIs become a
    resolved SQLite file path.
    """
    if isinstance(book_path, Path):
        return str(book_path), None
    parsed = urlparse(book_path)
    if parsed.scheme and parsed.scheme != "file":
        return None, book_path
    raw_path = parsed.path if parsed.scheme == "file" else book_path
    return str(Path(raw_path).expanduser().resolve()), None


def open_piecash_book(
    piecash,
    book_path: Path | str,
    *,
    readonly: bool = True,
    open_if_lock: bool = True,
):
    """Open a book read-only without creating backups."""
    sqlite_file, uri_conn = book_location(book_path)
    return piecash.open_book(
        sqlite_file=sqlite_file,
        uri_conn=uri_conn,
        readonly=readonly,
        open_if_lock=open_if_lock,
        do_backup=False,
    )


__all__ = ["load_piecash", "book_location", "open_piecash_book"]
