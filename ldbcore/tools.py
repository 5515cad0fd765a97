"""Small command helpers operating on an open database."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Any, BinaryIO, TextIO


def get(db: Any, key: str, out: TextIO | None = None) -> None:
    """Print the value stored under key, or that it was not found."""
    out = sys.stderr if out is None else out
    value = db.get(key.encode())
    if value is None:
        print(f"{key} => <not found>", file=out)
        return
    try:
        text = bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        text = str(list(value))
    print(f"{key} => {text}", file=out)


def put(db: Any, key: str, value: str) -> None:
    """Store value under key and flush it to disk."""
    db.put(key.encode(), value.encode())
    db.flush()


def delete(db: Any, key: str) -> None:
    """Delete key and flush the deletion to disk."""
    db.delete(key.encode())
    db.flush()


def iterate(db: Any, out: BinaryIO | None = None) -> None:
    """Write every entry of the database as a 'key => value' line."""
    out = sys.stdout.buffer if out is None else out
    for key, value in db.new_iter():
        out.write(bytes(key) + b" => " + bytes(value) + b"\n")
    out.flush()


def compact(db: Any, start: str, limit: str) -> None:
    """Compact the key range from start to limit."""
    db.compact_range(start.encode(), limit.encode())


def update_count(db: Any, word: str) -> None:
    """Increment the decimal counter stored under word."""
    key = word.encode()
    stored = db.get(key)
    count = int(bytes(stored).decode()) if stored is not None else 0
    db.put(key, str(count + 1).encode())


def count_words(db: Any, lines: Iterable[str]) -> None:
    """Count the words of lines, lowercased and stripped to ASCII letters and digits."""
    for line in lines:
        for raw in line.split():
            word = "".join(c.lower() for c in raw if c.isascii() and c.isalnum())
            update_count(db, word)