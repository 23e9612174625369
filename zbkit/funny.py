"""Jokes kept in a SQLite database, told with the listener's name filled in."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass


@dataclass(frozen=True)
class Joke:
    id: int
    text: str


class JokeStore:
    """A table of jokes in a SQLite file."""

    def __init__(self, path) -> None:
        self._db = sqlite3.connect(path)
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS jokes (id INTEGER PRIMARY KEY NOT NULL, text TEXT NOT NULL)"
        )
        self._db.commit()

    def count(self) -> int:
        """Number of jokes stored."""
        (n,) = self._db.execute("SELECT COUNT(*) FROM jokes").fetchone()
        return n

    def pick(self) -> Joke:
        """Return a random joke."""
        row = self._db.execute("SELECT id, text FROM jokes ORDER BY RANDOM() LIMIT 1").fetchone()
        if row is None:
            raise LookupError("no jokes stored")
        return Joke(*row)

    def tell(self, name: str) -> str:
        """Return a random joke about the named person."""
        return self.pick().text.replace("%name", name)

    def close(self) -> None:
        self._db.close()

    def __enter__(self) -> JokeStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()