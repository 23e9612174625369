import sqlite3

import pytest

from zbkit.funny import JokeStore


def _fill(path, texts):
    con = sqlite3.connect(path)
    con.execute("CREATE TABLE jokes (id INTEGER PRIMARY KEY NOT NULL, text TEXT NOT NULL)")
    con.executemany("INSERT INTO jokes (text) VALUES (?)", [(t,) for t in texts])
    con.commit()
    con.close()


def test_count_and_pick(tmp_path):
    path = tmp_path / "jokes.db"
    texts = ["one", "two", "three"]
    _fill(path, texts)
    with JokeStore(path) as store:
        assert store.count() == len(texts)
        for _ in range(10):
            assert store.pick().text in texts


def test_tell_replaces_name(tmp_path):
    path = tmp_path / "jokes.db"
    _fill(path, ["%name说%name好"])
    with JokeStore(path) as store:
        assert store.tell("小明") == "小明说小明好"


def test_empty_store(tmp_path):
    with JokeStore(tmp_path / "empty.db") as store:
        assert store.count() == 0
        with pytest.raises(LookupError):
            store.pick()


def test_closed_store(tmp_path):
    store = JokeStore(tmp_path / "x.db")
    store.close()
    with pytest.raises(sqlite3.ProgrammingError):
        store.count()