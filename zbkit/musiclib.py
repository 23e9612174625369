"""Local song library for the music guessing game: settings, playlists and song draws."""

from __future__ import annotations

import json
import os
import random
from dataclasses import dataclass, field
from typing import Any, Callable

import requests

OVOOA_URL = "https://ovooa.com/API/163_Music_Rand/api.php?id="
DEFAULT_PLAYLIST_NAME = "FM"
DEFAULT_PLAYLIST_ID = 3136952023


class MusicLibraryError(Exception):
    """The song library or its settings could not be used."""


@dataclass
class Playlist:
    """A local playlist bound to an online playlist id."""

    name: str
    id: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id}

    @classmethod
    def from_dict(cls, data: dict) -> Playlist:
        return cls(name=str(data.get("name") or ""), id=int(data.get("id") or 0))


@dataclass
class DefaultList:
    """The playlist a group guesses from by default."""

    group_id: int
    name: str

    def to_dict(self) -> dict:
        return {"gid": self.group_id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> DefaultList:
        return cls(group_id=int(data.get("gid") or 0), name=str(data.get("name") or ""))


@dataclass
class Config:
    """Settings of the song library."""

    music_path: str = ""
    local: bool = False
    api: bool = False
    cookie: str = ""
    playlist: list[Playlist] = field(default_factory=list)
    defaultlist: list[DefaultList] = field(default_factory=list)

    def default_list(self, group_id: int) -> str | None:
        """Name of the group's default playlist, or None when it has none."""
        for entry in self.defaultlist:
            if entry.group_id == group_id:
                return entry.name
        return None

    def to_dict(self) -> dict:
        return {
            "musicPath": self.music_path,
            "local": self.local,
            "api": self.api,
            "cookie": self.cookie,
            "playlist": [p.to_dict() for p in self.playlist] or None,
            "defaultlist": [d.to_dict() for d in self.defaultlist] or None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        if not isinstance(data, dict):
            raise MusicLibraryError("config is not a JSON object")
        return cls(
            music_path=str(data.get("musicPath") or ""),
            local=bool(data.get("local")),
            api=bool(data.get("api")),
            cookie=str(data.get("cookie") or ""),
            playlist=[Playlist.from_dict(p) for p in data.get("playlist") or []],
            defaultlist=[DefaultList.from_dict(d) for d in data.get("defaultlist") or []],
        )


@dataclass(frozen=True)
class ListInfo:
    """A playlist found on disk."""

    name: str
    number: int
    id: int = 0


def default_config(bot_path: str) -> Config:
    """Settings used when none are saved yet."""
    return Config(
        music_path=bot_path + "/data/guessmusic/music/",
        api=True,
        local=True,
        playlist=[Playlist(DEFAULT_PLAYLIST_NAME, DEFAULT_PLAYLIST_ID)],
    )


def save_config(config: Config, path) -> None:
    """Write the settings as JSON."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(config.to_dict(), ensure_ascii=False) + "\n")


def load_config(path, bot_path: str) -> Config:
    """Read the saved settings, creating the defaults when there are none."""
    if not os.path.exists(path):
        config = default_config(bot_path)
        save_config(config, path)
        return config
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as exc:
        raise MusicLibraryError(f"invalid config: {exc}") from exc
    return Config.from_dict(data)


def get_lists(config: Config, music_path: str) -> list[ListInfo]:
    """List the playlists (sub-folders) of the library with their song counts."""
    bound = {p.name: p.id for p in config.playlist if p.id != 0}
    os.makedirs(music_path, exist_ok=True)
    entries = sorted(os.scandir(music_path), key=lambda e: e.name)
    if not entries:
        raise MusicLibraryError("所设置的歌库不存在任何歌单！")
    lists = []
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            count = len(os.listdir(entry.path))
        except OSError:
            continue
        lists.append(ListInfo(entry.name, count, bound.get(entry.name, 0)))
    return lists


def local_music(entries, rng=None) -> str:
    """Pick a random song file among folder entries; "" when the only entry is a folder."""
    entries = list(entries)
    if not entries:
        raise MusicLibraryError("本地歌单数据为0")
    if len(entries) == 1:
        only = entries[0]
        return "" if only.is_dir() else only.name
    files = [e for e in entries if not e.is_dir()]
    if not files:
        raise MusicLibraryError("歌单中没有歌曲文件")
    return (rng or random).choice(files).name


def _ovooa(playlist_id, session) -> dict:
    http = session if session is not None else requests.Session()
    resp = http.get(OVOOA_URL + str(playlist_id))
    resp.raise_for_status()
    data = json.loads(resp.content)
    return data if isinstance(data, dict) else {}


def draw_song_id(playlist_id: int, session=None) -> int:
    """Draw a random song id from an online playlist; 0 when the service declines."""
    parsed = _ovooa(playlist_id, session)
    if parsed.get("code") != 1:
        return 0
    return int((parsed.get("data") or {}).get("id") or 0)


def music_lottery(
    config: Config,
    music_path: str,
    list_name: str,
    rng=None,
    downloader: Callable[[int, str], str] | None = None,
) -> tuple[str, str]:
    """Pick a song from a playlist; return (folder path, song file name).

    When the playlist is bound to an online one and online draws are on, two
    draws in three try the downloader first and fall back to a local song.
    """
    rng = rng or random.Random()
    try:
        lists = get_lists(config, music_path)
    except (MusicLibraryError, OSError) as exc:
        raise MusicLibraryError(f"获取列表错误,{exc}") from exc
    ids = {info.name: info.id for info in lists}
    if list_name not in ids:
        raise MusicLibraryError("指定的歌单不存在与列表当中")
    playlist_id = ids[list_name]
    folder = os.path.join(music_path, list_name, "")
    os.makedirs(folder, exist_ok=True)
    entries = sorted(os.scandir(folder), key=lambda e: e.name)
    online = playlist_id != 0 and config.api

    if not entries:
        if not online:
            raise MusicLibraryError("本地歌单数据为0")
        if downloader is None:
            raise MusicLibraryError("本地歌单数据为0,API下载歌曲失败")
        try:
            return folder, downloader(playlist_id, folder)
        except Exception as exc:
            raise MusicLibraryError(f"本地歌单数据为0,API下载歌曲失败\n{exc}") from exc

    if not online or rng.randrange(3) == 1 or downloader is None:
        return folder, local_music(entries, rng)
    try:
        return folder, downloader(playlist_id, folder)
    except Exception:
        return folder, local_music(entries, rng)


def _describe(value: Any) -> str:
    return str(value)