"""Guess-the-song rounds: song names, audio clips and the answer game."""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass

from zbkit.musiclib import MusicLibraryError

MUSIC_TYPE_LIST = "mp3;MP3;wav;WAV;amr;AMR;3gp;3GP;3gpp;3GPP;acc;ACC"
# Start points of the three clips (hours:minutes:seconds); each clip lasts ten seconds.
CUT_TIMES = ("00:00:05", "00:00:30", "00:01:00")
CLIP_SECONDS = "10"

WAIT_SECONDS = 40
WARN_SECONDS = 105
LIMIT_SECONDS = 120
MAX_CLIP = 2
MAX_WRONG = 6

START_TEXT = "正在准备歌曲,请稍等\n回答“-[歌曲信息(歌名歌手等)|提示|取消]”\n一共3段语音，6次机会"
WARN_TEXT = "猜歌游戏，你还有15s作答时间"

_ANSWER_RE = re.compile(r"^-\S+")


def is_music_type(extension: str) -> bool:
    """Whether a file extension is one the game can play."""
    return extension in MUSIC_TYPE_LIST


@dataclass(frozen=True)
class SongInfo:
    """A song as described by its file name: "title - singer - other.ext"."""

    name: str
    title: str
    singer: str
    alias: str | None = None

    @property
    def answer(self) -> str:
        """The answer text revealed at the end of a round."""
        text = "歌名:" + self.title + "\n歌手:" + self.singer
        if self.alias is not None:
            text += "\n其他信息:\n" + self.alias.replace("&", "\n")
        return text


def parse_music_name(name: str) -> SongInfo:
    """Read title, singer and other information out of a song file name."""
    extension = name.split(".")[-1]
    if not is_music_type(extension):
        raise ValueError("抽取到了歌曲：\n" + name + "\n该歌曲不是音乐后缀，请联系bot主人修改")
    parts = name.replace("." + extension, "").split(" - ")
    if len(parts) == 1:
        raise ValueError("抽取到了歌曲：\n" + name + "\n该歌曲命名不符合命名规则，请联系bot主人修改")
    alias = parts[2] if len(parts) > 2 else None
    return SongInfo(name=name, title=parts[0], singer=parts[1], alias=alias)


def cut_arguments(source: str, output_dir: str) -> list[str]:
    """ffmpeg arguments that cut three clips 0.wav, 1.wav and 2.wav out of a song."""
    args = ["-y", "-i", source]
    for i, start in enumerate(CUT_TIMES):
        args += ["-ss", start, "-t", CLIP_SECONDS, os.path.join(output_dir, f"{i}.wav")]
    args.append("-hide_banner")
    return args


def cut_music(music_name: str, music_dir: str, output_dir: str) -> None:
    """Cut a song into three ten-second clips with ffmpeg."""
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲目录错误]ERROR: {exc}") from exc
    source = os.path.join(music_dir, music_name)
    try:
        proc = subprocess.run(
            ["ffmpeg", *cut_arguments(source, output_dir)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {exc}") from exc
    if proc.returncode != 0:
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {proc.stderr or ''}")


@dataclass(frozen=True)
class Outcome:
    """What to send after an event in a round."""

    message: str = ""
    clip: int | None = None
    finished: bool = False
    reveal: bool = False


def _matches(field_text: str, answer: str) -> bool:
    return answer in field_text or field_text.casefold() == answer.casefold()


class GuessGame:
    """One round: three clips, hints, and up to six wrong answers."""

    def __init__(self, song: SongInfo, owner_id: int) -> None:
        self.song = song
        self.owner_id = owner_id
        self.clip = 0
        self.wrong = 0
        self.finished = False

    def _check_open(self) -> None:
        if self.finished:
            raise RuntimeError("the round is over")

    def _end(self, message: str, reveal: bool = True) -> Outcome:
        self.finished = True
        return Outcome(message=message, finished=True, reveal=reveal)

    def _win(self, what: str) -> Outcome:
        return self._end(
            "太棒了，你猜对" + what + "了！答案是\n" + self.song.answer + "\n\n下面欣赏猜歌的歌曲"
        )

    def guess(self, answer: str, user_id: int) -> Outcome | None:
        """Handle a message; None when it is not an answer (must start with "-")."""
        self._check_open()
        if not _ANSWER_RE.match(answer):
            return None
        text = answer.replace("-", "", 1)
        if text == "取消":
            if user_id == self.owner_id:
                return self._end(
                    "游戏已取消，猜歌答案是\n" + self.song.answer + "\n\n\n下面欣赏猜歌的歌曲"
                )
            return Outcome(message="你无权限取消")
        if text == "提示":
            return self.hint()
        if _matches(self.song.title, text):
            return self._win("歌曲名")
        if _matches(self.song.singer, text):
            return self._win("歌手名")
        if _matches(self.song.alias or "", text):
            return self._win("出处")
        self.clip += 1
        if self.clip > MAX_CLIP and self.wrong < MAX_WRONG:
            self.wrong += 1
            return Outcome(message="答案不对哦，加油啊~")
        if self.clip > MAX_CLIP:
            return self._end(
                "次数到了，没能猜出来。答案是\n" + self.song.answer + "\n\n下面欣赏猜歌的歌曲"
            )
        self.wrong += 1
        return Outcome(message="答案不对，再听这段音频，要仔细听哦", clip=self.clip)

    def hint(self) -> Outcome:
        """Play the next clip, if any is left."""
        self._check_open()
        self.clip += 1
        if self.clip > MAX_CLIP:
            return Outcome(message="已经没有提示了哦")
        return Outcome(message="再听这段音频，要仔细听哦", clip=self.clip)

    def tick(self) -> Outcome:
        """Nobody answered in time: play the next clip, if any is left."""
        self._check_open()
        self.clip += 1
        if self.clip > MAX_CLIP:
            return Outcome()
        return Outcome(message="好像有些难度呢，再听这段音频，要仔细听哦", clip=self.clip)

    def expire(self) -> Outcome:
        """The round ran out of time: reveal the answer."""
        self._check_open()
        return self._end("时间超时，猜歌结束，公布答案：\n" + self.song.answer, reveal=False)