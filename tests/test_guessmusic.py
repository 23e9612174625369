import os
import subprocess
from unittest import mock

import pytest

from zbkit.guessmusic import (
    CUT_TIMES,
    GuessGame,
    cut_arguments,
    cut_music,
    is_music_type,
    parse_music_name,
)
from zbkit.musiclib import MusicLibraryError


def _game():
    return GuessGame(parse_music_name("Song - Singer - Anime&OP.mp3"), owner_id=1)


def test_music_types():
    assert is_music_type("mp3")
    assert is_music_type("WAV")
    assert not is_music_type("flac")


def test_parse_full_name():
    info = parse_music_name("Song - Singer - Anime&OP.mp3")
    assert (info.title, info.singer, info.alias) == ("Song", "Singer", "Anime&OP")
    assert info.answer == "歌名:Song\n歌手:Singer\n其他信息:\nAnime\nOP"


def test_parse_without_alias():
    info = parse_music_name("Song - Singer.wav")
    assert info.alias is None
    assert info.answer == "歌名:Song\n歌手:Singer"


def test_parse_errors():
    with pytest.raises(ValueError, match="不是音乐后缀"):
        parse_music_name("Song - Singer.txt")
    with pytest.raises(ValueError, match="命名不符合命名规则"):
        parse_music_name("Song.mp3")


def test_cut_arguments(tmp_path):
    out = str(tmp_path)
    args = cut_arguments("in.mp3", out)
    assert args[:3] == ["-y", "-i", "in.mp3"]
    assert args[-1] == "-hide_banner"
    for i, start in enumerate(CUT_TIMES):
        assert args[3 + 5 * i: 8 + 5 * i] == ["-ss", start, "-t", "10", os.path.join(out, f"{i}.wav")]


def test_cut_music_runs_ffmpeg(tmp_path):
    out = str(tmp_path / "cache")
    done = subprocess.CompletedProcess([], 0, stderr="")
    with mock.patch("zbkit.guessmusic.subprocess.run", return_value=done) as run:
        cut_music("a.mp3", str(tmp_path), out)
    assert os.path.isdir(out)
    cmd = run.call_args[0][0]
    assert cmd[0] == "ffmpeg"
    assert cmd[1:] == cut_arguments(os.path.join(str(tmp_path), "a.mp3"), out)


def test_cut_music_failure(tmp_path):
    failed = subprocess.CompletedProcess([], 1, stderr="boom")
    with mock.patch("zbkit.guessmusic.subprocess.run", return_value=failed):
        with pytest.raises(MusicLibraryError, match="boom"):
            cut_music("a.mp3", str(tmp_path), str(tmp_path / "c"))


@pytest.mark.parametrize("answer", ["-Song", "-song", "-Singer", "-Anime", "-OP"])
def test_correct_answers_finish(answer):
    game = _game()
    outcome = game.guess(answer, user_id=2)
    assert outcome.finished and outcome.reveal
    assert game.finished


def test_non_answer_ignored():
    game = _game()
    assert game.guess("Song", user_id=2) is None
    assert not game.finished


def test_cancel_permissions():
    game = _game()
    assert game.guess("-取消", user_id=2).message == "你无权限取消"
    assert not game.finished
    assert game.guess("-取消", user_id=1).finished


def test_hints_run_out():
    game = _game()
    assert game.hint().clip == 1
    assert game.guess("-提示", user_id=2).clip == 2
    last = game.hint()
    assert last.clip is None and last.message == "已经没有提示了哦"


def test_seven_wrong_answers_lose():
    game = _game()
    results = [game.guess("-nope", user_id=2) for _ in range(6)]
    assert [r.clip for r in results[:2]] == [1, 2]
    assert not any(r.finished for r in results)
    final = game.guess("-nope", user_id=2)
    assert final.finished and final.reveal
    with pytest.raises(RuntimeError):
        game.guess("-Song", user_id=2)


def test_tick_and_expire():
    game = _game()
    assert game.tick().clip == 1
    assert game.tick().clip == 2
    assert game.tick().message == ""
    outcome = game.expire()
    assert outcome.finished and not outcome.reveal
    assert outcome.message.endswith(game.song.answer)