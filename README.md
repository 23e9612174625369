# zbkit

The logic behind a set of chat bot features, as plain Python functions and
classes. The library is not tied to any bot framework. It parses commands,
keeps track of state, calls web services and builds images. Your bot sends
the results.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `zbkit.emojimix`

Combines two emoji, or two QQ faces, into one Emoji Kitchen sticker.

- `Segment(type, data)` is one segment of a chat message.
- `face_to_emoji(segment)` returns the emoji that a text or face segment stands for.
- `match(segments, raw_message)` returns the pair of emoji when the message is
  exactly two known emoji, and `None` otherwise.
- `mix_urls(first, second)` builds both candidate sticker URLs.
- `find_mix(first, second, session)` sends a HEAD request for each candidate
  and returns the first URL that answers 200, or `None`.

### `zbkit.event`

Handles friend requests and group invitations.

- `Storage` holds the auto-accept switches (`set_apply`, `set_invite`,
  `set_master`, `is_apply_on`, `is_invite_on`, `is_master_off`).
- `encode_flag(flag)` turns a decimal request flag into four base16384
  characters, and `decode_flag(encoded)` turns them back.
- `parse_decision(text)` reads "同意/拒绝 申请/邀请 <flag> [reason]" into a
  `Decision`.
- `parse_toggle(text)` reads the owner's switch command, and
  `apply_toggle(storage, option, target)` applies it and returns the
  confirmation text.
- `format_invite_notice(...)` and `format_friend_notice(...)` build the
  message nodes that are sent to the owner.

### `zbkit.epidemic`

- `query_epidemic(city, session)` fetches the area tree and returns the
  city's `Area` together with the update time.
- `parse_result(data, city)` and `find_city(area, name)` do the same for data
  that is already at hand.
- `format_report(area, update_time)` renders the reply.

### `zbkit.github`

- `parse_command(text)` splits `>github [-opt ]query`.
- `search_repository(query, session)` returns the first matching repository.
  It raises `SearchError` when the request fails or nothing is found.
- `format_repo(repo)` builds the text summary, and `preview_url(repo)` gives
  the URL of the repository's preview image.

### `zbkit.fortune`

- `background_index(name)` and `background_for(value)` map background kinds
  to the stored setting and back.
- `random_image(path, user_id, day)` opens the user's background of the day
  from a zip archive. `pick_index` picks an index that stays the same for a
  user for a whole day.
- `draw(background, title, text, font_path, out)` draws the title and the
  vertical columns of text. It writes a PNG and returns the number of bytes
  written.
- `glyph_positions`, `offset`, `rows_num` and `cache_name` are the layout and
  cache helpers.

### `zbkit.funny`

`JokeStore(path)` keeps jokes in a SQLite file. It provides `count()`,
`pick()`, `tell(name)`, which fills in `%name`, and `close()`. It also works
as a context manager.

### `zbkit.hs`

- `search_cards(query, session)` returns the raw search reply, and
  `card_entries(payload, limit)` lists the card ids with their image URLs.
- `match_deck_code(text)` finds a deck code in a message.
- `deck_image(code, session)` returns the deck picture as a `base64://`
  reference.

### `zbkit.genshin`

- `load_archive(path)` indexes a wish image archive as a `GachaArchive`.
- `Gacha(archive).draw(nums, five_star_mode)` makes a pull and returns a
  `DrawResult`. In the normal pool a five-star item is guaranteed on every
  ninth pull.
- `Gacha.render(result)` composes the pull into one 1920×1080 image.
- `is_five_star_mode` and `set_mode` read and set the pool setting.

### `zbkit.musiclib`

- `Config`, `load_config(path, bot_path)`, `save_config(config, path)` and
  `default_config(bot_path)` handle the library settings, which are stored as
  JSON.
- `get_lists(config, music_path)` lists the playlist folders and their song
  counts as `ListInfo`.
- `music_lottery(config, music_path, list_name, rng, downloader)` picks a
  song. For a playlist bound to an online playlist, it first tries the
  `downloader` you pass, in two draws out of three.
- `draw_song_id(playlist_id, session)` draws a random song id from the online
  playlist service.

### `zbkit.guessmusic`

- `parse_music_name(name)` reads `title - singer - other.ext` into a
  `SongInfo`.
- `cut_music(music_name, music_dir, output_dir)` runs `ffmpeg` to cut the
  three ten-second clips `0.wav`, `1.wav` and `2.wav`.
- `GuessGame(song, owner_id)` scores one round. Its methods are
  `guess(answer, user_id)`, `hint()`, `tick()` and `expire()`. Each returns
  an `Outcome` that tells you what to send and which clip to play.

## Example

```python
import requests
from zbkit.emojimix import Segment, match, find_mix

pair = match([Segment("text", {"text": "😄"}), Segment("text", {"text": "🐷"})], "")
if pair:
    url = find_mix(*pair, session=requests.Session())
```

## What the package does not do

- It does not connect to a chat service, register commands or send messages.
  Your bot does that with the values these functions return.
- It has no command-line program.
- It ships no data. You supply the fortune backgrounds, slip texts and font,
  the joke database, and the wish image archive.
- It does not download songs or lyrics from a music service. To fetch songs
  for `music_lottery`, pass your own `downloader`.
- `cut_music` needs the `ffmpeg` program on your `PATH`.