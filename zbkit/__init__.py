"""Chat bot feature logic: emoji mixing, request events, lookups, gacha, fortunes and a song guessing game."""

__version__ = "0.1.0"