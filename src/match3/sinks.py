"""Audio and analytics hooks injected into the session.

The defaults do nothing; hosts subclass them to forward to their own players
and trackers.
"""
from typing import Any


class AudioSink:
    def play_sound(self, name: str) -> None:
        pass

    def play_music(self, name: str) -> None:
        pass


class AnalyticsSink:
    def log_event(self, name: str, **params: Any) -> None:
        pass


SOUND_TILE_SELECT = "tile_select"
SOUND_TILE_SWAP = "tile_swap"
SOUND_MATCH = "match"
SOUND_COMBO = "combo"
SOUND_TILE_FALL = "tile_fall"
SOUND_SHUFFLE = "shuffle"
SOUND_LEVEL_COMPLETE = "level_complete"
SOUND_GAME_OVER = "game_over"
MUSIC_GAMEPLAY = "gameplay"

ANALYTICS_GAME_START = "game_start"
ANALYTICS_LEVEL_COMPLETE = "level_complete"
ANALYTICS_GAME_OVER = "game_over"
