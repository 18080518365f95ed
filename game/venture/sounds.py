"""
Sound triggers

The room core only ever calls play(key) and never waits on the result.
A board that cannot play a sound reports it once and keeps going.
"""

from __future__ import annotations

import os
from typing import Callable, Dict, Optional, Set

from .config import SoundKeys

SOUND_EXTENSIONS = (".wav", ".ogg", ".mp3")
BACKGROUND_MUSIC = "backgroundMusic"


class SoundBoard:
    """Silent board; also the interface every board implements"""

    def play(self, key: str):
        pass

    def play_music(self, key: str = BACKGROUND_MUSIC):
        pass

    def stop(self):
        pass


class ArcadeSoundBoard(SoundBoard):
    """
    Plays <key>.wav/.ogg/.mp3 files from a directory through arcade.

    loader defaults to arcade.load_sound; anything that takes a path and
    returns an object with play() will do.
    """

    def __init__(self, sound_dir: str, volume: float = 1.0, music_volume: float = 0.5, mute_music: bool = False,
                 loader: Optional[Callable[[str], object]] = None):
        self.sound_dir = sound_dir
        self.volume = volume
        self.music_volume = music_volume
        self.mute_music = mute_music
        self._sounds: Dict[str, object] = {}
        self._music_player = None
        self._warned: Set[str] = set()
        self._loaded = False
        self.loader = loader

    def load(self):
        loader = self.loader
        if loader is None:
            import arcade
            loader = arcade.load_sound

        keys = list(SoundKeys.ALL)
        if not self.mute_music:
            keys.append(BACKGROUND_MUSIC)

        for key in keys:
            path = self._find_file(key)
            if path is None:
                self._warn(key, f"no sound file for '{key}' in {self.sound_dir}")
                continue
            try:
                self._sounds[key] = loader(path)
            except Exception as exc:  # decoder and device errors vary by backend
                self._warn(key, f"could not load '{path}': {exc}")
        self._loaded = True

    def play(self, key: str):
        if not self._loaded:
            self.load()
        sound = self._sounds.get(key)
        if sound is None:
            return
        try:
            sound.play(volume=self.volume)
        except Exception as exc:
            self._warn(key, f"could not play '{key}': {exc}")
            self._sounds.pop(key, None)

    def play_music(self, key: str = BACKGROUND_MUSIC):
        if self.mute_music:
            return
        if not self._loaded:
            self.load()
        music = self._sounds.get(key)
        if music is None or self._music_player is not None:
            return
        try:
            self._music_player = music.play(volume=self.music_volume, loop=True)
        except Exception as exc:
            self._warn(key, f"could not start music '{key}': {exc}")

    def stop(self):
        if self._music_player is None:
            return
        music = self._sounds.get(BACKGROUND_MUSIC)
        if music is not None:
            music.stop(self._music_player)
        self._music_player = None

    def _find_file(self, key: str) -> Optional[str]:
        for ext in SOUND_EXTENSIONS:
            path = os.path.join(self.sound_dir, key + ext)
            if os.path.isfile(path):
                return path
        return None

    def _warn(self, key: str, message: str):
        if key in self._warned:
            return
        self._warned.add(key)
        print(f"[SoundBoard] {message}")
