from pathlib import Path
import logging

from kivy.core.audio import SoundLoader


class SoundSystem:
    """Manage playback of workout sounds.

    Sounds are loaded lazily from the ``assets/sounds`` directory to keep
    memory usage minimal.  Playback problems (no audio provider, missing
    file, a device that refuses to play) are logged and otherwise ignored.
    """

    REST_CUE = "rest_done"

    def __init__(self, *, enabled: bool = True, volume: float = 1.0):
        self._base = Path(__file__).resolve().parent
        self._cache: dict[str, object] = {}
        self.enabled = enabled
        self.volume = volume
        # Preload the rest cue to avoid first-play latency.
        self._load(self.REST_CUE)

    # ------------------------------------------------------------------
    # Core helpers
    # ------------------------------------------------------------------
    def _load(self, name: str):
        if name in self._cache:
            return self._cache[name]
        path = self._base / f"{name}.wav"
        try:
            snd = SoundLoader.load(str(path))
        except Exception:
            logging.exception("Could not load sound %s", path)
            snd = None
        if snd is None:
            logging.warning("Sound %s is unavailable", name)
        self._cache[name] = snd
        return snd

    def play(self, name: str) -> bool:
        """Play a named sound if available.  Returns ``True`` on success."""
        if not self.enabled:
            return False
        snd = self._load(name)
        if not snd:
            return False
        try:
            snd.volume = self.volume
            snd.stop()
            snd.play()
        except Exception:
            logging.exception("Playing sound %s failed", name)
            return False
        return True

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def play_rest_cue(self) -> bool:
        """Signal that a rest period is over."""
        return self.play(self.REST_CUE)

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)

    def set_volume(self, volume: float) -> None:
        self.volume = max(0.0, min(1.0, float(volume)))

    def stop(self) -> None:
        """Stop any sound that is currently playing."""
        for snd in self._cache.values():
            if snd:
                snd.stop()
