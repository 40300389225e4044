"""
Audio playback contract.

Speech is synthesized in the browser, so the server side only decides *what*
to say. ``CueAudioPlayer`` keeps the newest request and drops any earlier one
that has not been handed out yet, mirroring how a new utterance cancels an
unfinished one.
"""

from typing import Optional, Protocol

from .config import settings
from .models import AudioCue


class AudioPlayer(Protocol):
    def speak(self, text: str) -> None: ...


class SilentAudioPlayer:
    """Discards every request."""

    def speak(self, text: str) -> None:
        pass


class CueAudioPlayer:
    def __init__(self, lang: str = settings.AUDIO_LANG, rate: float = settings.AUDIO_RATE):
        self.lang = lang
        self.rate = rate
        self.pending: Optional[AudioCue] = None

    def speak(self, text: str) -> None:
        self.pending = AudioCue(text=text, lang=self.lang, rate=self.rate)

    def take(self) -> Optional[AudioCue]:
        cue, self.pending = self.pending, None
        return cue
