import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from .audio import CueAudioPlayer
from .config import settings
from .engine import SessionEngine

logger = logging.getLogger(__name__)


@dataclass
class LiveSession:
    engine: SessionEngine
    audio: CueAudioPlayer
    created_at: datetime = field(default_factory=datetime.now)


class SessionStore:
    """In-memory registry of running sessions, keyed by cookie id."""

    def __init__(self, timeout_minutes: int = settings.SESSION_TIMEOUT_MINUTES):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.sessions: Dict[str, LiveSession] = {}

    def add(self, session: LiveSession) -> str:
        session_id = str(uuid.uuid4())
        self.sessions[session_id] = session
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[LiveSession]:
        if not session_id or session_id not in self.sessions:
            return None
        session = self.sessions[session_id]
        if datetime.now() - session.created_at > self.timeout:
            del self.sessions[session_id]
            logger.info(f"Session expired: {session_id}")
            return None
        return session

    def discard(self, session_id: Optional[str]):
        if session_id:
            self.sessions.pop(session_id, None)
