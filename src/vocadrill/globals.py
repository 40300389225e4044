from .config import settings
from .database import default_db_path
from .mastery import MasteryStore
from .sessions import SessionStore
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(settings.VOCAB_FILE)
mastery_store = MasteryStore(default_db_path())
session_store = SessionStore()


# --- Dependencies ---
def get_vocab_manager() -> VocabularyManager:
    return vocab_manager


def get_mastery_store() -> MasteryStore:
    return mastery_store


def get_session_store() -> SessionStore:
    return session_store
