import os


class Settings:
    PROJECT_NAME: str = "vocadrill"
    DEBUG: bool = False
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "vocadrill.log"
    LOG_TO_DB: bool = os.environ.get("LOG_TO_DB", "") == "1"
    DB_DIR: str = os.environ.get("DB_DIR", "db")
    DB_FILE: str = "vocadrill.db"
    VOCAB_FILE: str = os.environ.get("VOCAB_FILE", os.path.join("data", "vocab.json"))
    SESSION_COOKIE_NAME: str = "drill_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")

    # Quiz engine
    DISTRACTOR_COUNT: int = 3
    DICTATION_REPEATS: int = 2
    SCORE_PENALTY: int = 10

    # Browser speech synthesis
    AUDIO_LANG: str = "es-ES"
    AUDIO_RATE: float = 0.9


settings = Settings()
