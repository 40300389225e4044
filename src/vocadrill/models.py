from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Corpus ---
class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    es: str
    zh: str
    pos: str = ""
    unit_id: str = ""
    topic_id: str = ""


class Topic(BaseModel):
    id: str
    title: str
    words: List[Word] = Field(default_factory=list)


class Unit(BaseModel):
    id: str
    title: str
    topics: List[Topic] = Field(default_factory=list)


class MasteryStatus(str, Enum):
    NONE = "none"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


# --- Quiz ---
class Mode(str, Enum):
    STUDY = "study"
    TEST = "test"
    DICTATION = "dictation"


class TaskKind(str, Enum):
    TARGET_TO_NATIVE = "es_zh"
    NATIVE_TO_TARGET = "zh_es"
    SPELLING = "spell"
    AUDIO_TO_NATIVE = "audio_zh"
    AUDIO_TO_SPELLING = "audio_spell"

    @property
    def is_audio(self) -> bool:
        return self in (TaskKind.AUDIO_TO_NATIVE, TaskKind.AUDIO_TO_SPELLING)

    @property
    def is_free_text(self) -> bool:
        return self in (TaskKind.SPELLING, TaskKind.AUDIO_TO_SPELLING)


class AudioCue(BaseModel):
    text: str
    lang: str
    rate: float


class Prompt(BaseModel):
    """What the presentation layer shows for the task at the queue front."""

    word_id: str
    kind: TaskKind
    text: Optional[str] = None  # None for audio-cued tasks
    options: Optional[List[str]] = None  # None for free-text tasks
    audio: bool = False


class Progress(BaseModel):
    total: int
    remaining: int
    ratio: float


class AnswerSubmission(BaseModel):
    choice: Optional[str] = None
    text: Optional[str] = None


class EvaluationResult(BaseModel):
    word_id: str
    kind: TaskKind
    correct: bool
    correct_answer: str
    retired: bool
    progress: Progress
    session_over: bool


# --- Report ---
class ErrorEntry(BaseModel):
    word: Word
    count: int


class SessionReport(BaseModel):
    score: int
    errors: List[ErrorEntry]
    perfect: bool


# --- API payloads ---
class WordView(BaseModel):
    word: Word
    status: MasteryStatus


class ScopeView(BaseModel):
    words: List[WordView]
    to_practice: int


class QuizView(BaseModel):
    mode: Mode
    prompt: Optional[Prompt]
    progress: Progress
    session_over: bool
    speak: Optional[AudioCue] = None


class AnswerView(BaseModel):
    result: EvaluationResult
    speak: Optional[AudioCue] = None


class TopicSummary(BaseModel):
    id: str
    title: str
    count: int


class UnitSummary(BaseModel):
    id: str
    title: str
    topics: List[TopicSummary]


class ReplayView(BaseModel):
    speak: AudioCue
