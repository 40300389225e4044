"""
Quiz session engine.

A session is a queue of tasks (one word asked in one way). Only the task at
the front is ever asked; after each answer the mode's policy retires it,
moves it to the back, or replaces it with fresh tasks. ``SessionStats.total``
counts every task that was ever scheduled and is the denominator for progress.
"""

import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Tuple

from .audio import AudioPlayer, SilentAudioPlayer
from .config import settings
from .mastery import MasteryStore
from .models import (
    AnswerSubmission,
    EvaluationResult,
    MasteryStatus,
    Mode,
    Progress,
    Prompt,
    SessionReport,
    TaskKind,
    Word,
)
from .report import build_report
from .vocabulary import TextField, VocabularyManager

logger = logging.getLogger(__name__)

ALL_KINDS: Tuple[TaskKind, ...] = (
    TaskKind.TARGET_TO_NATIVE,
    TaskKind.NATIVE_TO_TARGET,
    TaskKind.SPELLING,
    TaskKind.AUDIO_TO_NATIVE,
    TaskKind.AUDIO_TO_SPELLING,
)


class SessionOverError(RuntimeError):
    """Raised when an answer is submitted after the session has ended."""


@dataclass
class Task:
    word: Word
    kind: TaskKind
    attempts: int = 0


@dataclass
class SessionStats:
    total: int = 0
    errors: Dict[str, int] = field(default_factory=dict)

    def record_error(self, word_id: str):
        self.errors[word_id] = self.errors.get(word_id, 0) + 1


# --- Strategy Pattern: per-mode queue policies ---
class ModePolicy(ABC):
    """Builds the initial tasks for a mode and decides what happens after an answer."""

    kinds: Tuple[TaskKind, ...] = ()

    def select(self, words: Sequence[Word], mastery: Optional[MasteryStore]) -> List[Word]:
        return list(words)

    def tasks_for(self, word: Word) -> List[Task]:
        return [Task(word=word, kind=kind) for kind in self.kinds]

    @abstractmethod
    def on_correct(self, queue: Deque[Task], stats: SessionStats) -> bool:
        """Mutate the queue after a correct answer; return True if the front task retired."""

    @abstractmethod
    def on_incorrect(self, queue: Deque[Task], stats: SessionStats) -> bool:
        """Mutate the queue after a wrong answer; return True if the front task retired."""


class StudyPolicy(ModePolicy):
    """Practice words not yet marked green; misses come back later."""

    kinds = (TaskKind.TARGET_TO_NATIVE, TaskKind.NATIVE_TO_TARGET, TaskKind.SPELLING)

    def select(self, words, mastery):
        if mastery is None:
            return list(words)
        statuses = mastery.get_statuses(w.id for w in words)
        return [w for w in words if statuses[w.id] != MasteryStatus.GREEN]

    def on_correct(self, queue, stats):
        queue.popleft()
        return True

    def on_incorrect(self, queue, stats):
        queue.rotate(-1)
        return False


class ExamPolicy(ModePolicy):
    """Every word in every form; a miss re-queues the word in all five forms."""

    kinds = ALL_KINDS

    def on_correct(self, queue, stats):
        queue.popleft()
        return True

    def on_incorrect(self, queue, stats):
        task = queue.popleft()
        fresh = self.tasks_for(task.word)
        queue.extend(fresh)
        stats.total += len(fresh)
        return True


class DictationPolicy(ModePolicy):
    """Spell what you hear; a word retires after ``repeats`` correct answers."""

    kinds = (TaskKind.AUDIO_TO_SPELLING,)

    def __init__(self, repeats: int = settings.DICTATION_REPEATS):
        self.repeats = repeats

    def on_correct(self, queue, stats):
        task = queue[0]
        task.attempts += 1
        if task.attempts >= self.repeats:
            queue.popleft()
            return True
        queue.rotate(-1)
        stats.total += 1
        return False

    def on_incorrect(self, queue, stats):
        queue.rotate(-1)
        stats.total += 1
        return False


class PolicyFactory:
    """Factory to select the policy for a mode."""

    @staticmethod
    def create(mode: Mode) -> ModePolicy:
        mode = Mode(mode)
        if mode == Mode.STUDY:
            return StudyPolicy()
        if mode == Mode.TEST:
            return ExamPolicy()
        return DictationPolicy()


# --- Answer checking ---
def correct_answer(task: Task) -> str:
    if task.kind in (TaskKind.TARGET_TO_NATIVE, TaskKind.AUDIO_TO_NATIVE):
        return task.word.zh
    return task.word.es


def option_field(kind: TaskKind) -> TextField:
    if kind in (TaskKind.TARGET_TO_NATIVE, TaskKind.AUDIO_TO_NATIVE):
        return TextField.NATIVE
    return TextField.SOURCE


def spelling_matches(response: str, answer: str) -> bool:
    """Case-insensitive comparison ignoring surrounding whitespace."""
    return response.strip().lower() == answer.strip().lower()


def is_correct(task: Task, submission: AnswerSubmission) -> bool:
    answer = correct_answer(task)
    if task.kind.is_free_text:
        if submission.text is None:
            raise ValueError(f"Task {task.kind.value} expects a typed answer")
        return spelling_matches(submission.text, answer)
    if submission.choice is None:
        raise ValueError(f"Task {task.kind.value} expects a chosen option")
    return submission.choice == answer


class SessionEngine:
    """
    One drilling session over a fixed word set.

    Use :meth:`start` to build a session; it returns ``None`` when there is
    nothing to practice. Callers then alternate :meth:`current_prompt` and
    :meth:`submit_answer` until :meth:`is_session_over`, and read :meth:`report`.
    """

    def __init__(
        self,
        mode: Mode,
        words: Iterable[Word],
        tasks: Iterable[Task],
        repository: VocabularyManager,
        audio: Optional[AudioPlayer] = None,
        rng: Optional[random.Random] = None,
        policy: Optional[ModePolicy] = None,
    ):
        self.mode = Mode(mode)
        self.words = list(words)
        self.repository = repository
        self.audio = audio or SilentAudioPlayer()
        self.rng = rng or random.Random()
        self.policy = policy or PolicyFactory.create(self.mode)
        self.queue: Deque[Task] = deque(tasks)
        self.stats = SessionStats(total=len(self.queue))
        self.finished = False
        self._prompt: Optional[Prompt] = None

    @classmethod
    def start(
        cls,
        mode: Mode,
        words: Sequence[Word],
        repository: VocabularyManager,
        mastery: Optional[MasteryStore] = None,
        audio: Optional[AudioPlayer] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional["SessionEngine"]:
        rng = rng or random.Random()
        policy = PolicyFactory.create(mode)
        selected = policy.select(words, mastery)
        if not selected:
            logger.info(f"Nothing to practice for {Mode(mode).value} over {len(words)} words")
            return None

        tasks = [task for word in selected for task in policy.tasks_for(word)]
        rng.shuffle(tasks)
        engine = cls(
            mode,
            words,
            tasks,
            repository,
            audio=audio,
            rng=rng,
            policy=policy,
        )
        logger.info(
            f"Session started [Mode: {engine.mode.value}, Words: {len(selected)}, "
            f"Tasks: {len(tasks)}]"
        )
        return engine

    # --- State ---
    def current_task(self) -> Optional[Task]:
        if self.is_session_over():
            return None
        return self.queue[0]

    def is_session_over(self) -> bool:
        return self.finished or not self.queue

    def progress(self) -> Progress:
        total = self.stats.total
        remaining = len(self.queue)
        ratio = (total - remaining) / total if total else 0.0
        return Progress(total=total, remaining=remaining, ratio=ratio)

    def current_prompt(self) -> Optional[Prompt]:
        """Prompt for the front task; built once per presentation so options stay put."""
        task = self.current_task()
        if task is None:
            return None
        if self._prompt is None:
            self._prompt = self._build_prompt(task)
        return self._prompt

    def replay(self):
        """Speak the front task's word again, for the play button on audio tasks."""
        task = self.current_task()
        if task is None:
            raise SessionOverError("Session is over")
        if not task.kind.is_audio:
            raise ValueError(f"Task {task.kind.value} has no audio")
        self.audio.speak(task.word.es)

    def _build_prompt(self, task: Task) -> Prompt:
        word = task.word
        text = None
        if task.kind == TaskKind.TARGET_TO_NATIVE:
            text = word.es
        elif task.kind in (TaskKind.NATIVE_TO_TARGET, TaskKind.SPELLING):
            text = word.zh
        else:
            self.audio.speak(word.es)

        options = None
        if not task.kind.is_free_text:
            options = self.repository.sample_distractors(
                word, settings.DISTRACTOR_COUNT, option_field(task.kind), rng=self.rng
            )
            options.append(correct_answer(task))
            self.rng.shuffle(options)

        return Prompt(
            word_id=word.id,
            kind=task.kind,
            text=text,
            options=options,
            audio=task.kind.is_audio,
        )

    # --- Transitions ---
    def submit_answer(self, submission: AnswerSubmission) -> EvaluationResult:
        task = self.current_task()
        if task is None:
            raise SessionOverError("Session is over")

        correct = is_correct(task, submission)
        if correct:
            retired = self.policy.on_correct(self.queue, self.stats)
        else:
            self.stats.record_error(task.word.id)
            retired = self.policy.on_incorrect(self.queue, self.stats)
            self.audio.speak(task.word.es)
        self._prompt = None

        logger.debug(
            f"{task.word.id} [{task.kind.value}] correct={correct} "
            f"remaining={len(self.queue)} total={self.stats.total}"
        )
        if not self.queue:
            logger.info(
                f"Session complete [Mode: {self.mode.value}, "
                f"Missed words: {len(self.stats.errors)}]"
            )
        return EvaluationResult(
            word_id=task.word.id,
            kind=task.kind,
            correct=correct,
            correct_answer=correct_answer(task),
            retired=retired,
            progress=self.progress(),
            session_over=self.is_session_over(),
        )

    def finish(self):
        """End the session early; the report uses whatever has been recorded."""
        if not self.finished:
            self.finished = True
            self._prompt = None
            logger.info(
                f"Session finished [Mode: {self.mode.value}, "
                f"Remaining: {len(self.queue)}, Missed words: {len(self.stats.errors)}]"
            )

    def report(self) -> SessionReport:
        return build_report(self.stats.errors, self.words)
