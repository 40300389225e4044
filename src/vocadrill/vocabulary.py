import json
import logging
import os
import random
from enum import Enum
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError

from .models import Topic, Unit, Word

logger = logging.getLogger(__name__)

ALL_TOPICS = "all"

WORD_COLUMNS = ["id", "es", "zh", "pos", "unit_id", "topic_id"]


class TextField(str, Enum):
    """Which side of a word a multiple-choice option shows."""

    NATIVE = "zh"
    SOURCE = "es"


class VocabularyManager:
    """Loads the unit/topic/word corpus and answers scope and distractor queries."""

    def __init__(self, vocab_file: str):
        self.vocab_file = vocab_file
        self.units: List[Unit] = []
        self.frame = pd.DataFrame(columns=WORD_COLUMNS)
        self.load_error: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self.load_error is None and bool(self.units)

    def load_all(self):
        self.units = []
        self.frame = pd.DataFrame(columns=WORD_COLUMNS)
        self.load_error = None

        if not os.path.exists(self.vocab_file):
            self.load_error = f"Vocabulary file {self.vocab_file} not found."
            logger.error(self.load_error)
            return

        try:
            with open(self.vocab_file, encoding="utf-8") as f:
                raw = json.load(f)
            self.load_units([Unit.model_validate(u) for u in raw])
        except (OSError, ValueError, TypeError, ValidationError) as e:
            self.units = []
            self.load_error = f"Failed to load {self.vocab_file}: {e}"
            logger.error(self.load_error)
            return

        logger.info(
            f"Loaded {len(self.frame)} words in {len(self.units)} units "
            f"from {self.vocab_file}"
        )

    def load_units(self, units: List[Unit]):
        """Installs an already parsed corpus, stamping unit/topic ids onto words."""
        stamped = []
        for unit in units:
            topics = []
            for topic in unit.topics:
                words = [
                    w.model_copy(update={"unit_id": unit.id, "topic_id": topic.id})
                    for w in topic.words
                ]
                topics.append(topic.model_copy(update={"words": words}))
            stamped.append(unit.model_copy(update={"topics": topics}))
        self.units = stamped

        records = [
            w.model_dump()
            for unit in self.units
            for topic in unit.topics
            for w in topic.words
        ]
        self.frame = pd.DataFrame(records, columns=WORD_COLUMNS)
        if self.frame["id"].duplicated().any():
            dupes = sorted(set(self.frame.loc[self.frame["id"].duplicated(), "id"]))
            logger.warning(f"Duplicate word ids in corpus: {dupes}")

    def get_units(self) -> List[Unit]:
        return self.units

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        return next((u for u in self.units if u.id == unit_id), None)

    def get_topics(self, unit_id: str) -> List[Topic]:
        unit = self.get_unit(unit_id)
        return unit.topics if unit else []

    def list_words(self, unit_id: str, topic_id: str = ALL_TOPICS) -> List[Word]:
        """Words of one topic, or of every topic in the unit when topic_id is 'all'."""
        unit = self.get_unit(unit_id)
        if not unit:
            return []
        if topic_id == ALL_TOPICS:
            return [w for t in unit.topics for w in t.words]
        topic = next((t for t in unit.topics if t.id == topic_id), None)
        return list(topic.words) if topic else []

    def get_word(self, word_id: str) -> Optional[Word]:
        rows = self.frame[self.frame["id"] == word_id]
        if rows.empty:
            return None
        return Word(**rows.iloc[0].to_dict())

    def sample_distractors(
        self,
        word: Word,
        count: int,
        field: TextField,
        rng: Optional[random.Random] = None,
    ) -> List[str]:
        """
        Draw up to ``count`` other words from the whole corpus and return their
        ``field`` text. Texts are unique and never equal the word's own text,
        so synonyms cannot show up as a second correct option. Fewer are
        returned when the corpus is small.
        """
        column = TextField(field).value
        own_text = getattr(word, column)
        pool = self.frame[
            (self.frame["id"] != word.id) & (self.frame[column] != own_text)
        ].drop_duplicates(subset=column)
        n = min(count, len(pool))
        if n <= 0:
            return []
        seed = rng.randrange(2**32) if rng is not None else None
        picked = pool.sample(n=n, random_state=seed)
        return picked[column].tolist()
