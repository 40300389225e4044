import random

import pytest
from helpers import RecordingAudioPlayer

from vocadrill.mastery import MasteryStore
from vocadrill.models import Topic, Unit, Word
from vocadrill.vocabulary import VocabularyManager


def make_word(word_id: str, es: str, zh: str, pos: str = "n.") -> Word:
    return Word(id=word_id, es=es, zh=zh, pos=pos)


@pytest.fixture
def units():
    return [
        Unit(
            id="u1",
            title="Unidad 1",
            topics=[
                Topic(
                    id="t1",
                    title="Saludos",
                    words=[
                        make_word("A", "hola", "你好", "interj."),
                        make_word("B", "adiós", "再见", "interj."),
                    ],
                ),
                Topic(
                    id="t2",
                    title="Animales y casa",
                    words=[
                        make_word("C", "gato", "猫"),
                        make_word("D", "perro", "狗"),
                        make_word("E", "casa", "房子"),
                    ],
                ),
            ],
        ),
        Unit(id="u2", title="Unidad 2", topics=[Topic(id="t3", title="Vacío")]),
    ]


@pytest.fixture
def vocab(units):
    manager = VocabularyManager("unused.json")
    manager.load_units(units)
    return manager


@pytest.fixture
def words(vocab):
    return {w.id: w for w in vocab.list_words("u1")}


@pytest.fixture
def mastery(tmp_path):
    store = MasteryStore(str(tmp_path / "db" / "test.db"))
    store.init()
    return store


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def audio():
    return RecordingAudioPlayer()
