from vocadrill.engine import correct_answer
from vocadrill.models import AnswerSubmission


class RecordingAudioPlayer:
    def __init__(self):
        self.spoken = []

    def speak(self, text):
        self.spoken.append(text)


def right(task) -> AnswerSubmission:
    if task.kind.is_free_text:
        return AnswerSubmission(text=task.word.es)
    return AnswerSubmission(choice=correct_answer(task))


def wrong(task) -> AnswerSubmission:
    if task.kind.is_free_text:
        return AnswerSubmission(text="definitely not it")
    return AnswerSubmission(choice="definitely not it")
