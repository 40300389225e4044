from typing import Dict, Iterable

from .config import settings
from .models import ErrorEntry, SessionReport, Word


def headline_score(error_counts: Dict[str, int], penalty: int = settings.SCORE_PENALTY) -> int:
    """100 minus ``penalty`` points per distinct missed word, never below 0.

    How often a word was missed does not matter, only whether it was.
    """
    missed = sum(1 for count in error_counts.values() if count > 0)
    return max(0, 100 - penalty * missed)


def build_report(error_counts: Dict[str, int], words: Iterable[Word]) -> SessionReport:
    """Rank missed words by error count, most-missed first.

    Equal counts keep the order in which the words were first missed. Ids that
    are not in ``words`` are left out of the list.
    """
    by_id = {w.id: w for w in words}
    ranked = sorted(error_counts.items(), key=lambda item: item[1], reverse=True)
    entries = [
        ErrorEntry(word=by_id[word_id], count=count)
        for word_id, count in ranked
        if count > 0 and word_id in by_id
    ]
    return SessionReport(
        score=headline_score(error_counts),
        errors=entries,
        perfect=not entries,
    )
