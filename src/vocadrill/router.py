import logging
from typing import List, Optional

from fastapi import APIRouter, Cookie, Depends, Form
from fastapi.responses import JSONResponse

from .audio import CueAudioPlayer
from .config import settings
from .engine import SessionEngine, SessionOverError
from .globals import get_mastery_store, get_session_store, get_vocab_manager
from .mastery import MasteryStore
from .models import (
    AnswerSubmission,
    AnswerView,
    MasteryStatus,
    Mode,
    QuizView,
    ReplayView,
    ScopeView,
    SessionReport,
    TopicSummary,
    UnitSummary,
    WordView,
)
from .sessions import LiveSession, SessionStore
from .vocabulary import ALL_TOPICS, VocabularyManager

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def corpus_error(vocab: VocabularyManager) -> Optional[JSONResponse]:
    if vocab.is_loaded:
        return None
    message = vocab.load_error or "Vocabulary is empty."
    return JSONResponse({"error": message}, status_code=503)


def session_error() -> JSONResponse:
    return JSONResponse({"error": "Session invalid"}, status_code=401)


def topic_summaries(vocab: VocabularyManager, unit_id: str) -> List[TopicSummary]:
    return [
        TopicSummary(id=t.id, title=t.title, count=len(t.words))
        for t in vocab.get_topics(unit_id)
    ]


# --- Corpus & mastery ---
@router.get("/api/units", response_model=List[UnitSummary])
async def get_units(vocab: VocabularyManager = Depends(get_vocab_manager)):
    error = corpus_error(vocab)
    if error:
        return error
    return [
        UnitSummary(id=u.id, title=u.title, topics=topic_summaries(vocab, u.id))
        for u in vocab.get_units()
    ]


@router.get("/api/units/{unit_id}/topics", response_model=List[TopicSummary])
async def get_topics(unit_id: str, vocab: VocabularyManager = Depends(get_vocab_manager)):
    error = corpus_error(vocab)
    if error:
        return error
    if vocab.get_unit(unit_id) is None:
        return JSONResponse({"error": "Unknown unit"}, status_code=404)
    return topic_summaries(vocab, unit_id)


@router.get("/api/words", response_model=ScopeView)
async def get_scope_words(
    unit_id: str,
    topic_id: str = ALL_TOPICS,
    vocab: VocabularyManager = Depends(get_vocab_manager),
    mastery: MasteryStore = Depends(get_mastery_store),
):
    error = corpus_error(vocab)
    if error:
        return error
    words = vocab.list_words(unit_id, topic_id)
    statuses = mastery.get_statuses(w.id for w in words)
    views = [WordView(word=w, status=statuses[w.id]) for w in words]
    return ScopeView(
        words=views,
        to_practice=sum(1 for v in views if v.status != MasteryStatus.GREEN),
    )


@router.put("/api/mastery/{word_id}")
async def mark_word(
    word_id: str,
    status: MasteryStatus = Form(...),
    vocab: VocabularyManager = Depends(get_vocab_manager),
    mastery: MasteryStore = Depends(get_mastery_store),
):
    if vocab.get_word(word_id) is None:
        return JSONResponse({"error": "Unknown word"}, status_code=404)
    mastery.set_status(word_id, status)
    return {"word_id": word_id, "status": status.value}


@router.post("/api/mastery/reset")
async def reset_scope(
    unit_id: str = Form(...),
    topic_id: str = Form(ALL_TOPICS),
    vocab: VocabularyManager = Depends(get_vocab_manager),
    mastery: MasteryStore = Depends(get_mastery_store),
):
    words = vocab.list_words(unit_id, topic_id)
    mastery.clear_statuses(w.id for w in words)
    return {"status": "success", "cleared": len(words)}


# --- Quiz session ---
@router.post("/api/sessions")
async def start_session(
    mode: Mode = Form(...),
    unit_id: str = Form(...),
    topic_id: str = Form(ALL_TOPICS),
    session_id: Optional[str] = Depends(get_session_id),
    vocab: VocabularyManager = Depends(get_vocab_manager),
    mastery: MasteryStore = Depends(get_mastery_store),
    store: SessionStore = Depends(get_session_store),
):
    error = corpus_error(vocab)
    if error:
        return error

    words = vocab.list_words(unit_id, topic_id)
    audio = CueAudioPlayer()
    engine = SessionEngine.start(mode, words, vocab, mastery=mastery, audio=audio)
    if engine is None:
        return {"status": "nothing_to_practice", "mode": mode.value}

    store.discard(session_id)
    new_id = store.add(LiveSession(engine=engine, audio=audio))
    logger.info(f"New session: {new_id} [Unit: {unit_id}, Topic: {topic_id}, Mode: {mode.value}]")

    response = JSONResponse(
        {"status": "started", "mode": mode.value, "total": engine.stats.total}
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/api/quiz", response_model=QuizView)
async def get_quiz_state(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    live = store.get(session_id)
    if not live:
        return session_error()
    engine = live.engine
    prompt = engine.current_prompt()
    return QuizView(
        mode=engine.mode,
        prompt=prompt,
        progress=engine.progress(),
        session_over=engine.is_session_over(),
        speak=live.audio.take(),
    )


@router.post("/api/quiz/answer", response_model=AnswerView)
async def submit_answer(
    choice: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    live = store.get(session_id)
    if not live:
        return session_error()
    try:
        result = live.engine.submit_answer(AnswerSubmission(choice=choice, text=text))
    except SessionOverError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return AnswerView(result=result, speak=live.audio.take())


@router.post("/api/quiz/replay", response_model=ReplayView)
async def replay_audio(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    live = store.get(session_id)
    if not live:
        return session_error()
    try:
        live.engine.replay()
    except SessionOverError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return ReplayView(speak=live.audio.take())


@router.post("/api/quiz/finish", response_model=SessionReport)
async def finish_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    live = store.get(session_id)
    if not live:
        return session_error()
    live.engine.finish()
    return live.engine.report()


@router.get("/api/result", response_model=SessionReport)
async def get_result(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    live = store.get(session_id)
    if not live:
        return session_error()
    return live.engine.report()


@router.post("/api/reset")
async def reset_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    store.discard(session_id)
    response = JSONResponse({"status": "success"})
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
