import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wordmaster.application.config import resolve_config
from wordmaster.application.factory import Services, build_services
from wordmaster.application.queue_builder import build_review_queue
from wordmaster.application.scheduler import schedule_review
from wordmaster.consts import VERSION
from wordmaster.domain.errors import InvalidQualityError, WordmasterError, WordNotFoundError
from wordmaster.domain.models import Word

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("wordmaster.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"wordmaster server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("wordmaster server shutting down...")


app = FastAPI(
    title="wordmaster",
    description="Spaced-repetition vocabulary API.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


@app.exception_handler(WordmasterError)
async def wordmaster_error_handler(request: Request, exc: WordmasterError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def get_services() -> Services:
    return build_services(resolve_config())


ServicesDep = Annotated[Services, Depends(get_services)]


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class ExampleModel(BaseModel):
    sentence: str
    translation: str = ""


class WordResponse(BaseModel):
    id: str
    term: str
    definition: str
    example: str
    example_translation: str
    phonetic: str
    part_of_speech: str
    tags: list[str]
    is_favorite: bool
    additional_examples: list[ExampleModel]
    proficiency: str
    easiness_factor: float
    interval: int
    repetitions: int
    next_review_date: datetime
    last_review_date: datetime | None

    @classmethod
    def from_word(cls, word: Word) -> "WordResponse":
        return cls(
            id=word.id,
            term=word.term,
            definition=word.definition,
            example=word.example,
            example_translation=word.example_translation,
            phonetic=word.phonetic,
            part_of_speech=word.part_of_speech,
            tags=list(word.tags),
            is_favorite=word.is_favorite,
            additional_examples=[
                ExampleModel(sentence=ex.sentence, translation=ex.translation)
                for ex in word.additional_examples
            ],
            proficiency=word.proficiency.value,
            easiness_factor=word.easiness_factor,
            interval=word.interval,
            repetitions=word.repetitions,
            next_review_date=word.next_review_date,
            last_review_date=word.last_review_date,
        )


class AddWordRequest(BaseModel):
    term: str = Field(min_length=1)
    definition: str
    example: str = ""
    example_translation: str = ""
    phonetic: str = ""
    part_of_speech: str = ""
    tags: list[str] = Field(default_factory=lambda: ["manual"])
    additional_examples: list[ExampleModel] = Field(default_factory=list)


class QueueResponse(BaseModel):
    words: list[WordResponse]
    due_count: int
    used_fallback: bool


class ReviewRequest(BaseModel):
    word_id: str
    quality: int
    duration_seconds: float = Field(default=0.0, ge=0)


class StatsResponse(BaseModel):
    total_words: int
    due_count: int
    favorites: int
    proficiency: dict[str, int]
    total_learned: int
    daily_goal: int
    goal_progress: int
    goal_progress_percent: int
    study_minutes: int
    streak_days: int


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/words", response_model=list[WordResponse])
def list_words(services: ServicesDep, q: str | None = None, favorites: bool = False):
    if q:
        words = services.library.search(q)
    elif favorites:
        words = services.library.favorites()
    else:
        words = services.library.list_words()
    return [WordResponse.from_word(w) for w in words]


@app.post("/words", response_model=WordResponse, status_code=201)
def add_word(req: AddWordRequest, services: ServicesDep):
    result = services.library.add_word(
        req.term,
        req.definition,
        example=req.example,
        example_translation=req.example_translation,
        phonetic=req.phonetic,
        part_of_speech=req.part_of_speech,
        tags=req.tags,
        additional_examples=[ex.model_dump() for ex in req.additional_examples],
    )
    if result.duplicates:
        raise HTTPException(status_code=409, detail=f"'{req.term}' is already in the library")
    return WordResponse.from_word(result.added[0])


@app.delete("/words/{word_id}", status_code=204)
def delete_word(word_id: str, services: ServicesDep):
    try:
        services.library.delete_word(word_id)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@app.post("/words/{word_id}/favorite", response_model=WordResponse)
def toggle_favorite(word_id: str, services: ServicesDep):
    try:
        return WordResponse.from_word(services.library.toggle_favorite(word_id))
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@app.get("/queue", response_model=QueueResponse)
def get_queue(services: ServicesDep):
    result = build_review_queue(
        services.words.load_words(),
        services.clock.now(),
        services.config.fallback_queue_size,
    )
    return QueueResponse(
        words=[WordResponse.from_word(w) for w in result.queue],
        due_count=result.due_count,
        used_fallback=result.used_fallback,
    )


@app.post("/reviews", response_model=WordResponse)
def submit_review(req: ReviewRequest, services: ServicesDep):
    """
    Grade one word and persist the rescheduled record.
    """
    try:
        now = services.clock.now()
        updated = schedule_review(services.words.get(req.word_id), req.quality, now)
        services.words.replace(updated)
        services.stats.record_review(req.quality, req.duration_seconds, now)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidQualityError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(f"Reviewed {updated.id} q={req.quality}, next in {updated.interval}d")
    return WordResponse.from_word(updated)


@app.get("/stats", response_model=StatsResponse)
def get_stats(services: ServicesDep):
    summary = services.stats.dashboard(services.clock.now())
    return StatsResponse(
        total_words=summary.total_words,
        due_count=summary.due_count,
        favorites=summary.favorites,
        proficiency={k.value: v for k, v in summary.proficiency_breakdown.items()},
        total_learned=summary.total_learned,
        daily_goal=summary.daily_goal,
        goal_progress=summary.goal_progress,
        goal_progress_percent=summary.goal_progress_percent,
        study_minutes=summary.study_minutes,
        streak_days=summary.streak_days,
    )
