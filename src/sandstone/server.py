import logging
import random
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Literal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from sandstone.application.scheduling import (
    aggregate_stats,
    apply_review,
    classify_status,
    compute_review,
    default_study_mode_config,
    filter_for_study_mode,
    is_mastered,
)
from sandstone.consts import VERSION
from sandstone.domain.constants import DEFAULT_EASE_FACTOR
from sandstone.domain.errors import InvalidRatingError
from sandstone.domain.flashcards.models import Card, ReviewEntry, StudyModeConfig

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("sandstone.server")

StudyModeName = Literal["standard", "cram", "review", "learn", "custom"]


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Sandstone Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Sandstone Server shutting down...")


app = FastAPI(
    title="Sandstone Server",
    description="Stateless spaced-repetition scheduling API.",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(InvalidRatingError)
async def invalid_rating_handler(request: Request, exc: InvalidRatingError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class ReviewEntryModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: UtcDatetime
    quality: int
    interval: float
    ease_factor: float
    time_spent: int | None = None


class CardModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    front: str = ""
    back: str = ""
    deck_id: str | None = None
    created_at: UtcDatetime | None = None
    interval: float = Field(default=0, ge=0)
    repetition_count: int = Field(default=0, ge=0)
    ease_factor: float = DEFAULT_EASE_FACTOR
    lapses: int = Field(default=0, ge=0)
    difficulty: float | None = None
    stability: float | None = None
    last_review: UtcDatetime | None = None
    next_review: UtcDatetime | None = None
    review_history: list[ReviewEntryModel] = []

    def to_domain(self) -> Card:
        data = self.model_dump(exclude={"review_history"})
        history = [ReviewEntry(**entry.model_dump()) for entry in self.review_history]
        return Card(**data, review_history=history)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class ComputeReviewRequest(BaseModel):
    quality: int
    interval: float = 0
    repetition_count: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    lapses: int = 0
    strict: bool = False
    now: UtcDatetime | None = None


class ReviewResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    interval: float
    repetition_count: int
    ease_factor: float
    difficulty: float
    stability: float
    next_review_date: UtcDatetime
    lapses: int


class ApplyReviewRequest(BaseModel):
    card: CardModel
    quality: int
    time_spent: int | None = None
    strict: bool = False
    now: UtcDatetime | None = None


class CardsRequest(BaseModel):
    cards: list[CardModel]
    now: UtcDatetime | None = None


class CardStatusResponse(BaseModel):
    id: str
    status: str
    mastered: bool


class DeckStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    new: int
    learning: int
    review: int
    relearning: int
    due: int
    mastered: int
    average_ease_factor: float
    average_difficulty: float
    total_lapses: int


class StudyModeConfigModel(BaseModel):
    mode: StudyModeName = "custom"
    card_limit: int | None = None
    time_limit: int | None = None
    include_new: bool | None = None
    include_review: bool | None = None
    include_learning: bool | None = None
    shuffle: bool = False
    focus_on_weak: bool = False


class StudyFilterRequest(BaseModel):
    cards: list[CardModel]
    # Either a preset name or a full config; the full config wins
    mode: StudyModeName | None = None
    config: StudyModeConfigModel | None = None
    seed: int | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.post("/review/compute", response_model=ReviewResultResponse)
async def compute_review_endpoint(req: ComputeReviewRequest):
    """Compute the next scheduling state from raw card numbers."""
    result = compute_review(
        req.quality,
        req.interval,
        req.repetition_count,
        req.ease_factor,
        req.lapses,
        now=req.now,
        strict=req.strict,
    )
    return ReviewResultResponse.model_validate(result)


@app.post("/cards/review", response_model=CardModel)
async def apply_review_endpoint(req: ApplyReviewRequest):
    """Apply a review to a full card and return the updated card."""
    updated = apply_review(
        req.card.to_domain(),
        req.quality,
        time_spent=req.time_spent,
        now=req.now,
        strict=req.strict,
    )
    logger.info(f"Reviewed {updated.id} q={req.quality} -> interval {updated.interval:g}")
    return CardModel.model_validate(updated)


@app.post("/cards/status", response_model=list[CardStatusResponse])
async def card_status(req: CardsRequest):
    cards = [c.to_domain() for c in req.cards]
    return [
        CardStatusResponse(id=card.id, status=classify_status(card), mastered=is_mastered(card))
        for card in cards
    ]


@app.post("/deck/stats", response_model=DeckStatsResponse)
async def deck_stats(req: CardsRequest):
    stats = aggregate_stats([c.to_domain() for c in req.cards], now=req.now)
    return DeckStatsResponse.model_validate(stats)


@app.post("/study/filter", response_model=list[CardModel])
async def study_filter(req: StudyFilterRequest):
    """
    Select cards for a study session.
    """
    if req.config is not None:
        mode_config = StudyModeConfig(**req.config.model_dump())
    else:
        mode_config = default_study_mode_config(req.mode or "standard")

    selected = filter_for_study_mode(
        [c.to_domain() for c in req.cards], mode_config, rng=random.Random(req.seed)
    )
    return [CardModel.model_validate(card) for card in selected]
