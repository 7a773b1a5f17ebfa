"""REST API for the herodeck optimizer."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from herodeck.api.schemas import (
    DeckCardResponse,
    DeckRequest,
    DeckResponse,
    ScoreRequest,
    ScoreResponse,
)
from herodeck.config import DeckConfig
from herodeck.models import CardRecord
from herodeck.optimizer import DeckOptimizer, DeckSelection
from herodeck.scoring import ScoreEstimator


logger = logging.getLogger(__name__)


def _selection_to_response(selection: DeckSelection) -> DeckResponse:
    return DeckResponse(
        cards=[
            DeckCardResponse(
                card_id=card.card_id,
                hero_key=card.hero_key,
                name=card.card.name,
                stars=card.stars,
                expected_score=card.score,
                score_per_star=card.efficiency,
            )
            for card in selection.cards
        ],
        total_stars=selection.total_stars,
        total_score=selection.total_score,
        target_count=selection.target_count,
        target_stars=selection.target_stars,
        strategy=selection.strategy,
    )


def create_app() -> FastAPI:
    app = FastAPI(title="herodeck optimizer")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/scores", response_model=ScoreResponse)
    async def scores(request: ScoreRequest) -> ScoreResponse:
        estimator = ScoreEstimator(request.history, algorithm=request.algorithm)
        return ScoreResponse(algorithm=estimator.algorithm.value, scores=estimator.score_catalog())

    @app.post("/decks", response_model=DeckResponse)
    async def build_deck(request: DeckRequest) -> DeckResponse:
        try:
            config = DeckConfig(
                algorithm=request.algorithm,
                score_overrides=request.score_overrides,
                target_count=request.target_count,
                target_stars=request.target_stars,
                bucket_cap=request.bucket_cap,
            )
            cards = [CardRecord.model_validate(card.model_dump()) for card in request.cards]
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        optimizer = DeckOptimizer(request.history, cards=cards)
        outcome = optimizer.build_optimal_selection(config)
        if not outcome.success:
            logger.info("Deck request failed: %s", outcome.reason)
            raise HTTPException(status_code=422, detail=outcome.reason)
        return _selection_to_response(outcome)

    return app
