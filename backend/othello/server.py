import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .api import Engine
from .board import BLACK, WHITE
from .config import DIFFICULTIES, MAX_SEARCH_DEPTH, Difficulty
from .errors import GameOverError, IllegalMoveError, InvalidBoardError, OutOfRangeError
from .schemas import BoardSnapshot, GameState, MoveView

logger = logging.getLogger(__name__)


class MoveRequest(BaseModel):
    r: int
    c: int


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """HTTP host for one Engine. The engine lives on app.state, not in module globals.

    Routes are coroutines so requests are served one at a time on the event loop:
    the engine is single-threaded.
    """
    app = FastAPI(title="Othello AI Engine")

    # Enable CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins for local dev
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.engine = engine or Engine()

    def _engine(request: Request) -> Engine:
        return request.app.state.engine

    @app.post("/new", response_model=GameState)
    async def new_game(request: Request, snapshot: Optional[BoardSnapshot] = None, human_black: bool = True):
        """Start a new game, from the standard opening or a given position"""
        human = BLACK if human_black else WHITE
        if snapshot is None:
            return _engine(request).new_game(human=human)
        try:
            return _engine(request).load(snapshot, human)
        except InvalidBoardError as e:
            raise HTTPException(status_code=422, detail=str(e))

    @app.post("/reset", response_model=GameState)
    async def reset(request: Request):
        return _engine(request).reset()

    @app.get("/state", response_model=GameState)
    async def get_state(request: Request):
        """Get current game state"""
        return _engine(request).get_state()

    @app.get("/legal", response_model=list[MoveView])
    async def legal_moves(request: Request):
        return [MoveView.from_move(m) for m in _engine(request).legal_moves()]

    @app.post("/move", response_model=GameState)
    async def make_move(request: Request, move: MoveRequest):
        """Commit a human move"""
        engine = _engine(request)
        try:
            return engine.play((move.r, move.c))
        except GameOverError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except (IllegalMoveError, OutOfRangeError) as e:
            raise HTTPException(
                status_code=400,
                detail={
                    "error": str(e),
                    "requested": {"r": move.r, "c": move.c},
                    "to_move": engine.session.current_player,
                    "legal": [[m.r, m.c] for m in engine.legal_moves()],
                },
            )

    @app.post("/ai_move", response_model=GameState)
    async def ai_move(request: Request, difficulty: Optional[Difficulty] = None):
        """AI plays the computer's side"""
        try:
            return _engine(request).play_ai(difficulty)
        except GameOverError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except IllegalMoveError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/info")
    async def get_info(request: Request):
        """Get engine information"""
        return {
            "engine": "Alpha-Beta + Iterative Deepening",
            "evaluation": "Weighted Features",
            "max_depth": MAX_SEARCH_DEPTH,
            "default_difficulty": _engine(request).settings.default_difficulty,
            "difficulties": {
                level.value: {
                    "max_depth": limits.max_depth,
                    "max_time_ms": limits.max_time_ms,
                    "endgame_empties": limits.endgame_empties,
                }
                for level, limits in DIFFICULTIES.items()
            },
        }

    return app
