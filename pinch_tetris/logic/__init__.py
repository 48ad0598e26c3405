from pinch_tetris.logic.board import Action, Board, Piece, SHAPES
from pinch_tetris.logic.game import Game, GameState
from pinch_tetris.logic.interaction import HandInteraction, InteractionState

__all__ = [
    "Action", "Board", "Piece", "SHAPES",
    "Game", "GameState",
    "HandInteraction", "InteractionState",
]
