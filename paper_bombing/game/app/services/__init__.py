"""Application service-layer helpers."""

from paper_bombing.game.app.services.game_flow import GameFlowService

__all__ = [
    "GameFlowService",
]
