"""
Module 03 - Rewards
Praise scoring, reward allocation and batch publication.

This module provides:
- Scoreboard: Per-address score accumulation and pool allocation
- PraiseService: Lock-guarded batch service serving proofs for the current batch
- start_praise_service: Factory wiring the logging subscriber
"""
from .scoreboard import ScoreEntry, Scoreboard
from .service import (
    PraiseCallback,
    PraiseService,
    log_praise,
    start_praise_service,
)

__all__ = [
    "ScoreEntry",
    "Scoreboard",
    "PraiseCallback",
    "PraiseService",
    "log_praise",
    "start_praise_service",
]
