"""
Minechain

An incremental probabilistic hint engine for Minesweeper-style grids:
- Constraint chains: a forest of every mine placement consistent with the revealed clues
- Exact classification of frontier cells as guaranteed safe or guaranteed mine
- Lowest-probability candidates, with an average-density estimate for unconstrained cells
- A thread-based message boundary with stale-response detection via reveal fingerprints
"""

from .board import Board, Fingerprint
from .chain import Chain
from .errors import (
    EngineFailure,
    EngineNotInitialized,
    InvariantViolation,
    MinechainError,
)
from .facade import ProbabilityFacade, RequestKind
from .manager import ChainManager, Classification
from .messages import (
    HintClient,
    HintEngine,
    InitMessage,
    RequestMessage,
    ResponseMessage,
    RevealMessage,
    message_from_dict,
)
from .utils import split_combinations

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Board",
    "Fingerprint",
    "Chain",
    "ChainManager",
    "Classification",
    "ProbabilityFacade",
    "RequestKind",
    # Message boundary
    "HintEngine",
    "HintClient",
    "InitMessage",
    "RevealMessage",
    "RequestMessage",
    "ResponseMessage",
    "message_from_dict",
    # Helpers
    "split_combinations",
    # Errors
    "MinechainError",
    "InvariantViolation",
    "EngineNotInitialized",
    "EngineFailure",
]
