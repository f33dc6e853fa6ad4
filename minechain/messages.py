"""
Message boundary between a host game and the engine.

The engine runs on its own worker thread and only ever exchanges immutable
messages with the host:

- InitMessage    host -> engine, once per game
- RevealMessage  host -> engine, fire-and-forget after every player action
- RequestMessage host -> engine, asks for one classification set
- ResponseMessage engine -> host, exactly one per request

Responses carry the fingerprint the engine had when it answered, so the
host can drop answers computed for a game state it has since moved past.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Set, Tuple, Union

from .board import Fingerprint
from .config import MINE, parse_clue, resolve_mine_budget
from .errors import EngineFailure, EngineNotInitialized
from .facade import ProbabilityFacade, RequestKind
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitMessage:
    mine_budget: int
    clues: Tuple[Tuple[Any, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "init",
            "mine_budget": self.mine_budget,
            "clues": [list(row) for row in self.clues],
        }


@dataclass(frozen=True)
class RevealMessage:
    cells: Tuple[Cell, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "reveal", "cells": [list(c) for c in self.cells]}


@dataclass(frozen=True)
class RequestMessage:
    kind: RequestKind

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "request", "kind": self.kind.value}


@dataclass(frozen=True)
class ResponseMessage:
    kind: RequestKind
    fingerprint: Tuple[int, ...]
    cells: Tuple[Cell, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "response",
            "kind": self.kind.value,
            "fingerprint": list(self.fingerprint),
            "cells": [list(c) for c in self.cells],
        }


Message = Union[InitMessage, RevealMessage, RequestMessage, ResponseMessage]


def _cells(raw: Iterable[Sequence[int]]) -> Tuple[Cell, ...]:
    return tuple((int(c[0]), int(c[1])) for c in raw)


def message_from_dict(data: Dict[str, Any]) -> Message:
    """
    Decode the JSON-safe form produced by the messages' to_dict().

    Raises:
        ValueError: If the message type or request kind is unknown.
        KeyError: If a required field is missing.
    """
    kind = data.get("type")
    if kind == "init":
        return InitMessage(
            mine_budget=int(data["mine_budget"]),
            clues=tuple(tuple(row) for row in data["clues"]),
        )
    if kind == "reveal":
        return RevealMessage(cells=_cells(data["cells"]))
    if kind == "request":
        return RequestMessage(kind=RequestKind(data["kind"]))
    if kind == "response":
        return ResponseMessage(
            kind=RequestKind(data["kind"]),
            fingerprint=tuple(int(w) for w in data["fingerprint"]),
            cells=_cells(data["cells"]),
        )
    raise ValueError(f"Unknown message type: {kind!r}")


# Sentinel that tells the worker loop to exit.
_STOP = object()


class HintEngine:
    """
    Engine side of the boundary.

    handle() is the synchronous dispatcher; start() runs it on a worker
    thread fed by an inbox queue. The facade, and with it the whole chain
    forest, is only ever touched by that one thread.
    """

    def __init__(self) -> None:
        self.facade: Optional[ProbabilityFacade] = None
        self.inbox: "queue.Queue[object]" = queue.Queue()
        self.outbox: "queue.Queue[ResponseMessage]" = queue.Queue()
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def handle(self, message: Message) -> Optional[ResponseMessage]:
        """
        Process one message.

        Returns:
            A ResponseMessage for requests, None otherwise.

        Raises:
            EngineNotInitialized: For a reveal or request before any init.
            TypeError: For an object that is not an engine-bound message.
        """
        if isinstance(message, InitMessage):
            self.facade = ProbabilityFacade(message.clues, message.mine_budget)
            return None

        if isinstance(message, (RevealMessage, RequestMessage)):
            if self.facade is None:
                raise EngineNotInitialized(
                    f"{type(message).__name__} received before InitMessage."
                )
            if isinstance(message, RevealMessage):
                self.facade.add_squares(message.cells)
                return None
            cells, fingerprint = self.facade.fulfill_request(message.kind)
            return ResponseMessage(
                kind=message.kind, fingerprint=fingerprint, cells=tuple(cells)
            )

        raise TypeError(f"Engine cannot handle {type(message).__name__}.")

    # -------------------------------------------------------------------------
    # Worker thread
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "HintEngine":
        if self.running:
            return self
        self.error = None
        self._thread = threading.Thread(
            target=self._run, name="minechain-engine", daemon=True
        )
        self._thread.start()
        logger.info("Engine worker started")
        return self

    def post(self, message: Message) -> None:
        """Queue a message for the worker without waiting for it."""
        self.inbox.put(message)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the worker to finish the queued messages and exit."""
        if self._thread is None:
            return
        self.inbox.put(_STOP)
        self._thread.join(timeout)
        logger.info("Engine worker stopped")

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait until every queued message has been processed."""
        if not self.running:
            return
        done = threading.Event()
        self.inbox.put(done)
        deadline = None if timeout is None else time.monotonic() + timeout
        while not done.wait(0.05):
            if not self.running:
                return
            if deadline is not None and time.monotonic() >= deadline:
                return

    def _run(self) -> None:
        while True:
            item = self.inbox.get()
            if item is _STOP:
                return
            if isinstance(item, threading.Event):
                item.set()
                continue
            try:
                response = self.handle(item)  # type: ignore[arg-type]
            except Exception as exc:
                logger.exception("Engine worker stopped on %s", type(exc).__name__)
                self.error = exc
                return
            if response is not None:
                self.outbox.put(response)


class HintClient:
    """
    Host side of the boundary.

    Keeps the host's own tally of revealed cells and the single live
    request. Responses are accepted only if they answer the live request
    and were computed on the same set of revealed cells.
    """

    def __init__(self, engine: Optional[HintEngine] = None) -> None:
        self.engine: HintEngine = engine if engine is not None else HintEngine()
        self.fingerprint: Optional[Fingerprint] = None
        self.width: int = 0
        self.height: int = 0
        self.live_request: Optional[RequestKind] = None
        self._mines: Set[Cell] = set()

    def init(
        self, clues: Sequence[Sequence[Any]], mines: Union[int, float]
    ) -> None:
        """
        Start a new game on the engine.

        Args:
            clues: Full clue grid, rows indexed clues[y][x].
            mines: Mine count, or a float density of the board.
        """
        if not clues or not clues[0]:
            raise ValueError("Clue grid must have at least one row and one column.")
        self.height = len(clues)
        self.width = len(clues[0])
        self.fingerprint = Fingerprint(self.width * self.height)
        self.live_request = None
        self._mines = {
            (x, y)
            for y, row in enumerate(clues)
            for x, value in enumerate(row)
            if parse_clue(value) == MINE
        }
        budget = resolve_mine_budget(self.width, self.height, mines)
        if not self.engine.running:
            self.engine.start()
        self.engine.post(
            InitMessage(mine_budget=budget, clues=tuple(tuple(r) for r in clues))
        )

    def reveal(self, cells: Iterable[Sequence[int]]) -> None:
        """Record revealed cells locally and notify the engine."""
        if self.fingerprint is None:
            raise EngineNotInitialized("reveal() called before init().")
        batch = []
        for c in cells:
            x, y = int(c[0]), int(c[1])
            # The engine never reveals mines, so neither does the tally.
            in_bounds = 0 <= x < self.width and 0 <= y < self.height
            if in_bounds and (x, y) not in self._mines:
                self.fingerprint.mark(y * self.width + x)
            batch.append((x, y))
        self.engine.post(RevealMessage(cells=tuple(batch)))

    def request(self, kind: Union[RequestKind, str]) -> None:
        """Ask for a classification set, superseding any outstanding request."""
        if self.fingerprint is None:
            raise EngineNotInitialized("request() called before init().")
        self.live_request = RequestKind(kind)
        self.engine.post(RequestMessage(kind=self.live_request))

    def accepts(self, response: ResponseMessage) -> bool:
        """Return True if a response answers the live request for the current game state."""
        return (
            self.live_request is not None
            and response.kind is self.live_request
            and self.fingerprint is not None
            and self.fingerprint == response.fingerprint
        )

    def poll(self, timeout: float = 0.0) -> Optional[ResponseMessage]:
        """
        Return the response to the live request if it has arrived.

        Stale responses found on the way are discarded.

        Args:
            timeout: Seconds to wait for each response; 0 does not block.

        Raises:
            EngineFailure: If the engine worker died.
        """
        while True:
            try:
                if timeout > 0:
                    response = self.engine.outbox.get(timeout=timeout)
                else:
                    response = self.engine.outbox.get_nowait()
            except queue.Empty:
                if self.engine.error is not None:
                    raise EngineFailure("Engine worker failed.") from self.engine.error
                return None
            if self.accepts(response):
                self.live_request = None
                return response
            logger.debug("Discarding stale %s response", response.kind.value)

    def close(self) -> None:
        self.engine.stop()
