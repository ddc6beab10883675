"""Turn selection for arena rounds."""

import logging
import random
from collections.abc import Callable, Sequence

from .agent import Agent
from .exceptions import EmptyRosterError

logger = logging.getLogger(__name__)


class SpeakerPicker:
    """Round-robin speaker selection over an optionally shuffled roster.

    The order is shuffled once up front and again each time the cursor wraps,
    so long sessions do not settle into one fixed cycle.
    """

    def __init__(
        self,
        agents: Sequence[Agent],
        shuffle: bool = True,
        random_source: Callable[[], float] | None = None,
    ):
        self._order = list(agents)
        self._shuffle = shuffle
        self._random = random_source or random.random
        self._cursor = 0

        if self._shuffle:
            self._shuffle_order()

    @property
    def order(self) -> list[Agent]:
        return list(self._order)

    def _shuffle_order(self) -> None:
        """Fisher-Yates shuffle driven by the injected random source."""
        for i in range(len(self._order) - 1, 0, -1):
            j = int(self._random() * (i + 1))
            self._order[i], self._order[j] = self._order[j], self._order[i]

    def pick_next(self, avoid_agent_id: str | None = None) -> Agent:
        """Return the next speaker, skipping ``avoid_agent_id`` if possible."""
        if not self._order:
            raise EmptyRosterError()

        for _ in range(len(self._order)):
            if self._cursor >= len(self._order):
                self._cursor = 0
                if self._shuffle:
                    self._shuffle_order()

            candidate = self._order[self._cursor]
            self._cursor += 1
            if len(self._order) == 1 or avoid_agent_id is None or candidate.id != avoid_agent_id:
                return candidate

        # A reshuffle mid-lap can hide the only other candidate; never stall.
        logger.debug(f"No speaker other than {avoid_agent_id} found in one lap")
        return next(
            (agent for agent in self._order if agent.id != avoid_agent_id),
            self._order[0],
        )
