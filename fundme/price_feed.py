"""
price_feed.py - Price oracle implementations for the funding ledger

Provides read-only price feeds that quote one whole native unit in the
reference currency.

Classes:
- StaticPriceFeed: A single answer that only changes on update_answer()
- AggregatorPriceFeed: Round-based feed with historical lookups

Both implement the PriceFeed protocol from core.py.
"""

from bisect import bisect_right
from datetime import datetime
from typing import List, Optional

from .core import OracleUnavailable, PriceQuote, RoundData


class StaticPriceFeed:
    """
    Price feed with a single static answer.

    The answer remains constant until update_answer() is called.
    """

    version = 0

    def __init__(self, answer: int, decimals: int = 8, description: str = "NATIVE / USD"):
        """
        Initialize with a fixed answer.

        Args:
            answer: Price of one native unit, scaled by 10**decimals
            decimals: Decimal places encoded in answer
            description: Pair description
        """
        self.decimals = decimals
        self.description = description
        self.answer = answer

    def current_price_quote(self) -> PriceQuote:
        return PriceQuote(self.answer, self.decimals)

    def update_answer(self, answer: int) -> None:
        """Replace the answer."""
        self.answer = answer

    def __repr__(self):
        return f"StaticPriceFeed({self.answer}e-{self.decimals}, {self.description})"


class AggregatorPriceFeed:
    """
    Round-based price feed modelled on an on-chain aggregator.

    Every update_answer() opens a new round. The latest round drives
    current_price_quote(); earlier rounds stay queryable by id or by time.

    Supports two initialization patterns:
    - initial_answer given: the feed starts with round 1
    - initial_answer omitted: the feed has no rounds and raises
      OracleUnavailable until the first update
    """

    version = 0

    def __init__(
        self,
        decimals: int = 8,
        initial_answer: Optional[int] = None,
        initial_time: Optional[datetime] = None,
        description: str = "v0.8/tests/MockV3Aggregator.sol",
    ):
        """
        Initialize the feed.

        Args:
            decimals: Decimal places encoded in answers
            initial_answer: Optional answer for round 1
            initial_time: Timestamp for round 1 (default: 1970-01-01)
            description: Pair description

        Examples:
            feed = AggregatorPriceFeed(8, 2000_00000000)
            feed.update_answer(2100_00000000, datetime(2025, 1, 2))
            feed.latest_round_data().round_id  # 2
        """
        self.decimals = decimals
        self.description = description
        self.rounds: List[RoundData] = []
        self._current_time: datetime = initial_time or datetime(1970, 1, 1)

        if initial_answer is not None:
            self.update_answer(initial_answer, self._current_time)

    @property
    def latest_round(self) -> int:
        """Id of the latest round (0 if the feed has no rounds)."""
        return self.rounds[-1].round_id if self.rounds else 0

    @property
    def latest_answer(self) -> int:
        return self.latest_round_data().answer

    @property
    def latest_timestamp(self) -> datetime:
        return self.latest_round_data().updated_at

    def update_answer(self, answer: int, timestamp: Optional[datetime] = None) -> RoundData:
        """
        Record a new answer as the next round.

        Args:
            answer: Price answer
            timestamp: Time of the observation (default: the previous round's time)

        Raises:
            ValueError: If timestamp is before the latest round
        """
        ts = timestamp or self._current_time
        if ts < self._current_time:
            raise ValueError(f"Cannot move time backwards: {ts} < {self._current_time}")
        round_id = self.latest_round + 1
        return self._append_round(RoundData(round_id, answer, ts, ts, round_id))

    def update_round_data(
        self,
        round_id: int,
        answer: int,
        timestamp: datetime,
        started_at: datetime,
    ) -> RoundData:
        """
        Record a round with an explicit id.

        Round ids must increase; the round becomes the latest round.
        """
        if round_id <= self.latest_round:
            raise ValueError(f"Round {round_id} is not after latest round {self.latest_round}")
        if timestamp < self._current_time:
            raise ValueError(f"Cannot move time backwards: {timestamp} < {self._current_time}")
        return self._append_round(RoundData(round_id, answer, started_at, timestamp, round_id))

    def _append_round(self, data: RoundData) -> RoundData:
        self.rounds.append(data)
        self._current_time = data.updated_at
        return data

    def latest_round_data(self) -> RoundData:
        """
        Return the most recent round.

        Raises:
            OracleUnavailable: If no answer has been recorded yet
        """
        if not self.rounds:
            raise OracleUnavailable(f"{self.description}: no rounds recorded")
        return self.rounds[-1]

    def get_round_data(self, round_id: int) -> RoundData:
        """
        Return a specific round.

        Raises:
            OracleUnavailable: If the round does not exist
        """
        for data in self.rounds:
            if data.round_id == round_id:
                return data
        raise OracleUnavailable(f"{self.description}: round {round_id} not found")

    def current_price_quote(self) -> PriceQuote:
        return PriceQuote(self.latest_round_data().answer, self.decimals)

    def quote_at(self, timestamp: datetime) -> PriceQuote:
        """
        Quote from the most recent round updated at or before timestamp.

        Uses binary search for efficient O(log n) lookup.

        Raises:
            OracleUnavailable: If no round exists at or before timestamp
        """
        timestamps = [data.updated_at for data in self.rounds]
        idx = bisect_right(timestamps, timestamp)
        if idx == 0:
            raise OracleUnavailable(f"{self.description}: no answer at or before {timestamp}")
        return PriceQuote(self.rounds[idx - 1].answer, self.decimals)

    def __repr__(self):
        return f"AggregatorPriceFeed({len(self.rounds)} rounds, decimals={self.decimals})"
