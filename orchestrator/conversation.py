"""
Conversation State - Append-only turn history for one chat request
"""

from typing import Iterator, List, Optional, Tuple

from agents.shared.schemas import Turn, UserTurn, ModelTurn, ToolResultTurn


class Conversation:
    """
    Ordered sequence of turns owned by a single request.

    Turns are only ever appended. A tool result must answer a call issued by
    the model turn that immediately precedes the current run of tool results.
    """

    def __init__(self):
        self._turns: List[Turn] = []

    def append(self, turn: Turn) -> None:
        """
        Append a turn.

        Raises:
            ValueError: If a tool result does not reference a call from the
                preceding model turn
        """
        if isinstance(turn, ToolResultTurn):
            model_turn = self.last_model_turn
            issued = {call.id for call in model_turn.tool_calls} if model_turn else set()
            if turn.call_id not in issued:
                raise ValueError(
                    f"Tool result '{turn.call_id}' does not answer a call "
                    f"from the preceding model turn"
                )
        elif not isinstance(turn, (UserTurn, ModelTurn)):
            raise TypeError(f"Unsupported turn type: {type(turn).__name__}")

        self._turns.append(turn)

    @property
    def last_model_turn(self) -> Optional[ModelTurn]:
        """The model turn preceding any trailing tool results, if there is one"""
        for turn in reversed(self._turns):
            if isinstance(turn, ToolResultTurn):
                continue
            return turn if isinstance(turn, ModelTurn) else None
        return None

    @property
    def turns(self) -> Tuple[Turn, ...]:
        """Snapshot of the turns in chronological order"""
        return tuple(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)

    def __repr__(self) -> str:
        roles = ", ".join(turn.role for turn in self._turns)
        return f"Conversation([{roles}])"
