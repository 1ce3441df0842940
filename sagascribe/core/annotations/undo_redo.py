"""
Undo/Redo history for annotation mutations.
"""
import logging
from typing import List, Optional

from .models import HistoryAction

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 50


class UndoRedoStack:
    """
    Two bounded stacks of annotation actions.

    The stack only stores and hands back actions; interpreting them (applying
    the inverse on undo, replaying on redo) is up to the caller.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        """
        Initialize the undo/redo stack.

        Args:
            max_history: Maximum number of actions to keep in the undo stack
        """
        self._undo_stack: List[HistoryAction] = []
        self._redo_stack: List[HistoryAction] = []
        self._max_history = max(0, max_history)

    @property
    def undo_stack(self) -> List[HistoryAction]:
        """Snapshot of the undo stack, oldest first."""
        return list(self._undo_stack)

    @property
    def redo_stack(self) -> List[HistoryAction]:
        """Snapshot of the redo stack, oldest first."""
        return list(self._redo_stack)

    @property
    def max_history(self) -> int:
        return self._max_history

    def push_action(self, action: HistoryAction) -> None:
        """
        Record a new action.

        Evicts the oldest action when the bound is exceeded and always
        invalidates the redo stack.

        Args:
            action: Action that was just applied
        """
        self._undo_stack.append(action)

        # Limit stack size
        if len(self._undo_stack) > self._max_history:
            del self._undo_stack[:len(self._undo_stack) - self._max_history]

        # Clear redo stack when new action is performed
        self._redo_stack.clear()

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self._redo_stack) > 0

    def undo(self) -> Optional[HistoryAction]:
        """
        Move the most recent action to the redo stack.

        Returns:
            The action to revert, or None if there is nothing to undo
        """
        if not self._undo_stack:
            return None

        action = self._undo_stack.pop()
        self._redo_stack.append(action)
        return action

    def redo(self) -> Optional[HistoryAction]:
        """
        Move the most recently undone action back to the undo stack.

        Returns:
            The action to re-apply, or None if there is nothing to redo
        """
        if not self._redo_stack:
            return None

        action = self._redo_stack.pop()
        self._undo_stack.append(action)
        return action

    def clear_redo(self) -> None:
        """Drop undone actions after a change that was not recorded."""
        self._redo_stack.clear()

    def clear(self) -> None:
        """Clear both stacks."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    def set_max_history(self, max_history: int) -> None:
        """Change the bound, keeping only the most recent actions."""
        self._max_history = max(0, max_history)
        excess = len(self._undo_stack) - self._max_history
        if excess > 0:
            logger.debug("Dropping %d oldest history entries", excess)
            del self._undo_stack[:excess]
