"""
History Manager for the stack calculator
Keeps the last N evaluations, accepted and rejected, oldest dropped first
"""
from collections import deque

from . import MathEngine

DEFAULT_MAX_SIZE = 5


class HistoryManager:
    def __init__(self, max_size=DEFAULT_MAX_SIZE):
        # At least one entry is always kept
        self.max_size = max(1, int(max_size))
        self.history = deque(maxlen=self.max_size)

    def add_entry(self, expression, result):
        """Add an accepted calculation to history"""
        self.history.append(f"{expression} = {MathEngine.format_result(result)}")

    def add_error_entry(self, expression, error_message):
        """Add a rejected calculation with its error description"""
        self.history.append(f"{expression} → ERROR: {error_message}")

    def get_history(self):
        """Get a copy of all entries, oldest first"""
        return list(self.history)

    def size(self):
        return len(self.history)

    def __len__(self):
        return len(self.history)

    def is_empty(self):
        return not self.history

    def clear(self):
        """Clear all calculation history"""
        self.history.clear()

    def resize(self, max_size):
        """Change the capacity, keeping the newest entries that still fit"""
        self.max_size = max(1, int(max_size))
        self.history = deque(self.history, maxlen=self.max_size)

    def get_formatted_history(self):
        """Format calculation history for display"""
        if not self.history:
            return "  No calculations in history."

        lines = [f"  Last {len(self.history)} calculations:", "  " + "-" * 37]
        for i, entry in enumerate(self.history, 1):
            lines.append(f"   {i}. {entry}")
        lines.append("  " + "-" * 37)

        return "\n".join(lines)
