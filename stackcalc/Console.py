# Console.py
"""""
Line-oriented front end for the stack calculator.

Reads one line at a time. A line is either a command or an expression:

    history  -> show the last calculations
    clear    -> clear the history
    help     -> show usage
    exit     -> quit

Anything else goes to MathEngine.evaluate(); results and errors both end up
in the history.
"""""

from . import MathEngine
from . import error as E
from .history_manager import HistoryManager

COMMAND_HISTORY = "history"
COMMAND_CLEAR = "clear"
COMMAND_HELP = "help"
COMMAND_EXIT = "exit"

PROMPT = "  >  "

WELCOME_TEXT = """
  +--------------------------------------+
  |          STACK CALCULATOR            |
  |    type 'help' for usage, 'exit'     |
  +--------------------------------------+
"""

HELP_TEXT = """
  Examples:
    5 + 3              -> 8
    (10 + 2) * 5       -> 60
    2 ^ 3 ^ 2          -> 512
    (5 + 3) * 2 / 4    -> 4
    -5 + 10            -> 5
    5!                 -> 120
    sqrt(16) + abs(-2) -> 6

  Operators:  +  -  *  /  %  ^  !  ( )
  Functions:  sin cos tan sqrt ln log abs
  Constants:  pi e

  Commands:
    history  -> show the last calculations
    clear    -> clear the history
    help     -> show this text
    exit     -> quit
"""


class Console:
    def __init__(self, history=None, output=print):
        self.history = history if history is not None else HistoryManager()
        self.output = output

    def handle_line(self, line):
        """Process one input line. Returns False once the user asked to exit."""
        received_string = line.strip()

        # Skip blank input
        if not received_string:
            return True

        command = received_string.lower()

        if command == COMMAND_EXIT:
            self.output("\n  Closing the calculator. Goodbye!\n")
            return False

        if command == COMMAND_HISTORY:
            self.output("\n" + self.history.get_formatted_history() + "\n")
            return True

        if command == COMMAND_CLEAR:
            self.history.clear()
            self.output("\n  History cleared.\n")
            return True

        if command == COMMAND_HELP:
            self.output(HELP_TEXT)
            return True

        try:
            ergebnis = MathEngine.evaluate(received_string)
        except E.MathError as e:
            self.output(f"  x  {e.describe()}\n")
            description = e.kind.description if e.kind is not None else e.message
            self.history.add_error_entry(received_string, description)
            return True

        self.output(f"  ok {received_string} = {MathEngine.format_result(ergebnis)}\n")
        self.history.add_entry(received_string, ergebnis)
        return True

    def run(self, input_func=input):
        self.output(WELCOME_TEXT)
        while True:
            try:
                line = input_func(PROMPT)
            except EOFError:
                break
            if not self.handle_line(line):
                break


def main(history_size=None):
    if history_size is None:
        history = HistoryManager()
    else:
        history = HistoryManager(history_size)
    Console(history).run()
