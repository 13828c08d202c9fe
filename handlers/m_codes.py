"""
M-code command handlers for the interpreter.
"""
import logging
from typing import Callable, Dict
from core.lexer import Word
from core.machine_state import LineContext, MachineState
from utils.errors import InterpreterError, InterpreterErrorReason

logger = logging.getLogger(__name__)


class MCodeHandlers:
    """Handles execution of M-codes."""

    def __init__(self, machine_state: MachineState):
        self.machine_state = machine_state

        # M-code handler mapping
        self.handlers: Dict[int, Callable[[LineContext], None]] = {
            # Program control
            2: self.handle_m2_program_end,

            # Spindle control
            3: self.handle_m3_spindle_clockwise,
            5: self.handle_m5_spindle_stop,
        }

    def execute_m_code(self, word: Word, context: LineContext):
        """
        Execute an M word.

        Raises:
            InterpreterError: UNKNOWN_COMMAND for any unsupported code.
        """
        handler = None
        if isinstance(word.number, int):
            handler = self.handlers.get(word.number)
        if handler is None:
            raise InterpreterError(InterpreterErrorReason.UNKNOWN_COMMAND,
                                   context.line_number, str(word))
        handler(context)

    # Program control M-codes

    def handle_m2_program_end(self, context: LineContext):
        """
        M2 - Program end
        Nothing after this word is interpreted.
        """
        logger.debug("Program ended at line %d (M2)", context.line_number)
        context.program_end = True

    # Spindle control M-codes. The preview has no spindle, so both are no-ops.

    def handle_m3_spindle_clockwise(self, context: LineContext):
        """M3 - Spindle clockwise"""

    def handle_m5_spindle_stop(self, context: LineContext):
        """M5 - Spindle stop"""
