"""Instruction records produced by the tokenizer."""

from dataclasses import dataclass
from typing import Optional, Tuple

from stackvm.stackvm_opcode import Opcode


@dataclass(frozen=True)
class Instruction:
    """
    A single tokenized source line.

    Arguments are kept as raw strings; numeric conversion happens when the
    instruction executes.
    """
    opcode: Opcode
    arguments: Tuple[str, ...] = ()
    line: int = 0
    word: str = ""

    def argument(self, index: int) -> Optional[str]:
        """Return the argument at `index`, or None if the line did not supply it."""
        if index < len(self.arguments):
            return self.arguments[index]

        return None

    def __str__(self) -> str:
        if self.opcode is Opcode.INVALID:
            name = self.word
        else:
            name = self.opcode.value

        return " ".join((name,) + self.arguments)
