"""Opcode definitions for the stack virtual machine."""

from enum import Enum
from typing import Dict


class Opcode(Enum):
    """Operation kinds an instruction can carry."""
    # Stack manipulation
    PUSH = "push"
    DROP = "drop"
    DUPE = "dupe"
    SWAP = "swap"
    FREE = "free"
    ROTATE = "rotate"
    SIZE = "size"

    # Arithmetic
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    ABS = "abs"
    NEG = "neg"

    # I/O
    OUT = "out"
    READ = "read"

    # Control
    GOTO = "goto"
    HALT = "halt"
    DEF = "def"

    # Sentinels
    BLANK = "<blank>"
    INVALID = "<invalid>"
    EOF = "<eof>"

    @property
    def is_sentinel(self) -> bool:
        """True for opcodes the tokenizer produces rather than the programmer."""
        return self in (Opcode.BLANK, Opcode.INVALID, Opcode.EOF)


# Keyword (lowercased first word of a line) -> opcode
KEYWORDS: Dict[str, Opcode] = {
    op.value: op for op in Opcode if not op.is_sentinel
}

KEYWORDS.update({
    "pop": Opcode.DROP,
    "dup": Opcode.DUPE,
    "duplicate": Opcode.DUPE,
    "clear": Opcode.FREE,
    "reverse": Opcode.ROTATE,
    "negate": Opcode.NEG,
    "output": Opcode.OUT,
    "print": Opcode.OUT,
    "jmp": Opcode.GOTO,
    "jump": Opcode.GOTO,
    "label": Opcode.DEF,
})
