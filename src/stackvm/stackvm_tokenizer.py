"""Tokenizer that turns program lines into instructions."""

from typing import Iterable, List

from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_opcode import KEYWORDS, Opcode


class StackVMTokenizer:
    """
    Converts source lines into an instruction sequence.

    Each line becomes exactly one instruction. Lines whose first word is not a
    known keyword become INVALID instructions and empty lines become BLANK
    instructions, so tokenization never fails. The returned sequence always
    ends with a single EOF instruction.
    """

    max_arguments = 2

    def tokenize(self, lines: Iterable[str]) -> List[Instruction]:
        """
        Tokenize a sequence of source lines.

        Args:
            lines: Program source, one instruction per line

        Returns:
            List of instructions, one per input line plus a trailing EOF marker
        """
        instructions = []
        line_number = 0
        for line_number, line in enumerate(lines, start=1):
            instructions.append(self._tokenize_line(line, line_number))

        instructions.append(Instruction(Opcode.EOF, line=line_number + 1))
        return instructions

    def tokenize_source(self, source: str) -> List[Instruction]:
        """Tokenize a complete program held in a single string."""
        return self.tokenize(source.splitlines())

    def _tokenize_line(self, line: str, line_number: int) -> Instruction:
        words = line.split()
        if not words:
            return Instruction(Opcode.BLANK, line=line_number)

        word = words[0].lower()
        arguments = tuple(words[1:1 + self.max_arguments])
        opcode = KEYWORDS.get(word)
        if opcode is None:
            return Instruction(Opcode.INVALID, arguments, line_number, word)

        return Instruction(opcode, arguments, line_number, word)
