"""Human-readable listings of tokenized programs and label tables."""

from typing import Dict, List, Sequence

from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_opcode import Opcode


def format_instruction(index: int, instr: Instruction) -> str:
    """Format a single instruction as `index  line  OPCODE  args`."""
    if instr.opcode is Opcode.INVALID:
        name = f"INVALID({instr.word})"
    else:
        name = instr.opcode.name

    parts = [f"{index:4d}", f"line {instr.line:<4d}", f"{name:<8}"]
    if instr.arguments:
        parts.append(" ".join(instr.arguments))

    return "  ".join(parts).rstrip()


def format_instructions(instructions: Sequence[Instruction]) -> str:
    """Format a whole instruction sequence, one instruction per line."""
    lines = ["======= INSTRUCTIONS ======="]
    lines.extend(format_instruction(index, instr) for index, instr in enumerate(instructions))
    return "\n".join(lines)


def format_labels(labels: Dict[str, int]) -> str:
    """Format a label table in definition order."""
    lines: List[str] = ["======= PROGRAM ======="]
    for name, index in sorted(labels.items(), key=lambda item: item[1]):
        lines.append(f"DEF: {name} => index: {index}")

    return "\n".join(lines)
