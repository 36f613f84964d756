"""Label table construction."""

import logging
from typing import Dict, Sequence

from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_opcode import Opcode


logger = logging.getLogger("StackVMLabels")


def build_label_table(instructions: Sequence[Instruction]) -> Dict[str, int]:
    """
    Map every label name to the index of its definition.

    A label defined more than once resolves to its last definition. Label
    definitions without a name are ignored.

    Args:
        instructions: Tokenized program

    Returns:
        Dictionary of label name to instruction index
    """
    labels: Dict[str, int] = {}
    for index, instruction in enumerate(instructions):
        if instruction.opcode is not Opcode.DEF:
            continue

        name = instruction.argument(0)
        if name is None:
            logger.debug("Ignoring unnamed label definition on line %d", instruction.line)
            continue

        if name in labels:
            logger.debug(
                "Label '%s' redefined on line %d (previous index %d)", name, instruction.line, labels[name]
            )

        labels[name] = index

    return labels
