"""Instruction reading and cursor navigation over a built document tree."""

from .instructions import InstructionReader
from .interpreter import CommandInterpreter, InterpretResult

__all__ = [
    "CommandInterpreter",
    "InstructionReader",
    "InterpretResult",
]
