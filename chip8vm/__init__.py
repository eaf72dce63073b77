"""CHIP-8 emulator package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import execute, fetch, cycle, tick_timers, load_program, load_rom, run_n_instructions
from chip8vm.decode import DecodedInstruction, decode, disassemble, is_known_opcode
from chip8vm.config import MachineConfig
from chip8vm.errors import (
    Chip8Error, OversizedProgram, UnknownOpcode, InvalidDigit, StackOverflow, StackUnderflow, KeyWaitTimeout,
)
from chip8vm.machine import Machine, run, validate_instruction
from chip8vm.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "cycle",
    "tick_timers",
    "load_program",
    "load_rom",
    "run_n_instructions",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "is_known_opcode",
    "MachineConfig",
    "Machine",
    "run",
    "validate_instruction",
    "Chip8Error",
    "OversizedProgram",
    "UnknownOpcode",
    "InvalidDigit",
    "StackOverflow",
    "StackUnderflow",
    "KeyWaitTimeout",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_PROGRAM_SIZE",
]
