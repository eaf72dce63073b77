"""Main CHIP-8 emulator execution engine."""

from functools import partial
from typing import Sequence, Union

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.constants import PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_SIZE
from chip8vm.errors import OversizedProgram
from chip8vm.instructions.system import execute_system_instruction, no_op
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.keypad import execute_skip_if_key
from chip8vm.instructions.misc import execute_misc_instruction

ProgramData = Union[bytes, bytearray, Sequence[int], np.ndarray]


def _require_zero_nibble(handler):
    """Guard 5XY0/9XY0 so other low nibbles fall through as no-ops."""
    def guarded(state: EmulatorState, instruction) -> EmulatorState:
        return jax.lax.cond(instruction.n == 0, handler, no_op, state, instruction)
    return guarded


execute_skip_if_equal_register_guarded = _require_zero_nibble(execute_skip_if_equal_register)
execute_skip_if_not_equal_register_guarded = _require_zero_nibble(execute_skip_if_not_equal_register)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The PC is expected to already point past the instruction (see ``fetch``).
    Opcodes that match no instruction leave the state unchanged.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register_guarded,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register_guarded,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc % MEMORY_SIZE], state.memory[(state.pc + 1) % MEMORY_SIZE])
    return state.replace(pc=state.pc + 2), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement nonzero timers by one and record whether the sound timer ran."""
    sound_active = state.sound_timer > 0
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(sound_active, state.sound_timer - 1, state.sound_timer),
        sound_active=sound_active,
    )


def cycle(state: EmulatorState, decrement_timers: bool = True) -> EmulatorState:
    """Run one full fetch-decode-execute cycle without validation."""
    state = state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))
    state, instruction = fetch(state)
    state = execute(state, instruction)
    if decrement_timers:
        state = tick_timers(state)
    return state


@partial(jax.jit, static_argnums=(1, 2))
def run_n_instructions(state: EmulatorState, n: int, decrement_timers: bool = True) -> EmulatorState:
    """Run ``n`` cycles under ``jax.lax.scan``. FX0A never blocks here."""
    def body(state, _):
        return cycle(state, decrement_timers), None

    state, _ = jax.lax.scan(body, state, length=n)
    return state


def program_bytes(data: ProgramData) -> np.ndarray:
    """Flatten a program image into a 1-D uint8 array."""
    if isinstance(data, (bytes, bytearray)):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    return np.asarray(data, dtype=np.uint8).ravel()


def load_program(state: EmulatorState, data: ProgramData) -> EmulatorState:
    """Load program bytes into CHIP-8 memory starting at 0x200."""
    rom_array = program_bytes(data)
    if len(rom_array) > MAX_PROGRAM_SIZE:
        raise OversizedProgram(len(rom_array), MAX_PROGRAM_SIZE)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_array)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
