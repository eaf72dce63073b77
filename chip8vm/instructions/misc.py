"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE
from chip8vm.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (16-bit wraparound, VF untouched)."""
    new_i = jnp.astype(state.I, jnp.uint16) + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a pressed key the PC is rewound so the instruction runs again on
    the next cycle. The lowest pressed key wins.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + state.I) % MEMORY_SIZE
    new_memory = state.memory.at[indices].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is left unchanged."""
    register_mask = jnp.arange(16) <= instruction.x
    base_indices = (state.I + jnp.arange(16)) % MEMORY_SIZE
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    return state.replace(memory=state.memory.at[base_indices].set(new_memory_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is left unchanged."""
    register_mask = jnp.arange(16) <= instruction.x
    base_indices = (state.I + jnp.arange(16)) % MEMORY_SIZE
    memory_values = state.memory[base_indices]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


# Low bytes of the FXNN instructions, in dispatch order
MISC_CODES = jnp.array([0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65])


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    matches = MISC_CODES == instruction.nn
    switch_index = jnp.where(jnp.any(matches), jnp.argmax(matches), len(MISC_CODES))

    return jax.lax.switch(
        switch_index,
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            no_op,
        ],
        state, instruction
    )
