"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, Machine, MachineConfig


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quirk_state():
    """Provide a fresh state with shifts reading VY."""
    return create_state(shift_quirk=True)


@pytest.fixture
def machine():
    """Provide an initialized machine with default configuration."""
    return Machine()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*opcodes):
    """Assemble 16-bit opcodes into big-endian program bytes."""
    data = bytearray()
    for opcode in opcodes:
        data += opcode.to_bytes(2, "big")
    return bytes(data)


def machine_with_program(*opcodes, config=None):
    """Create a machine with the given opcodes loaded at 0x200."""
    machine = Machine(config if config is not None else MachineConfig())
    machine.load_program(program(*opcodes))
    return machine
