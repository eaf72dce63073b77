"""CHIP-8 call stack operations.

The stack holds up to ``STACK_SIZE`` 12-bit return addresses. ``push`` and
``pop`` are total so they can run under ``jit``; callers that need to reject
overflow and underflow check ``is_full``/``is_empty`` first.
"""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, STACK_SIZE
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Store a return address in the next free slot."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    return stack.replace(
        data=stack.data.at[stack.pointer].set(masked_address),
        pointer=stack.pointer + 1,
    )


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Remove and return the most recent return address."""
    top = stack.pointer - 1
    return stack.replace(data=stack.data.at[top].set(0), pointer=top), stack.data[top]


def is_empty(stack: StackState) -> bool:
    return int(stack.pointer) <= 0


def is_full(stack: StackState) -> bool:
    return int(stack.pointer) >= STACK_SIZE


def addresses(stack: StackState) -> list[int]:
    """Return addresses currently on the stack, oldest first."""
    return [int(a) for a in stack.data[:int(stack.pointer)]]
