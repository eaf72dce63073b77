import time

from chip8vm import Machine, MachineConfig, create_state, load_program, run_n_instructions
from chip8vm.logging import MachineLogger

# Draws the digits 0-F across the screen, then loops forever
DEMO_PROGRAM = bytes([
    0x60, 0x00,  # LD V0, 0x00     digit
    0x61, 0x00,  # LD V1, 0x00     x
    0x62, 0x02,  # LD V2, 0x02     y
    0xF0, 0x29,  # LD F, V0
    0xD1, 0x25,  # DRW V1, V2, 5
    0x70, 0x01,  # ADD V0, 0x01
    0x71, 0x04,  # ADD V1, 0x04
    0x30, 0x10,  # SE V0, 0x10
    0x12, 0x06,  # JP 0x206
    0x12, 0x12,  # JP 0x212
])


def print_display(display):
    for y in range(display.shape[1]):
        print("".join("#" if display[x, y] else "." for x in range(display.shape[0])))


if __name__ == "__main__":
    machine = Machine(MachineConfig(), logger=MachineLogger(log_level="INFO"))
    machine.load_program(DEMO_PROGRAM)
    for _ in range(100):
        machine.step()
    print_display(machine.display)

    # Same program through the jitted core
    state = load_program(create_state(), DEMO_PROGRAM)

    start_compile = time.time()
    compiled = run_n_instructions.lower(state, 10000).compile()
    end_compile = time.time()
    print("Compilation time (s):", end_compile - start_compile)

    start_exec = time.time()
    state = compiled(state)
    state.pc.block_until_ready()
    end_exec = time.time()
    print("Execution time (s):", end_exec - start_exec)
