# von_neumann_tracer/instructions/alu.py
"""
算術演算命令 (ADD/SUB)。
"""
from typing import Callable

from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.core.state import AluState
from von_neumann_tracer.transport import bus
from von_neumann_tracer.transport.bus import BusState
from von_neumann_tracer.instructions.base import read_operand, next_cycle

# @intent:responsibility メモリの値と累算器をALUで演算し、結果を累算器へ戻す共通処理。
def _arithmetic(state: SimulatorState, addr: int, operation: str,
                compute: Callable[[int, int], int]) -> SimulatorState:
    value = read_operand(state, addr)
    acc = state.cpu.acc
    alu = AluState(input1=acc, input2=value, output=compute(acc, value), operation=operation)
    cpu = state.cpu.replace(mar=addr, mdr=value, alu=alu, acc=alu.output)
    return state.replace(
        cpu=next_cycle(cpu, state.cpu.pc + 1, operation),
        memory=bus.highlight(state.memory, addr),
        bus=BusState.transfer(alu.output, "ALU", "ACC"),
    )

# --- ADD ---
def add(state: SimulatorState, addr: int) -> SimulatorState:
    return _arithmetic(state, addr, "ADD", lambda a, b: a + b)

# --- SUB ---
def sub(state: SimulatorState, addr: int) -> SimulatorState:
    return _arithmetic(state, addr, "SUB", lambda a, b: a - b)
