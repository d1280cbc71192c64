# von_neumann_tracer/instructions/load.py
"""
転送系命令 (LOAD/STORE)。
"""
from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.transport import bus
from von_neumann_tracer.transport.bus import BusState
from von_neumann_tracer.instructions.base import read_operand, next_cycle

# --- LOAD (Load Accumulator) ---
# @intent:responsibility IR→MAR, Memory→MDR, MDR→ACCの順に転送し、メモリの値を累算器へロード。
def load(state: SimulatorState, addr: int) -> SimulatorState:
    value = read_operand(state, addr)
    cpu = state.cpu.replace(mar=addr, mdr=value, acc=value)
    return state.replace(
        cpu=next_cycle(cpu, state.cpu.pc + 1, "LOAD"),
        memory=bus.highlight(state.memory, addr),
        bus=BusState.transfer(value, "MDR", "ACC"),
    )

# --- STORE (Store Accumulator) ---
# @intent:responsibility IR→MAR, ACC→MDR, MDR→Memoryの順に転送し、累算器の値をメモリへストア。
def store(state: SimulatorState, addr: int) -> SimulatorState:
    acc = state.cpu.acc
    cpu = state.cpu.replace(mar=addr, mdr=acc)
    memory = bus.write(state.memory, addr, acc)
    return state.replace(
        cpu=next_cycle(cpu, state.cpu.pc + 1, "STORE"),
        memory=bus.highlight(memory, addr),
        bus=BusState.transfer(acc, "MDR", "Memory"),
    )
