# von_neumann_tracer/instructions/control.py
"""
制御系命令 (JUMP/JZ/JNZ/HALT)。
"""
from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.core.state import Phase
from von_neumann_tracer.transport.bus import BusState
from von_neumann_tracer.instructions.base import next_cycle

HALT_MESSAGE = "Program halted. Final ACC value: {acc}"

# --- JUMP ---
# @intent:responsibility 無条件分岐。IR→PC。
def jump(state: SimulatorState, addr: int) -> SimulatorState:
    return state.replace(
        cpu=next_cycle(state.cpu, addr, "JUMP"),
        bus=BusState.transfer(addr, "IR", "PC"),
    )

# @intent:responsibility 条件分岐の共通処理。分岐しない場合はバスを変更せずPCを進める。
def _branch(state: SimulatorState, addr: int, opcode: str, taken: bool) -> SimulatorState:
    if taken:
        return state.replace(
            cpu=next_cycle(state.cpu, addr, opcode, "Taken"),
            bus=BusState.transfer(addr, "IR", "PC"),
        )
    return state.replace(cpu=next_cycle(state.cpu, state.cpu.pc + 1, opcode, "Not Taken"))

# --- JZ (Jump if Zero) ---
def jz(state: SimulatorState, addr: int) -> SimulatorState:
    return _branch(state, addr, "JZ", state.cpu.acc == 0)

# --- JNZ (Jump if Not Zero) ---
def jnz(state: SimulatorState, addr: int) -> SimulatorState:
    return _branch(state, addr, "JNZ", state.cpu.acc != 0)

# --- HALT ---
# @intent:responsibility 実行を終了する。PCは変更せず、フェーズをidleに戻して最終ACCを出力する。
def halt(state: SimulatorState, addr: int) -> SimulatorState:
    cpu = state.cpu.with_control(Phase.IDLE, "Execute", "HALT")
    return state.replace(
        cpu=cpu,
        is_halted=True,
        is_running=False,
    ).with_output(HALT_MESSAGE.format(acc=state.cpu.acc))
