# von_neumann_tracer/instructions/base.py
"""
命令実行の共通ヘルパー。

各命令ハンドラは (SimulatorState, addr) を受け取り、新しいSimulatorStateを返す純粋関数です。
"""
from typing import Callable

from von_neumann_tracer.core.instruction import as_number
from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.core.state import CpuState, Phase
from von_neumann_tracer.transport import bus

# Execution Function Type
ExecFunc = Callable[[SimulatorState, int], SimulatorState]

# @intent:responsibility 指定アドレスのセルを読み出し、数値として返します。範囲外・命令は0として読みます。
def read_operand(state: SimulatorState, addr: int) -> int:
    return as_number(bus.read(state.memory, addr))

# @intent:responsibility 実行フェーズを終えてフェッチへ戻るCPU状態を生成します。
def next_cycle(cpu: CpuState, pc: int, opcode: str, *qualifier: str) -> CpuState:
    """
    PCを更新し、フェーズをfetchへ戻し、制御信号を ("Execute", opcode, ...) に設定します。
    """
    return cpu.replace(pc=pc).with_control(Phase.FETCH, "Execute", opcode, *qualifier)
