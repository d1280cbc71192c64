# von_neumann_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、メモリ、CPU、バス、および実行フラグを含むシミュレータ全体の状態を
記録した不変のデータ構造を定義します。実行エンジンは1フェーズごとに新しい
スナップショットを生成し、以前のスナップショットは変更されません。
"""
from dataclasses import dataclass, field, replace
from typing import Tuple

from von_neumann_tracer.common.types import DEFAULT_MEMORY_SIZE, INSTRUCTION_REGION_SIZE
from von_neumann_tracer.core.instruction import CellKind, MemoryCell
from von_neumann_tracer.core.state import CpuState
from von_neumann_tracer.transport.bus import BusState, Memory, IDLE_BUS

INITIAL_MESSAGE = "CPU initialized. Ready to load program."
DEFAULT_EXECUTION_SPEED = 500 # ms per step

# @intent:responsibility ある一時点におけるシミュレータ全体の状態を不変に記録します。
@dataclass(frozen=True)
class SimulatorState:
    """
    ある一時点における、メモリ・CPU・バスの完全な状態を記録した不変のデータ構造。
    execution_speedは連続実行時のティック間隔 (ms) で、ドライバのみが参照します。
    """
    memory: Memory
    cpu: CpuState = field(default_factory=CpuState)
    bus: BusState = IDLE_BUS
    is_running: bool = False
    is_halted: bool = False
    execution_speed: int = DEFAULT_EXECUTION_SPEED
    program_output: Tuple[str, ...] = ()

    # @intent:rationale Snapshotは不変であるべきという原則に従い、frozen=Trueとし、
    #                  シーケンスはすべてタプルで保持する。

    # @intent:responsibility dataclasses.replaceのラッパー。
    def replace(self, **changes) -> 'SimulatorState':
        return replace(self, **changes)

    # @intent:responsibility 出力ログに1行追加した新しいインスタンスを返す。
    def with_output(self, line: str) -> 'SimulatorState':
        return replace(self, program_output=self.program_output + (line,))

    @property
    def memory_size(self) -> int:
        return len(self.memory)

# @intent:responsibility 初期化済みのメモリセル列を生成します。先頭10アドレスが命令領域です。
def initialize_memory(size: int) -> Memory:
    if not isinstance(size, int) or size <= 0:
        raise ValueError("Memory size must be a positive integer.")
    return tuple(
        MemoryCell(
            address=address,
            content=0,
            kind=CellKind.INSTRUCTION if address < INSTRUCTION_REGION_SIZE else CellKind.DATA,
        )
        for address in range(size)
    )

# @intent:responsibility 全レジスタ0、フェーズidle、挨拶メッセージ1行の初期状態を生成します。
def initialize(memory_size: int = DEFAULT_MEMORY_SIZE) -> SimulatorState:
    """
    新しいシミュレータ状態を生成して返します。
    """
    return SimulatorState(
        memory=initialize_memory(memory_size),
        program_output=(INITIAL_MESSAGE,),
    )
