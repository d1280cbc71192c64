# von_neumann_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、累算器型CPUのレジスタ群、ALU、制御ユニットの状態を保持する
不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Tuple

from von_neumann_tracer.core.instruction import Instruction, MemoryContent, EMPTY_INSTRUCTION

# @intent:responsibility 命令サイクルのフェーズを定義します。
class Phase(Enum):
    IDLE = "idle"
    FETCH = "fetch"
    DECODE = "decode"
    EXECUTE = "execute"

# @intent:responsibility 直近の算術演算の入出力を記録します。ADD/SUBの実行時のみ更新されます。
@dataclass(frozen=True)
class AluState:
    input1: int = 0
    input2: int = 0
    output: int = 0
    operation: str = ""

# @intent:responsibility 制御ユニットのフェーズと、表示用のアクティブ制御信号を保持します。
@dataclass(frozen=True)
class ControlUnitState:
    """
    active_controlはUIのハイライト用であり、実行の意味論には関与しません。
    """
    phase: Phase = Phase.IDLE
    active_control: Tuple[str, ...] = ()

# @intent:responsibility CPUのレジスタ状態を保持します。
@dataclass(frozen=True)
class CpuState:
    """
    累算器型CPUのレジスタ状態を保持するデータクラス。
    pc: 次に実行する命令のアドレス
    ir: 現在の命令
    mar/mdr: メモリアクセス用のアドレス/データレジスタ
    acc: 累算器
    """
    pc: int = 0
    ir: Instruction = EMPTY_INSTRUCTION
    mar: int = 0
    mdr: MemoryContent = 0
    acc: int = 0
    alu: AluState = field(default_factory=AluState)
    cu: ControlUnitState = field(default_factory=ControlUnitState)

    @property
    def phase(self) -> Phase:
        return self.cu.phase

    # @intent:responsibility dataclasses.replaceのラッパー。
    def replace(self, **changes) -> 'CpuState':
        return replace(self, **changes)

    # @intent:responsibility フェーズと制御信号を変更した新しいインスタンスを返す（不変性の維持）。
    def with_control(self, phase: Phase, *active_control: str) -> 'CpuState':
        return replace(self, cu=ControlUnitState(phase=phase, active_control=tuple(active_control)))
