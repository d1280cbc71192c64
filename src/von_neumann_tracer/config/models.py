from dataclasses import dataclass, field
from typing import List, Tuple

from von_neumann_tracer.common.types import DataSetupEntry, DEFAULT_MEMORY_SIZE

@dataclass(frozen=True)
class ExampleProgram:
    name: str
    code: str
    description: str = ""
    memory_setup: Tuple[DataSetupEntry, ...] = ()

@dataclass
class SimulatorConfig:
    memory_size: int = DEFAULT_MEMORY_SIZE
    execution_speed: int = 500  # ms per step
    min_speed: int = 100
    max_speed: int = 1000
    max_run_steps: int = 10000  # 同期実行 (Debugger.run) の上限
    programs: List[ExampleProgram] = field(default_factory=list)

    # @intent:responsibility ティック間隔を設定範囲内に丸めます。
    def clamp_speed(self, speed: int) -> int:
        return max(self.min_speed, min(self.max_speed, speed))
