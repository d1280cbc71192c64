# von_neumann_tracer/debugger/debugger.py
"""
デバッガモジュール。

現在のスナップショットを保持して実行エンジンを駆動し、ユーザーの操作
（ロード、ステップ、実行、一時停止、リセット、メモリ編集）を受け付ける責務を負います。
ユーザーが指定した条件（ブレークポイント）で連続実行を中断させることもできます。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from von_neumann_tracer.config.examples import find_example
from von_neumann_tracer.config.models import SimulatorConfig
from von_neumann_tracer.core import cpu
from von_neumann_tracer.core.snapshot import SimulatorState, initialize
from von_neumann_tracer.core.state import Phase
from von_neumann_tracer.loader import loader
from von_neumann_tracer.loader.assembler import ParsedInstruction, ValidationResult
from von_neumann_tracer.transport import bus

logger = logging.getLogger(__name__)

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"           # フェッチ直前のPCが特定のアドレスに一致
    MEMORY_WRITE = "MEMORY_WRITE"   # 特定のアドレスに書き込まれた

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    condition_type: BreakpointConditionType
    address: int
    enabled: bool = True

# @intent:responsibility シミュレータの実行制御と履歴管理を行います。
class Debugger:
    """
    SimulatorStateを保持し、実行エンジンを駆動するセッションドライバ。
    状態は不変なので、過去のスナップショットをそのまま履歴として保持できます。
    """
    def __init__(self, config: Optional[SimulatorConfig] = None):
        self._config = config or SimulatorConfig()
        self._state: SimulatorState = self._fresh_state()
        self._breakpoints: List[BreakpointCondition] = []
        # @intent:responsibility 実行履歴を保持し、ステップバックをサポートします。
        self._history: List[SimulatorState] = []

    def _fresh_state(self) -> SimulatorState:
        return initialize(self._config.memory_size).replace(
            execution_speed=self._config.clamp_speed(self._config.execution_speed))

    @property
    def state(self) -> SimulatorState:
        return self._state

    @property
    def config(self) -> SimulatorConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def is_halted(self) -> bool:
        return self._state.is_halted

    def get_history(self) -> List[SimulatorState]:
        return list(self._history)

    # --- Breakpoints ---

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    # @intent:responsibility 直前の遷移がブレークポイント条件に一致するかを判定します。
    def _check_breakpoints(self, previous: SimulatorState, current: SimulatorState) -> bool:
        for bp in self._breakpoints:
            if not bp.enabled:
                continue
            if bp.condition_type == BreakpointConditionType.PC_MATCH:
                # 実行フェーズを終えてフェッチ待ちになった時点のPCで判定する
                if current.cpu.phase == Phase.FETCH and previous.cpu.phase != Phase.FETCH \
                        and current.cpu.pc == bp.address:
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                if previous.cpu.phase == Phase.EXECUTE and current.bus.is_active \
                        and current.bus.destination == "Memory" and current.cpu.mar == bp.address \
                        and bus.find_cell(current.memory, bp.address) is not None:
                    return True
        return False

    # --- Program loading ---

    # @intent:responsibility 検証済みの命令列をロードします。履歴と実行状態はリセットされます。
    def load_program(self, instructions: Sequence[ParsedInstruction],
                     data_setup: loader.DataSetup = ()) -> SimulatorState:
        new_state = loader.load(self._fresh_state(), instructions, data_setup)
        self._state = new_state.replace(execution_speed=self._state.execution_speed)
        self._history = []
        return self._state

    # @intent:responsibility ソースを解析・検証し、妥当であればロードします。不正であれば状態は変わりません。
    def load_source(self, source: str, data_setup: loader.DataSetup = ()) -> ValidationResult:
        new_state, result = loader.load_source(self._fresh_state(), source, data_setup)
        if result.valid:
            self._state = new_state.replace(execution_speed=self._state.execution_speed)
            self._history = []
        else:
            for error in result.errors:
                logger.warning("%s", error)
        return result

    # @intent:responsibility 名前で指定したサンプルプログラムをロードします。
    def load_example(self, name: str) -> ValidationResult:
        program = find_example(name, self._config.programs)
        return self.load_source(program.code, program.memory_setup)

    # --- Execution control ---

    # @intent:responsibility 1フェーズ分だけ状態を進めます。
    # @intent:rationale ステップ実行と連続実行は排他的であり、実行中のステップ要求は拒否します。
    def step(self) -> SimulatorState:
        if self._state.is_running:
            logger.warning("Step ignored while running.")
            return self._state
        return self._advance()

    # @intent:responsibility 実行モードに関わらず1フェーズ進めます。タイマー駆動のティックから呼ばれます。
    def tick(self) -> SimulatorState:
        if not self._state.is_running:
            return self._state
        return self._advance()

    def _advance(self) -> SimulatorState:
        previous = self._state
        self._state = cpu.step(previous)
        if self._state is not previous:
            self._history.append(previous)
            logger.debug("phase %s -> %s (pc=%d, acc=%d)", previous.cpu.phase.value,
                         self._state.cpu.phase.value, self._state.cpu.pc, self._state.cpu.acc)
        if self._state.is_halted and not previous.is_halted:
            logger.info("%s", self._state.program_output[-1])
        elif self._state.is_running and self._check_breakpoints(previous, self._state):
            logger.info("Breakpoint hit at PC: %d", self._state.cpu.pc)
            self._state = self._state.replace(is_running=False)
        return self._state

    # @intent:responsibility 実行履歴を1つ戻ります。履歴が尽きている場合はNoneを返します。
    def step_back(self) -> Optional[SimulatorState]:
        if not self._history:
            return None
        self._state = self._history.pop().replace(is_running=False)
        return self._state

    def set_running(self, running: bool) -> SimulatorState:
        if running and self._state.is_halted:
            return self._state
        self._state = self._state.replace(is_running=running)
        return self._state

    def toggle_run(self) -> SimulatorState:
        return self.set_running(not self._state.is_running)

    def pause(self) -> SimulatorState:
        return self.set_running(False)

    # @intent:responsibility HALT、ブレークポイント、または上限ステップ数まで同期的に連続実行します。
    def run(self, max_steps: Optional[int] = None) -> SimulatorState:
        limit = self._config.max_run_steps if max_steps is None else max_steps
        self.set_running(True)
        steps = 0
        while self._state.is_running and not self._state.is_halted:
            if steps >= limit:
                logger.warning("Run stopped after %d steps without halting.", steps)
                self.pause()
                break
            self.tick()
            steps += 1
        return self._state

    # @intent:responsibility 現在の状態を破棄し、設定されたメモリサイズで再初期化します。
    def reset(self) -> SimulatorState:
        speed = self._state.execution_speed
        self._state = self._fresh_state().replace(execution_speed=speed)
        self._history = []
        logger.info("Simulator reset.")
        return self._state

    def set_speed(self, speed: int) -> SimulatorState:
        if not isinstance(speed, int) or speed <= 0:
            raise ValueError(f"Execution speed must be a positive integer: {speed}")
        self._state = self._state.replace(execution_speed=self._config.clamp_speed(speed))
        return self._state

    # @intent:responsibility メモリセルを編集します。実行中は拒否します。
    def edit_memory(self, address: int, value: int) -> SimulatorState:
        if self._state.is_running:
            logger.warning("Memory edit at %d ignored while running.", address)
            return self._state
        self._state = cpu.edit_memory(self._state, address, value)
        return self._state

    def get_register_map(self):
        return cpu.get_register_map(self._state)
