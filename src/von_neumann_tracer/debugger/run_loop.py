# von_neumann_tracer/debugger/run_loop.py
"""
タイマー駆動の連続実行ループ。

QTimerのティックごとにDebuggerを1フェーズ進めます。ティックは1回ずつ完結するため
重なることはなく、実行停止・HALT・リセット・破棄のいずれの経路でも
タイマーは必ず停止されます。
"""
import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.debugger.debugger import Debugger

logger = logging.getLogger(__name__)

# @intent:responsibility Debuggerの連続実行をQtのイベントループ上でスケジュールします。
class RunController(QObject):
    """
    Run/Pause/Step/Resetの各操作を受け付け、実行中はexecution_speed (ms) 間隔で
    tick()を呼び出します。UIはstate_changedシグナルで新しいスナップショットを受け取ります。
    """
    state_changed = Signal(object)
    halted = Signal(object)

    def __init__(self, debugger: Debugger, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._debugger = debugger
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)

    @property
    def debugger(self) -> Debugger:
        return self._debugger

    def is_active(self) -> bool:
        return self._timer.isActive()

    # @intent:responsibility 実行フラグとHALT状態に合わせてタイマーを開始/停止します。
    def _sync_timer(self) -> None:
        state = self._debugger.state
        if state.is_running and not state.is_halted:
            self._timer.setInterval(state.execution_speed)
            if not self._timer.isActive():
                self._timer.start()
        elif self._timer.isActive():
            self._timer.stop()
            logger.debug("Run loop stopped.")

    def _publish(self, state: SimulatorState) -> None:
        self.state_changed.emit(state)

    @Slot()
    def _on_tick(self) -> None:
        was_halted = self._debugger.is_halted
        state = self._debugger.tick()
        self._sync_timer()
        self._publish(state)
        if state.is_halted and not was_halted:
            self.halted.emit(state)

    def start(self) -> None:
        self._publish(self._debugger.set_running(True))
        self._sync_timer()

    def pause(self) -> None:
        self._publish(self._debugger.pause())
        self._sync_timer()

    def toggle_run(self) -> None:
        if self._debugger.is_running:
            self.pause()
        else:
            self.start()

    # @intent:responsibility ステップ実行。実行中は無効です。
    def step(self) -> None:
        if self._debugger.is_running:
            return
        was_halted = self._debugger.is_halted
        state = self._debugger.step()
        self._publish(state)
        if state.is_halted and not was_halted:
            self.halted.emit(state)

    def reset(self) -> None:
        self._timer.stop()
        self._publish(self._debugger.reset())

    def set_speed(self, speed: int) -> None:
        self._publish(self._debugger.set_speed(speed))
        self._sync_timer()

    # @intent:responsibility コントローラ破棄時にタイマーを確実に停止します。
    def shutdown(self) -> None:
        self._timer.stop()
        if self._debugger.is_running:
            self._debugger.pause()
