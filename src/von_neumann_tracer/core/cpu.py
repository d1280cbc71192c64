# von_neumann_tracer/core/cpu.py
"""
Core Layer (実行エンジン)

このモジュールは、フェッチ・デコード・実行の状態機械を提供します。
step()は1回の呼び出しでちょうど1フェーズだけ状態を進める純粋関数であり、
入力のスナップショットを変更せず、新しいスナップショットを返します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from typing import Callable, Dict

from von_neumann_tracer.core.instruction import is_instruction
from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.core.state import Phase
from von_neumann_tracer.instructions import execute_instruction
from von_neumann_tracer.transport import bus
from von_neumann_tracer.transport.bus import BusState

PhaseFunc = Callable[[SimulatorState], SimulatorState]

# @intent:responsibility リセット/ロード直後の命令サイクルを開始します。データ移動はありません。
def _start_cycle(state: SimulatorState) -> SimulatorState:
    return state.replace(cpu=state.cpu.with_control(Phase.FETCH, *state.cpu.cu.active_control))

# @intent:responsibility フェッチ: PC→MAR, Memory[MAR]→MDR, (命令であれば) MDR→IR。
# @intent:rationale バスは1スロットのため、最後の転送のみがスナップショットに残ります。
#                  PCの更新はここでは行わず、実行フェーズで行います。
def _fetch(state: SimulatorState) -> SimulatorState:
    address = state.cpu.pc
    content = bus.read(state.memory, address)

    cpu = state.cpu.replace(mar=address, mdr=content if content is not None else 0)
    transfer = BusState.transfer(content, "Memory", "MDR")
    if is_instruction(content):
        cpu = cpu.replace(ir=content)
        transfer = BusState.transfer(content, "MDR", "IR")

    return state.replace(
        cpu=cpu.with_control(Phase.DECODE, "Fetch"),
        memory=bus.highlight(state.memory, address),
        bus=transfer,
    )

# @intent:responsibility デコード: 制御ユニットの遷移のみ。レジスタとメモリは変更しません。
def _decode(state: SimulatorState) -> SimulatorState:
    return state.replace(cpu=state.cpu.with_control(Phase.EXECUTE, "Decode", state.cpu.ir.opcode))

# @intent:responsibility 実行: IRのオペコードに応じた命令ハンドラへディスパッチします。
def _execute(state: SimulatorState) -> SimulatorState:
    return execute_instruction(state)

PHASE_MAP: Dict[Phase, PhaseFunc] = {
    Phase.IDLE: _start_cycle,
    Phase.FETCH: _fetch,
    Phase.DECODE: _decode,
    Phase.EXECUTE: _execute,
}

# @intent:responsibility シミュレータを1フェーズ進め、その結果のスナップショットを返します。
# @intent:pre-condition stateは有効なSimulatorStateである必要があります。
# @intent:post-condition HALT済みの状態に対しては、入力と同一のオブジェクトを返します（冪等）。
def step(state: SimulatorState) -> SimulatorState:
    """
    現在のフェーズに応じて idle→fetch→decode→execute→fetch… と1段階だけ進めます。
    例外は発生させず、範囲外アドレスなどの異常は安全な既定値に変換されます。
    """
    if state.is_halted:
        return state
    return PHASE_MAP[state.cpu.cu.phase](state)

# @intent:responsibility 指定アドレスのセル内容を整数で置き換えます（ドライバ向けの編集操作）。
# @intent:rationale 範囲チェックや型チェックは行いません。存在しないアドレスの場合は何もしません。
def edit_memory(state: SimulatorState, address: int, value: int) -> SimulatorState:
    if bus.find_cell(state.memory, address) is None:
        return state
    return state.replace(memory=bus.write(state.memory, address, value))

# @intent:responsibility 現在のレジスタ値を辞書形式で返す。
# @intent:rationale UIがCPUの内部構造を知らなくても値を表示できるようにするために使用される。
def get_register_map(state: SimulatorState) -> Dict[str, object]:
    cpu = state.cpu
    return {
        "PC": cpu.pc,
        "IR": str(cpu.ir),
        "MAR": cpu.mar,
        "MDR": str(cpu.mdr),
        "ACC": cpu.acc,
    }
