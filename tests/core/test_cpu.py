# tests/core/test_cpu.py
"""
von_neumann_tracer.core.cpuモジュールの単体テスト。
フェッチ・デコード・実行の状態機械が1呼び出しにつき1フェーズだけ進むことを検証します。
"""
import pytest

from von_neumann_tracer.core.cpu import step, edit_memory, get_register_map
from von_neumann_tracer.core.instruction import Instruction, EMPTY_INSTRUCTION
from von_neumann_tracer.core.snapshot import initialize
from von_neumann_tracer.core.state import Phase
from von_neumann_tracer.loader.assembler import parse
from von_neumann_tracer.loader.loader import load
from von_neumann_tracer.transport import bus

# @intent:test_suite 実行エンジンの各フェーズ遷移と命令実行の検証。

def load_program(source, data_setup=()):
    return load(initialize(), parse(source), data_setup)

def run_steps(state, count):
    for _ in range(count):
        state = step(state)
    return state

def run_until_halt(state, limit=1000):
    for _ in range(limit):
        if state.is_halted:
            return state
        state = step(state)
    raise AssertionError("program did not halt")

class TestPhaseTransitions:
    """
    単一フェーズの遷移の単体テスト。
    """
    @pytest.fixture
    def loaded(self):
        return load_program("LOAD 10\nHALT", [(10, 5)])

    # @intent:test_case_idle idle→fetchはフェーズのみ変更し、データ移動を伴わないことを検証します。
    def test_idle_to_fetch(self, loaded):
        state = step(loaded)
        assert state.cpu.phase == Phase.FETCH
        assert state.memory == loaded.memory
        assert state.bus == loaded.bus
        assert state.cpu.pc == loaded.cpu.pc

    # @intent:test_case_fetch フェッチでMAR、MDR、IRが更新され、PCは変化しないことを検証します。
    def test_fetch(self, loaded):
        state = run_steps(loaded, 2)
        assert state.cpu.phase == Phase.DECODE
        assert state.cpu.mar == 0
        assert state.cpu.pc == 0
        assert state.cpu.ir == Instruction("LOAD", 10)
        assert state.cpu.mdr == Instruction("LOAD", 10)
        assert state.cpu.cu.active_control == ("Fetch",)
        assert state.bus.is_active
        assert (state.bus.source, state.bus.destination) == ("MDR", "IR")
        assert [cell.address for cell in state.memory if cell.is_active] == [0]

    # @intent:test_case_decode デコードは制御ユニットのみを遷移させることを検証します。
    def test_decode(self, loaded):
        fetched = run_steps(loaded, 2)
        decoded = step(fetched)
        assert decoded.cpu.phase == Phase.EXECUTE
        assert decoded.cpu.cu.active_control == ("Decode", "LOAD")
        assert decoded.cpu.replace(cu=fetched.cpu.cu) == fetched.cpu
        assert decoded.memory == fetched.memory
        assert decoded.bus == fetched.bus

    # @intent:test_case_execute 実行フェーズ後にフェッチへ戻り、PCが進むことを検証します。
    def test_execute_returns_to_fetch(self, loaded):
        state = run_steps(loaded, 4)
        assert state.cpu.phase == Phase.FETCH
        assert state.cpu.pc == 1
        assert state.cpu.acc == 5
        assert state.cpu.cu.active_control == ("Execute", "LOAD")

    # @intent:test_case_immutability stepが入力のスナップショットを変更しないことを検証します。
    def test_step_does_not_mutate_input(self, loaded):
        before = run_steps(loaded, 3)
        phase, acc, memory = before.cpu.phase, before.cpu.acc, before.memory
        after = step(before)
        assert after is not before
        assert before.cpu.phase == phase
        assert before.cpu.acc == acc
        assert before.memory is memory

class TestHalt:
    """
    HALTと停止状態の単体テスト。
    """
    # @intent:test_case_halt HALTの実行結果を検証します。
    def test_halt_effects(self):
        state = load_program("HALT").replace(is_running=True)
        state = run_steps(state, 4)
        assert state.is_halted
        assert not state.is_running
        assert state.cpu.phase == Phase.IDLE
        assert state.cpu.pc == 0
        assert state.cpu.cu.active_control == ("Execute", "HALT")
        assert state.program_output[-1] == "Program halted. Final ACC value: 0"

    # @intent:test_case_idempotence HALT後のstepは入力と同一の状態を返すことを検証します。
    def test_step_is_noop_after_halt(self):
        halted = run_until_halt(load_program("LOAD 10\nHALT", [(10, 3)]))
        assert step(halted) is halted
        assert step(step(halted)) == halted
        assert halted.program_output.count("Program halted. Final ACC value: 3") == 1

class TestCycleProperties:
    """
    命令サイクル全体に関する性質のテスト。
    """
    COUNTER = "LOAD 10\nSUB 11\nSTORE 10\nJNZ 1\nHALT"

    # @intent:test_case_phase_cycle フェーズが fetch→decode→execute の順に巡回することを検証します。
    def test_phase_cycle_closure(self):
        state = load_program(self.COUNTER, [(10, 3), (11, 1)])
        assert state.cpu.phase == Phase.IDLE
        expected_next = {
            Phase.IDLE: Phase.FETCH,
            Phase.FETCH: Phase.DECODE,
            Phase.DECODE: Phase.EXECUTE,
            Phase.EXECUTE: Phase.FETCH,
        }
        while not state.is_halted:
            previous = state
            state = step(state)
            if state.is_halted:
                assert previous.cpu.phase == Phase.EXECUTE
                assert state.cpu.phase == Phase.IDLE
            else:
                assert state.cpu.phase == expected_next[previous.cpu.phase]

    # @intent:test_case_pc_monotonicity 分岐成立時以外はPCが1ずつ進むことを検証します。
    def test_pc_advances_except_on_taken_jumps(self):
        state = load_program(self.COUNTER, [(10, 3), (11, 1)])
        executed = []
        while not state.is_halted:
            previous = state
            state = step(state)
            if previous.cpu.phase != Phase.EXECUTE:
                assert state.cpu.pc == previous.cpu.pc
                continue
            ir = previous.cpu.ir
            executed.append(ir.opcode)
            if ir.opcode == "HALT":
                assert state.cpu.pc == previous.cpu.pc
            elif ir.opcode == "JNZ" and previous.cpu.acc != 0:
                assert state.cpu.pc == ir.operand
            else:
                assert state.cpu.pc == previous.cpu.pc + 1
        assert executed.count("JNZ") == 3
        assert state.cpu.acc == 0

class TestRuntimeAnomalies:
    """
    範囲外アドレスや不正なメモリ内容に対する寛容な振る舞いのテスト。
    """
    # @intent:test_case_empty_fetch 命令でない内容をフェッチした場合、IRは変化せずNOPとして進むことを検証します。
    def test_fetch_of_data_cell_is_noop(self):
        state = run_steps(initialize(), 2)
        assert state.cpu.ir == EMPTY_INSTRUCTION
        assert state.cpu.mdr == 0
        assert (state.bus.source, state.bus.destination) == ("Memory", "MDR")
        decoded = step(state)
        assert decoded.cpu.cu.active_control == ("Decode", "")
        executed = step(decoded)
        assert executed.cpu.pc == 1
        assert executed.cpu.phase == Phase.FETCH
        assert executed.cpu.cu.active_control == ()
        assert not executed.bus.is_active

    # @intent:test_case_unknown_opcode 未知のオペコードはPCを進めるだけであることを検証します。
    def test_unknown_opcode(self):
        state = initialize().replace(memory=bus.write(initialize().memory, 0, Instruction("NOP", 3)))
        state = run_steps(state, 4)
        assert state.cpu.pc == 1
        assert state.cpu.acc == 0
        assert state.cpu.phase == Phase.FETCH

    # @intent:test_case_out_of_range_read 範囲外アドレスの読み出しは0になることを検証します。
    def test_out_of_range_load_reads_zero(self):
        state = load_program("LOAD 10\nLOAD 99\nHALT", [(10, 8)])
        state = run_steps(state, 7)
        assert state.cpu.acc == 0
        assert state.cpu.mar == 99
        assert not any(cell.is_active for cell in state.memory)

    # @intent:test_case_out_of_range_write 範囲外アドレスへの書き込みは無視されることを検証します。
    def test_out_of_range_store_is_dropped(self):
        state = load_program("LOAD 10\nSTORE 25\nHALT", [(10, 8)])
        before = run_steps(state, 4)
        after = run_steps(before, 3)
        assert [cell.content for cell in after.memory] == [cell.content for cell in before.memory]

    # @intent:test_case_instruction_as_operand 命令セルを算術オペランドとして読むと0になることを検証します。
    def test_instruction_cell_reads_as_zero(self):
        state = run_until_halt(load_program("LOAD 0\nADD 1\nHALT"))
        assert state.cpu.acc == 0

    # @intent:test_case_fetch_out_of_range 範囲外のPCからのフェッチではMDRが0になることを検証します。
    def test_fetch_beyond_memory(self):
        state = run_steps(load_program("JUMP 50"), 5)
        assert state.cpu.pc == 50
        assert state.cpu.phase == Phase.DECODE
        assert state.cpu.mdr == 0
        assert state.bus.data is None
        assert state.cpu.ir == Instruction("JUMP", 50)

class TestEditMemory:
    """
    edit_memoryの単体テスト。
    """
    # @intent:test_case_edit 指定セルのみが置き換えられることを検証します。
    def test_edit_replaces_only_target(self):
        state = load_program("HALT", [(10, 1), (11, 2)])
        edited = edit_memory(state, 10, 42)
        assert bus.read(edited.memory, 10) == 42
        assert bus.read(edited.memory, 11) == 2
        assert bus.read(state.memory, 10) == 1

    # @intent:test_case_edit_missing 存在しないアドレスの編集は何もしないことを検証します。
    def test_edit_missing_address(self):
        state = initialize()
        assert edit_memory(state, 20, 5) is state
        assert edit_memory(state, -1, 5) is state

    # @intent:test_case_edit_instruction 命令セルを整数で上書きできることを検証します。
    def test_edit_instruction_cell(self):
        state = edit_memory(load_program("LOAD 10\nHALT"), 0, 7)
        assert bus.read(state.memory, 0) == 7
        fetched = run_steps(state, 2)
        assert fetched.cpu.ir == EMPTY_INSTRUCTION
        assert fetched.cpu.mdr == 7

class TestRegisterMap:
    # @intent:test_case_register_map 表示用のレジスタマップを検証します。
    def test_register_map(self):
        state = run_steps(load_program("LOAD 10\nHALT", [(10, 9)]), 4)
        registers = get_register_map(state)
        assert registers == {"PC": 1, "IR": "LOAD 10", "MAR": 10, "MDR": "9", "ACC": 9}
