# tests/config/test_examples.py
"""
von_neumann_tracer.config.examplesモジュールの単体テスト。
組み込みサンプルプログラムが妥当であり、期待通りに動作することを検証します。
"""
import pytest

from von_neumann_tracer.config.examples import EXAMPLE_PROGRAMS, find_example
from von_neumann_tracer.config.models import ExampleProgram
from von_neumann_tracer.core.cpu import step
from von_neumann_tracer.core.snapshot import initialize
from von_neumann_tracer.loader.assembler import parse, validate
from von_neumann_tracer.loader.loader import load
from von_neumann_tracer.transport import bus

# @intent:test_suite 読み取り専用のサンプルプログラム一覧の検証。

class TestExampleCatalog:
    @pytest.mark.parametrize("program", EXAMPLE_PROGRAMS, ids=lambda p: p.name)
    def test_examples_are_valid(self, program):
        instructions = parse(program.code)
        assert validate(instructions).valid
        assert len(instructions) <= 10

    def test_find_example(self):
        assert find_example("Counter").name == "Counter"
        with pytest.raises(KeyError):
            find_example("Missing")

    # @intent:test_case_extra 追加のプログラムが組み込みより優先されることを検証します。
    def test_find_example_prefers_extra(self):
        custom = ExampleProgram(name="Counter", code="HALT")
        assert find_example("Counter", [custom]) is custom

    # @intent:test_case_fibonacci Fibonacciは停止せずに数列を計算し続けることを検証します。
    def test_fibonacci_progresses(self):
        program = find_example("Fibonacci")
        state = load(initialize(), parse(program.code), program.memory_setup)
        # idle→fetch + 8命令 × 3フェーズ = 1周
        for _ in range(1 + 8 * 3 * 5):
            state = step(state)
        assert not state.is_halted
        assert bus.read(state.memory, 10) == 5
        assert bus.read(state.memory, 11) == 8
