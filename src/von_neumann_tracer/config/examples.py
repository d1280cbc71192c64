# von_neumann_tracer/config/examples.py
"""
組み込みのサンプルプログラム一覧。

実行エンジンの責務ではなく、ドライバが提示する読み取り専用のテーブルです。
"""
from typing import Iterable, Optional, Tuple

from von_neumann_tracer.common.types import DataSetupEntry
from .models import ExampleProgram

SIMPLE_ADDITION = ExampleProgram(
    name="Simple Addition",
    description="Adds two numbers stored in memory",
    code="""// Load the first number from memory address 10
LOAD 10
// Add the second number from memory address 11
ADD 11
// Store the result in memory address 12
STORE 12
// Halt the program
HALT""",
    memory_setup=(DataSetupEntry(10, 5), DataSetupEntry(11, 7)),
)

COUNTER = ExampleProgram(
    name="Counter",
    description="A simple counter that counts down from 5 to 0",
    code="""// Load counter value from memory
LOAD 10
// Subtract 1 from the counter (address 1)
SUB 11
// Store the updated counter
STORE 10
// If counter is not zero, jump back to the subtraction
JNZ 1
// Halt when counter reaches zero
HALT""",
    memory_setup=(DataSetupEntry(10, 5), DataSetupEntry(11, 1)),
)

# 終了しない (JUMP 0 で先頭へ戻り続ける) プログラム。
FIBONACCI = ExampleProgram(
    name="Fibonacci",
    description="Calculate Fibonacci numbers",
    code="""// acc = F(n) + F(n-1)
LOAD 11
ADD 10
STORE 12
// shift F(n) into address 10
LOAD 11
STORE 10
// shift the sum into address 11
LOAD 12
STORE 11
// repeat forever
JUMP 0""",
    memory_setup=(DataSetupEntry(11, 1),),
)

EXAMPLE_PROGRAMS: Tuple[ExampleProgram, ...] = (SIMPLE_ADDITION, COUNTER, FIBONACCI)

# @intent:responsibility 名前でサンプルプログラムを検索します。組み込み一覧より追加分を優先します。
def find_example(name: str, extra: Optional[Iterable[ExampleProgram]] = None) -> ExampleProgram:
    for program in tuple(extra or ()) + EXAMPLE_PROGRAMS:
        if program.name == name:
            return program
    raise KeyError(f"Unknown example program: {name}")
