# von_neumann_tracer/core/instruction.py
"""
Core Layer (命令モデル)

このモジュールは、命令とメモリセルを表す不変の値型を定義します。
メモリセルの内容は「整数」または「命令」のタグ付き共用体として扱います。
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union

# @intent:data_structure 有効なオペコードの固定集合。HALT以外はオペランドを必須とします。
OPCODES: Tuple[str, ...] = ("LOAD", "STORE", "ADD", "SUB", "JUMP", "JZ", "JNZ", "HALT")
NO_OPERAND_OPCODES: Tuple[str, ...] = ("HALT",)

# @intent:responsibility 1つの命令 (オペコードとアドレスオペランド) を保持します。
@dataclass(frozen=True)
class Instruction:
    """
    単一アドレス方式の命令。operandはHALTの場合のみ省略されます。
    """
    opcode: str
    operand: Optional[int] = None

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode
        return f"{self.opcode} {self.operand}"

# IRリセット時の空命令。どのオペコードにも一致しないため、実行時はNOP扱いになる。
EMPTY_INSTRUCTION = Instruction(opcode="")

MemoryContent = Union[int, Instruction]

# @intent:responsibility メモリセルの領域種別を定義します。初期化時にアドレス範囲で決定され、以後変化しません。
class CellKind(Enum):
    INSTRUCTION = "instruction"
    DATA = "data"

# @intent:responsibility 1つのメモリセルを不変に記録します。
@dataclass(frozen=True)
class MemoryCell:
    """
    アドレス、内容、領域種別、およびハイライト状態を持つメモリセル。
    is_activeは直近のステップでアクセスされたかどうかを示す表示用の補助情報です。
    """
    address: int
    content: MemoryContent = 0
    kind: CellKind = CellKind.DATA
    is_active: bool = False

    def with_content(self, content: MemoryContent) -> 'MemoryCell':
        return replace(self, content=content)

    def with_active(self, is_active: bool) -> 'MemoryCell':
        if self.is_active == is_active:
            return self
        return replace(self, is_active=is_active)

# @intent:responsibility メモリ内容を算術オペランドとして解釈します。
# @intent:rationale 命令や欠損値 (None) は0として読む、という全域的な変換規則を明示します。
def as_number(content: Optional[MemoryContent]) -> int:
    """
    セル内容を整数として返します。整数以外 (命令、アドレス範囲外のNone) は0です。
    """
    if isinstance(content, int):
        return content
    return 0

def is_instruction(content: Optional[MemoryContent]) -> bool:
    return isinstance(content, Instruction)
