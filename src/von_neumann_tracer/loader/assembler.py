# von_neumann_tracer/loader/assembler.py
"""
アセンブリソースの構文解析とバリデーション。

ソーステキストを行単位で解析し、ParsedInstructionの列に変換します。
不正な入力に対しては例外を発生させず、行番号付きのエラーメッセージとして報告します。
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from von_neumann_tracer.core.instruction import Instruction, OPCODES, NO_OPERAND_OPCODES

COMMENT_MARKER = "//"
_DECIMAL_RE = re.compile(r'^[+-]?\d+$')

# @intent:responsibility 解析済みの1行分の命令を保持します。
@dataclass(frozen=True)
class ParsedInstruction:
    """
    opcodeは大文字化済み。operand_textはオペランドの生のトークンで、
    10進整数として解釈できた場合のみoperandに値が入ります。
    line_numberはソース上の1始まりの行番号で、空行やコメント行も数えます。
    """
    opcode: str
    operand: Optional[int] = None
    original_text: str = ""
    operand_text: Optional[str] = None
    line_number: Optional[int] = None

    def to_instruction(self) -> Instruction:
        return Instruction(opcode=self.opcode, operand=self.operand)

# @intent:responsibility バリデーション結果 (可否とエラーメッセージの列) を保持します。
@dataclass(frozen=True)
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

# @intent:utility_function 10進整数のトークンを数値に変換します。解釈できない場合はNone。
def _parse_operand(token: Optional[str]) -> Optional[int]:
    if token is None or not _DECIMAL_RE.match(token):
        return None
    return int(token, 10)

# @intent:responsibility 1行を解析します。空行とコメント行はNoneを返します。
def _parse_line(line: str, line_number: int) -> Optional[ParsedInstruction]:
    line = line.strip()
    if not line or line.startswith(COMMENT_MARKER):
        return None

    # 3つ目以降のトークンは無視する
    parts = re.split(r'\s+', line)
    operand_text = parts[1] if len(parts) > 1 else None
    return ParsedInstruction(
        opcode=parts[0].upper(),
        operand=_parse_operand(operand_text),
        original_text=line,
        operand_text=operand_text,
        line_number=line_number,
    )

# @intent:responsibility ソーステキスト全体を解析し、ソース行順の命令列を返します。
# @intent:post-condition 返される順序がそのまま命令領域のアドレス順 (0から) になります。
def parse(source: str) -> List[ParsedInstruction]:
    parsed = []
    for line_number, line in enumerate(source.split("\n"), 1):
        instruction = _parse_line(line, line_number)
        if instruction is not None:
            parsed.append(instruction)
    return parsed

# @intent:responsibility 命令列を検証し、該当するすべてのエラーを収集します。
# @intent:rationale 最初のエラーで打ち切らず、全行について適用可能なすべてのチェックを行います。
#                  ジャンプ先やアドレスの範囲は検証しません。
def validate(instructions: Sequence[ParsedInstruction]) -> ValidationResult:
    """
    (a) 未知のオペコード、(b) HALT以外でのオペランド欠落、(c) 10進整数でないオペランド、
    をそれぞれ "Line N: ..." 形式で報告します。
    Nは空行やコメント行も数えたソース上の行番号です。line_numberがない場合は
    命令列内の1始まりの位置を使います。
    """
    errors: List[str] = []

    for index, instruction in enumerate(instructions):
        line = instruction.line_number or index + 1
        opcode = instruction.opcode

        if opcode not in OPCODES:
            errors.append(f'Line {line}: Invalid opcode "{opcode}"')

        has_operand = instruction.operand_text is not None or instruction.operand is not None
        if opcode not in NO_OPERAND_OPCODES and not has_operand:
            errors.append(f'Line {line}: Missing operand for "{opcode}"')

        if instruction.operand_text is not None and instruction.operand is None:
            errors.append(f'Line {line}: Invalid operand "{instruction.operand_text}"')

    return ValidationResult(errors=errors)
