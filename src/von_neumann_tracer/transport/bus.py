# von_neumann_tracer/transport/bus.py
"""
Transport Layer (共通バスとメモリアクセス)

このモジュールは、CPUとメモリを結ぶ単一データパスの状態と、
命令・データ共有メモリへの読み書きを担う関数群を提供します。
メモリは不変のセル列 (タプル) として扱い、書き込みは新しい列を返します。
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from von_neumann_tracer.core.instruction import MemoryCell, MemoryContent

Memory = Tuple[MemoryCell, ...]

# @intent:responsibility 直近のバス転送を1スロットだけ記録します。
# @intent:rationale バスは転送履歴を持たず、1フェーズ内の複数転送のうち最後のものだけが観測可能です。
@dataclass(frozen=True)
class BusState:
    """
    バス上で行われた直近の転送 (送信元、送信先、データ) を記録するデータクラス。
    """
    is_active: bool = False
    data: Optional[MemoryContent] = None
    source: str = ""
    destination: str = ""

    # @intent:responsibility 転送を表す新しいBusStateを生成します。
    @classmethod
    def transfer(cls, data: Optional[MemoryContent], source: str, destination: str) -> 'BusState':
        return cls(is_active=True, data=data, source=source, destination=destination)

IDLE_BUS = BusState()

# @intent:responsibility 指定されたアドレスのセルを線形探索します。
# @intent:post-condition 見つからない場合はNoneを返します（例外は発生させません）。
def find_cell(memory: Memory, address: int) -> Optional[MemoryCell]:
    for cell in memory:
        if cell.address == address:
            return cell
    return None

# @intent:responsibility 指定されたアドレスの内容を読み出します。範囲外はNoneです。
def read(memory: Memory, address: int) -> Optional[MemoryContent]:
    cell = find_cell(memory, address)
    return cell.content if cell is not None else None

# @intent:responsibility 指定されたアドレスのセル内容を置き換えた新しいメモリを返します。
# @intent:rationale 範囲外アドレスへの書き込みはエラーにせず、黙って無視します。
def write(memory: Memory, address: int, content: MemoryContent) -> Memory:
    """
    アドレスが一致するセルの内容だけを置き換えます。他のセルはそのまま共有されます。
    """
    return tuple(
        cell.with_content(content) if cell.address == address else cell
        for cell in memory
    )

# @intent:responsibility アクセスされたセルだけをアクティブにし、他のセルのハイライトを解除します。
def highlight(memory: Memory, address: Optional[int]) -> Memory:
    return tuple(cell.with_active(cell.address == address) for cell in memory)
