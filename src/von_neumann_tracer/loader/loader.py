# von_neumann_tracer/loader/loader.py
"""
プログラムローダーモジュール。
解析済みの命令列と初期データを、新しく初期化したシミュレータ状態へ配置します。
"""
import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from von_neumann_tracer.common.types import DataSetupEntry, INSTRUCTION_REGION_SIZE
from von_neumann_tracer.core.snapshot import SimulatorState, initialize
from von_neumann_tracer.loader.assembler import ParsedInstruction, ValidationResult, parse, validate
from von_neumann_tracer.transport import bus

logger = logging.getLogger(__name__)

DataSetup = Union[Dict[int, int], Iterable[Tuple[int, int]]]

LOADED_MESSAGE = "Program loaded. {count} instructions."

# @intent:utility_function 辞書 {address: value} や組の列で与えられた初期データをDataSetupEntryの列に正規化します。
def normalize_data_setup(data_setup) -> Tuple[DataSetupEntry, ...]:
    if isinstance(data_setup, dict):
        items = data_setup.items()
    else:
        items = data_setup
    return tuple(DataSetupEntry(int(address), int(value)) for address, value in items)

# @intent:responsibility 命令列と初期データを新しい状態に機械的に配置します。
# @intent:rationale 渡されたstateの内容は引き継がず、メモリサイズのみを採用して常に初期化から構築します。
def load(state: Optional[SimulatorState], instructions: Sequence[ParsedInstruction],
         data_setup: DataSetup = ()) -> SimulatorState:
    """
    先頭10命令をアドレス0..9へ書き込み (それ以降は破棄)、data_setupの各組で
    該当セルの内容を上書きし、ロードした命令数を出力ログに追記します。
    対応するセルが存在しないアドレスの組は無視されます。
    """
    new_state = initialize(state.memory_size) if state is not None else initialize()
    memory = new_state.memory

    for address, instruction in enumerate(instructions[:INSTRUCTION_REGION_SIZE]):
        memory = bus.write(memory, address, instruction.to_instruction())

    for address, value in normalize_data_setup(data_setup):
        memory = bus.write(memory, address, value)

    if len(instructions) > INSTRUCTION_REGION_SIZE:
        logger.warning("Only the first %d of %d instructions fit in instruction memory.",
                       INSTRUCTION_REGION_SIZE, len(instructions))
    logger.info("Program loaded: %d instructions.", len(instructions))

    return new_state.replace(memory=memory).with_output(
        LOADED_MESSAGE.format(count=len(instructions)))

# @intent:responsibility アセンブリソースを解析・検証し、妥当であればロードします。
# @intent:post-condition エラーがある場合はロードを拒否し、入力のstateをそのまま返します。
def load_source(state: SimulatorState, source: str,
                data_setup: DataSetup = ()) -> Tuple[SimulatorState, ValidationResult]:
    instructions = parse(source)
    result = validate(instructions)
    if not result.valid:
        logger.warning("Program rejected with %d error(s).", len(result.errors))
        return state, result
    return load(state, instructions, data_setup), result

