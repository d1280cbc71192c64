# von_neumann_tracer/instructions/maps.py
"""
命令マップと実行ディスパッチ。
"""
from dataclasses import replace
from typing import Dict

from von_neumann_tracer.core.snapshot import SimulatorState
from von_neumann_tracer.core.instruction import NO_OPERAND_OPCODES
from von_neumann_tracer.core.state import Phase
from von_neumann_tracer.instructions import load, alu, control
from von_neumann_tracer.instructions.base import ExecFunc

EXECUTE_MAP: Dict[str, ExecFunc] = {
    "LOAD": load.load,
    "STORE": load.store,
    "ADD": alu.add,
    "SUB": alu.sub,
    "JUMP": control.jump,
    "JZ": control.jz,
    "JNZ": control.jnz,
    "HALT": control.halt,
}

# @intent:responsibility IRの命令を実行し、新しい状態を返す。
# @intent:rationale 未知のオペコード、およびオペランドを欠いた命令は、PCを進めるだけのNOPとして扱う。
#                  上流のバリデーションを通過したプログラムでは発生しない。
def execute_instruction(state: SimulatorState) -> SimulatorState:
    instruction = state.cpu.ir
    handler = EXECUTE_MAP.get(instruction.opcode)

    if handler is not None and instruction.opcode in NO_OPERAND_OPCODES:
        return handler(state, 0)
    if handler is not None and instruction.operand is not None:
        return handler(state, instruction.operand)

    cpu = state.cpu.replace(pc=state.cpu.pc + 1).with_control(Phase.FETCH)
    return state.replace(cpu=cpu, bus=replace(state.bus, is_active=False))
