# von_neumann_tracer/instructions/__init__.py
"""
命令セット (LOAD, STORE, ADD, SUB, JUMP, JZ, JNZ, HALT) の実行ハンドラ。
"""
from .maps import EXECUTE_MAP, execute_instruction
