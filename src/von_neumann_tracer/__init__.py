# src/von_neumann_tracer/__init__.py
"""
Von Neumann Tracer

単一アドレス・累算器型の教育用CPUシミュレータ。
実行エンジンの公開インターフェースをまとめて提供します。
"""
from .core.snapshot import SimulatorState, initialize
from .core.cpu import step, edit_memory
from .loader.assembler import parse, validate
from .loader.loader import load
