"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスや定数を定義します。
"""
from typing import NamedTuple

# @intent:data_structure メモリ構成の既定値。命令領域はアドレス0から始まる固定長です。
DEFAULT_MEMORY_SIZE = 20
INSTRUCTION_REGION_SIZE = 10

# @intent:data_structure ロード時に初期化するデータセルの指定 (アドレスと整数値の組)。
# Loader, Config, Debuggerなど複数のレイヤーで共通して使用されます。
class DataSetupEntry(NamedTuple):
    address: int
    value: int
