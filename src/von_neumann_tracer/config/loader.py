import logging
import yaml
from typing import Dict, Any, List

from von_neumann_tracer.common.types import DataSetupEntry
from .models import SimulatorConfig, ExampleProgram

logger = logging.getLogger(__name__)

class ConfigLoader:
    def load_from_file(self, path: str) -> SimulatorConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        logger.info("Loaded simulator config from %s", path)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SimulatorConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SimulatorConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        defaults = SimulatorConfig()
        config = SimulatorConfig(
            memory_size=self._parse_int(data.get("memory_size", defaults.memory_size)),
            execution_speed=self._parse_int(data.get("execution_speed", defaults.execution_speed)),
            min_speed=self._parse_int(data.get("min_speed", defaults.min_speed)),
            max_speed=self._parse_int(data.get("max_speed", defaults.max_speed)),
            max_run_steps=self._parse_int(data.get("max_run_steps", defaults.max_run_steps)),
            programs=self._parse_programs(data.get("programs", [])),
        )

        if config.memory_size <= 0:
            raise ValueError(f"memory_size must be positive: {config.memory_size}")
        if not 0 < config.min_speed <= config.max_speed:
            raise ValueError(f"Invalid speed range: {config.min_speed}-{config.max_speed}")
        if config.execution_speed <= 0:
            raise ValueError(f"execution_speed must be positive: {config.execution_speed}")
        return config

    # @intent:responsibility ユーザー定義のサンプルプログラム一覧を解析します。
    def _parse_programs(self, programs_data: List[Dict[str, Any]]) -> List[ExampleProgram]:
        programs = []
        for program_data in programs_data or []:
            if "name" not in program_data or "code" not in program_data:
                raise ValueError(f"Program entry requires 'name' and 'code': {program_data}")
            memory_setup = tuple(
                DataSetupEntry(self._parse_int(entry.get("address")), self._parse_int(entry.get("value")))
                for entry in program_data.get("memory_setup", [])
            )
            programs.append(ExampleProgram(
                name=program_data["name"],
                code=program_data["code"],
                description=program_data.get("description", ""),
                memory_setup=memory_setup,
            ))
        return programs

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            value = value.strip()
            if value.lower().startswith(("0x", "-0x")):
                return int(value, 16)
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid integer format: {value}")
        raise ValueError(f"Invalid integer format: {value}")
