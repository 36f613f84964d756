"""
Configuration management for the stack virtual machine.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict

import yaml

from stackvm.stackvm_error import StackVMConfigError


DEFAULT_OUTPUT_DELAY = 0.4

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StackVMConfig:
    """Runtime settings for a virtual machine run."""

    output_delay: float = DEFAULT_OUTPUT_DELAY
    trace: bool = False
    trace_file: str | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check that every setting holds a usable value."""
        if isinstance(self.output_delay, bool) or not isinstance(self.output_delay, (int, float)):
            raise StackVMConfigError(
                "output_delay must be a number of seconds",
                received=repr(self.output_delay),
                example="output_delay: 0.4"
            )

        if self.output_delay < 0:
            raise StackVMConfigError(
                "output_delay cannot be negative",
                received=repr(self.output_delay),
                expected="0 or a positive number of seconds"
            )

        if not isinstance(self.trace, bool):
            raise StackVMConfigError("trace must be true or false", received=repr(self.trace))

        if self.trace_file is not None and not isinstance(self.trace_file, str):
            raise StackVMConfigError("trace_file must be a path", received=repr(self.trace_file))

        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise StackVMConfigError(
                "log_level is not a recognised logging level",
                received=repr(self.log_level),
                expected=", ".join(_LOG_LEVELS)
            )

        self.log_level = self.log_level.upper()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StackVMConfig':
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in set(data) - known)
        if unknown:
            raise StackVMConfigError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                expected=", ".join(sorted(known))
            )

        return cls(**data)

    @classmethod
    def load_from_file(cls, config_path: str) -> 'StackVMConfig':
        """Load configuration from YAML file."""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)

            except yaml.YAMLError as e:
                raise StackVMConfigError(f"Invalid YAML in {config_path}", context=str(e)) from e

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise StackVMConfigError(
                f"Configuration in {config_path} must be a mapping",
                received=type(data).__name__
            )

        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
