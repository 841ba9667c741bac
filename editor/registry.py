"""Command registry"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    """One command: names, help text and its generator function"""
    global_name: str
    local_name: str
    description: str
    group: str
    run: Callable


class CommandRegistry:
    """Lookup of commands by full name or alias"""

    def __init__(self):
        self._commands: Dict[str, CommandSpec] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, spec: CommandSpec) -> CommandSpec:
        names = {spec.global_name.upper(), spec.local_name.upper()}
        for name in names:
            if name in self._commands or name in self._aliases:
                raise ValueError(f"Command name '{name}' is already registered")

        self._commands[spec.global_name.upper()] = spec
        if spec.local_name and spec.local_name.upper() != spec.global_name.upper():
            self._aliases[spec.local_name.upper()] = spec.global_name.upper()
        logger.debug(f"Registered command {spec.global_name} ({spec.local_name})")
        return spec

    def find(self, name: str) -> Optional[CommandSpec]:
        """Find a command by global name or alias, ignoring case"""
        key = (name or "").strip().upper()
        if key in self._commands:
            return self._commands[key]
        if key in self._aliases:
            return self._commands[self._aliases[key]]
        return None

    def search(self, prefix: str) -> List[CommandSpec]:
        """Commands whose name or alias starts with prefix (autocomplete)"""
        prefix = (prefix or "").strip().upper()
        if not prefix:
            return []
        return [spec for spec in self.all_commands()
                if spec.global_name.upper().startswith(prefix)
                or spec.local_name.upper().startswith(prefix)]

    def all_commands(self) -> List[CommandSpec]:
        return sorted(self._commands.values(), key=lambda spec: spec.global_name)

    def groups(self) -> Dict[str, List[CommandSpec]]:
        grouped: Dict[str, List[CommandSpec]] = {}
        for spec in self.all_commands():
            grouped.setdefault(spec.group, []).append(spec)
        return grouped

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __len__(self) -> int:
        return len(self._commands)
