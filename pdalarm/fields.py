from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List

TEXT    = "text"
BOOLEAN = "boolean"

@dataclass(frozen=True)
class ConfigurationField:
    name:          str
    human_name:    str
    default_value: Any
    description:   str
    optional:      bool = True
    field_type:    str  = TEXT

def text_field(name: str, human_name: str, default_value: str, description: str, optional: bool = True) -> ConfigurationField:
    return ConfigurationField(name, human_name, default_value, description, optional, TEXT)

def boolean_field(name: str, human_name: str, default_value: bool, description: str) -> ConfigurationField:
    # a boolean always has a value, so it is never mandatory
    return ConfigurationField(name, human_name, default_value, description, True, BOOLEAN)

class ConfigurationRequest:
    """Ordered description of the options a callback asks the host to collect."""

    def __init__(self) -> None:
        self._fields: Dict[str, ConfigurationField] = {}

    def add_field(self, f: ConfigurationField) -> "ConfigurationRequest":
        self._fields[f.name] = f
        return self

    def get_field(self, name: str) -> ConfigurationField:
        return self._fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[ConfigurationField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def defaults(self) -> Dict[str, Any]:
        return {f.name: f.default_value for f in self}

    def as_list(self) -> List[Dict[str, Any]]:
        return [asdict(f) for f in self]
