"""
Field values and records.

A FieldValue is a two-case tagged value: either a string or a boolean,
chosen by the field's compiled type (generated timestamps are always
strings). A Record is the resolved name -> value mapping of one request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from datamgr.schemas.compiled import FieldType


@dataclass(frozen=True)
class FieldValue:
    """
    A resolved field value.

    Attributes:
        kind: Which variant is held
        value: The str (STRING) or bool (BOOL) payload
    """

    kind: FieldType
    value: str | bool

    def __post_init__(self) -> None:
        expected = bool if self.kind is FieldType.BOOL else str
        if type(self.value) is not expected:
            raise TypeError(
                f"{self.kind.value} field value must be {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )

    @classmethod
    def string(cls, value: str) -> FieldValue:
        return cls(FieldType.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> FieldValue:
        return cls(FieldType.BOOL, value)

    @classmethod
    def zero(cls, kind: FieldType) -> FieldValue:
        """Zero value of a field type ("" or False)."""
        if kind is FieldType.BOOL:
            return cls.boolean(False)
        return cls.string("")

    def to_plain(self) -> str | bool:
        return self.value


@dataclass
class Record:
    """
    Resolved fields of one submission.

    Created fresh for every request and never shared between requests.
    """

    values: dict[str, FieldValue] = field(default_factory=dict)

    def set(self, name: str, value: FieldValue) -> None:
        self.values[name] = value

    def get(self, name: str) -> FieldValue | None:
        return self.values.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping used for path templates and file encoding."""
        return {name: v.to_plain() for name, v in self.values.items()}

    @classmethod
    def from_plain(cls, data: Mapping[str, str | bool]) -> Record:
        record = cls()
        for name, value in data.items():
            if isinstance(value, bool):
                record.set(name, FieldValue.boolean(value))
            else:
                record.set(name, FieldValue.string(value))
        return record
