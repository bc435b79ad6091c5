"""Function declaration models shared across the analyzer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dispatchscan.core.errors import InvalidSpecification


class FunctionInput(BaseModel):
    """One declared parameter. Only ``type`` is read; other keys are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str


class FunctionSpec(BaseModel):
    """A callable entry point: name plus ordered parameter types."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    inputs: tuple[FunctionInput, ...]

    @property
    def types(self) -> list[str]:
        return [param.type for param in self.inputs]

    @classmethod
    def from_abi(cls, entry: Any) -> FunctionSpec:
        """Build a spec from an ABI mapping such as
        ``{"name": "transfer", "inputs": [{"type": "address"}, ...]}``.

        Raises:
            InvalidSpecification: If the name is missing/empty, ``inputs`` is
                not a list, or an input lacks a string ``type``
        """
        if isinstance(entry, FunctionSpec):
            return entry
        if not isinstance(entry, Mapping):
            raise InvalidSpecification(
                f"Function declaration must be a mapping, got {type(entry).__name__}"
            )

        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise InvalidSpecification("Function declaration is missing a name")

        inputs = entry.get("inputs")
        if not isinstance(inputs, (list, tuple)):
            raise InvalidSpecification(f"Function '{name}' does not declare an inputs list")

        try:
            params = tuple(FunctionInput.model_validate(param) for param in inputs)
        except ValidationError as exc:
            raise InvalidSpecification(
                f"Function '{name}' has a malformed input: {exc.errors()[0]['msg']}"
            ) from exc
        return cls(name=name, inputs=params)


@dataclass(frozen=True)
class FunctionCheck:
    """Outcome of scanning bytecode for one declared function."""

    signature: str
    selector: str  # 8 lowercase hex chars, no 0x
    matched: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.signature,
            "selector": f"0x{self.selector}",
            "matched": self.matched,
        }
