"""Error and warning definitions for the asset encoders.

Only :class:`EmptyInputError` aborts an encode. Everything else is recorded
as a :class:`PackWarning` and logged; the encoder degrades (truncate,
zero-fill, skip) and carries on.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_EMPTY_INPUT = "E_EMPTY_INPUT"
E_SPEC = "E_SPEC"

W_NAME_TOO_LONG = "W_NAME_TOO_LONG"
W_DIMENSION_SNIFF = "W_DIMENSION_SNIFF"
W_FETCH_FAILED = "W_FETCH_FAILED"


@dataclass
class PackError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class EmptyInputError(PackError):
    pass


class SpecError(PackError):
    pass


@dataclass(slots=True)
class PackWarning:
    code: str
    message: str
    context: Dict[str, Any]

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


# Factories for the non-fatal anomalies; these are logged, never raised.
def name_too_long(name: str, limit: int) -> PackWarning:
    return PackWarning(
        W_NAME_TOO_LONG,
        f'Name "{name}" exceeds {limit} bytes and will be truncated',
        {"name": name, "limit": limit},
    )


def dimension_sniff_failure(name: str, reason: str) -> PackWarning:
    return PackWarning(
        W_DIMENSION_SNIFF,
        f"Could not read image dimensions of {name}: {reason}",
        {"name": name},
    )


def partial_fetch_failure(
    model_name: str, file_name: str, reason: str
) -> PackWarning:
    return PackWarning(
        W_FETCH_FAILED,
        f"Failed to fetch {model_name}/{file_name}: {reason}",
        {"model": model_name, "file": file_name},
    )


def empty_input(what: str) -> EmptyInputError:
    return EmptyInputError(code=E_EMPTY_INPUT, message=f"No {what} to pack")


def spec_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> SpecError:
    return SpecError(code=E_SPEC, message=message, context=context)


__all__ = [
    "PackError",
    "EmptyInputError",
    "SpecError",
    "PackWarning",
    "name_too_long",
    "dimension_sniff_failure",
    "partial_fetch_failure",
    "empty_input",
    "spec_error",
    "E_EMPTY_INPUT",
    "E_SPEC",
    "W_NAME_TOO_LONG",
    "W_DIMENSION_SNIFF",
    "W_FETCH_FAILED",
]
