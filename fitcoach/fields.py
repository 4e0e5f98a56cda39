"""
Guards and field parsers shared by the plan schemas.

AI output is untrusted: required fields reject their entity, optional fields
are dropped when mistyped, and list fields keep only the elements that pass
their own validation.
"""

import math
from typing import Annotated, Any, List, Optional, Type, Union

import pydantic
from pydantic import AfterValidator, BeforeValidator

from .logging import get_logger

logger = get_logger(__name__)

Number = Union[int, float]


# ---------- guards ----------
def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


# ---------- field parsers ----------
def to_string_list(value: Any) -> List[str]:
    """Keep the non-blank strings of a list, in order and untrimmed."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if is_text(entry)]


def _required_text(value: Any) -> Any:
    if not is_text(value):
        raise ValueError("expected non-blank text")
    return value


def _required_number(value: Any) -> Any:
    if not is_number(value):
        raise ValueError("expected a finite number")
    return value


def _optional_text(value: Any) -> Optional[str]:
    return value if is_string(value) else None


def _optional_number(value: Any) -> Optional[Number]:
    return value if is_number(value) else None


def _number_or_zero(value: Any) -> Number:
    return value if is_number(value) else 0


def _optional_string_list(value: Any) -> Optional[List[str]]:
    return to_string_list(value) or None


def _non_empty(value: list) -> list:
    if not value:
        raise ValueError("no valid entries")
    return value


RequiredText = Annotated[str, BeforeValidator(_required_text)]
RequiredNumber = Annotated[Number, BeforeValidator(_required_number)]
OptionalText = Annotated[Optional[str], BeforeValidator(_optional_text)]
OptionalNumber = Annotated[Optional[Number], BeforeValidator(_optional_number)]
DefaultNumber = Annotated[Number, BeforeValidator(_number_or_zero)]
TextList = Annotated[List[str], BeforeValidator(to_string_list)]
OptionalTextList = Annotated[Optional[List[str]], BeforeValidator(_optional_string_list)]
RequiredTextList = Annotated[
    List[str], BeforeValidator(to_string_list), AfterValidator(_non_empty)
]


def keep_valid(model: Type[pydantic.BaseModel]) -> BeforeValidator:
    """Filter a raw list down to the entries that validate as ``model``."""

    def _keep(value: Any) -> list:
        if not isinstance(value, list):
            return []
        kept = []
        for index, entry in enumerate(value):
            try:
                kept.append(model.model_validate(entry))
            except pydantic.ValidationError as exc:
                logger.debug(
                    "dropping %s[%s]: %s", model.__name__, index, exc.errors()[0]["msg"]
                )
        return kept

    return BeforeValidator(_keep)


require_entries = AfterValidator(_non_empty)
