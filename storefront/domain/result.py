# storefront/domain/result.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Union


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_DATA = "malformed_data"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Ok:
    """
    Operacja sie udala, items to aktualny stan listy.
    changed=False gdy nic nie zapisano (np. produkt juz byl na liscie)
    """

    items: List[Any] = field(default_factory=list)
    changed: bool = True

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """
    Operacja nie weszla w zycie.
    items - ostatni znany stan (np. mirror przy bledzie odczytu), moze byc pusty
    """

    kind: ErrorKind
    message: str
    items: List[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok, Err]
