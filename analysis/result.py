"""Optionale Ergebnisse: Present(value) | Absent.

"Kein Treffer" ist bei einigen Abfragen ein normales Ergebnis und
wird deshalb als Wert zurückgegeben, nicht als Ausnahme.
"""

from typing import Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Present(BaseModel, Generic[T]):
    """Ein vorhandener Ergebniswert."""

    model_config = ConfigDict(frozen=True)

    value: T

    @property
    def is_present(self) -> bool:
        return True

    def value_or(self, default):
        return self.value


class Absent(BaseModel):
    """Kein Ergebnis (z.B. keine passende Note)."""

    model_config = ConfigDict(frozen=True)

    @property
    def is_present(self) -> bool:
        return False

    def value_or(self, default):
        return default


ABSENT = Absent()

Maybe = Union[Present, Absent]
