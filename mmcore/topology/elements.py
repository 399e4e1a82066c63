"""Minimal element table used by atom typers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Element:
    """
    Chemical element.

    Attributes:
        symbol: Element symbol, e.g. "C".
        atomic_number: Number of protons.
        period: Row of the periodic table.
        group: Column of the periodic table (1-18).
    """

    symbol: str
    atomic_number: int
    period: int
    group: int


_ELEMENTS = {
    element.symbol: element
    for element in (
        Element("H", 1, 1, 1),
        Element("C", 6, 2, 14),
        Element("N", 7, 2, 15),
        Element("O", 8, 2, 16),
        Element("F", 9, 2, 17),
        Element("P", 15, 3, 15),
        Element("S", 16, 3, 16),
        Element("Cl", 17, 3, 17),
        Element("Se", 34, 4, 16),
        Element("Br", 35, 4, 17),
        Element("I", 53, 5, 17),
    )
}


def element(symbol: str) -> Element:
    """
    Look up an element by symbol.

    Raises:
        ValueError: If the symbol is not in the table.
    """
    try:
        return _ELEMENTS[symbol]
    except KeyError:
        raise ValueError(f"Unknown element symbol: {symbol}") from None
