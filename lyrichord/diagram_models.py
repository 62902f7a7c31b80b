"""Geometric primitives produced when a chord diagram is rendered."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Line:
    """A straight stroke: a string, a fret, or half of a mute cross."""

    x1: float
    y1: float
    x2: float
    y2: float
    role: str


@dataclass(frozen=True)
class Circle:
    """A note marker, fretted or open."""

    cx: float
    cy: float
    r: float
    role: str


@dataclass(frozen=True)
class Label:
    """Centred text: a note name or a fret number."""

    x: float
    y: float
    text: str
    size: float
    role: str


Primitive = Union[Line, Circle, Label]
