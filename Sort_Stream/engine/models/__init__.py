"""Data model for sorted sequences."""

from .element import Element, Phase, elements_from_values

__all__ = ["Element", "Phase", "elements_from_values"]
