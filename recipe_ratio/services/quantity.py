"""Servings-based quantity scaling.

Scaling is a pure transform: ``base × servings ÷ REFERENCE_SERVINGS``.  Input
validation happens once, at the boundary (:func:`parse_servings` /
:class:`ServingsCounter`), so NaN or garbage never reaches the display layer.
"""

from __future__ import annotations

import logging
import math

from recipe_ratio.errors import ValidationFailure

logger = logging.getLogger(__name__)

REFERENCE_SERVINGS = 1
DEFAULT_DECIMAL_PLACES = 2
MAX_SERVINGS = 1000


def scale_quantity(base_quantity: float, servings: int) -> float:
    """Return ``base_quantity`` scaled from the reference serving size to ``servings``."""

    return base_quantity * servings / REFERENCE_SERVINGS


def format_quantity(value: float, places: int = DEFAULT_DECIMAL_PLACES) -> str:
    """Render ``value`` with at most ``places`` decimals.

    Exact integers collapse to integer form (``2.0`` -> ``"2"``) and trailing
    zeros are dropped (``2.50`` -> ``"2.5"``).
    """

    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite quantity: {value!r}")

    rounded = round(value, places)
    if float(rounded).is_integer():
        return str(int(rounded))
    return f"{rounded:.{places}f}".rstrip("0").rstrip(".")


def display_quantity(
    base_quantity: float, servings: int, places: int = DEFAULT_DECIMAL_PLACES
) -> str:
    return format_quantity(scale_quantity(base_quantity, servings), places)


def parse_servings(raw: str | int | float | None) -> int:
    """Validate a servings input and return it as a positive integer.

    Raises :class:`ValidationFailure` for blanks, non-numeric text, fractional
    or non-positive counts, and values above ``MAX_SERVINGS``.
    """

    if raw is None or isinstance(raw, bool):
        raise ValidationFailure("Servings must be a whole number", field="servings", value=raw)

    if isinstance(raw, (int, float)):
        candidate = float(raw)
    else:
        text = raw.strip()
        if not text:
            raise ValidationFailure("Servings must not be blank", field="servings", value=raw)
        try:
            candidate = float(text)
        except ValueError as exc:
            raise ValidationFailure(
                "Servings must be a whole number", field="servings", value=raw
            ) from exc

    if not math.isfinite(candidate) or not candidate.is_integer():
        raise ValidationFailure("Servings must be a whole number", field="servings", value=raw)

    servings = int(candidate)
    if servings < 1 or servings > MAX_SERVINGS:
        raise ValidationFailure(
            f"Servings must be between 1 and {MAX_SERVINGS}", field="servings", value=raw
        )
    return servings


class ServingsCounter:
    """Servings input that only ever exposes the last valid serving count."""

    def __init__(self, servings: int = REFERENCE_SERVINGS) -> None:
        self.servings = parse_servings(servings)
        self.input_value = str(self.servings)
        self.error: str | None = None

    def set_input(self, raw: str) -> None:
        self.input_value = raw

    def validate_and_set(self, raw: str | None = None) -> bool:
        """Apply the pending input; on rejection keep the previous servings."""

        if raw is not None:
            self.input_value = raw
        try:
            servings = parse_servings(self.input_value)
        except ValidationFailure as exc:
            logger.debug("Rejected servings input %r: %s", self.input_value, exc)
            self.error = str(exc)
            self.input_value = str(self.servings)
            return False

        self.servings = servings
        self.input_value = str(servings)
        self.error = None
        return True
