"""
Constants module
================

.. warning::

    There is no way to make these truly constant, e.g.
    non-writeable. **Don't alter these values**, or else
    your results will be wrong.

Values that are expressed as ``X_PER_Y`` can be used to
convert units of ``Y`` to units of ``X`` by multiplication.

>>> "{:.4f}".format(2 * HOURS_PER_YEAR)
'17520.0000'

Constants
---------

.. autodata: AVOGADRO
    :annotation:

.. autodata: FRACTION_TOLERANCE
    :annotation:

"""

import enum

from scipy.constants import Avogadro

AVOGADRO = Avogadro  # Doc: Number of entities per mole
FRACTION_TOLERANCE = 1e-9  # Doc: Allowed drift of a fraction sum from one
ABUNDANCE_TOLERANCE = 1e-3  # Doc: Allowed drift of tabulated natural abundances
MINUTES_PER_HOUR = 60
HOURS_PER_YEAR = 24 * 365


class FractionType(enum.Enum):
    """Type of isotopic fraction driving a calculation

    Attributes
    ----------
    AMOUNT : str
        Amount (mole) fraction
    MASS : str
        Mass (weight) fraction

    """

    AMOUNT = "amount"
    MASS = "mass"

    @classmethod
    def fromStr(cls, value: str):
        """Coerce strings like ``"amount"``, ``"amt_frac"``, ``"mass"``"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in {"amount", "amt", "amt_frac", "amount fraction", "atom"}:
            return cls.AMOUNT
        if key in {"mass", "mass_frac", "mass fraction", "weight"}:
            return cls.MASS
        raise ValueError(f"Fraction type {value} not understood")

    @property
    def other(self):
        """The fraction type that must be reconciled against this one"""
        return FractionType.MASS if self is FractionType.AMOUNT else FractionType.AMOUNT


class DepletionOrder(enum.Enum):
    """Order in which donor isotopes are depleted

    Attributes
    ----------
    ASCENDING : str
        Increasing mass number
    DESCENDING : str
        Decreasing mass number
    RANDOM : str
        Random permutation drawn from a supplied generator

    """

    ASCENDING = "ascending"
    DESCENDING = "descending"
    RANDOM = "random"

    @classmethod
    def fromStr(cls, value: str):
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key.startswith("asc"):
            return cls.ASCENDING
        if key.startswith("desc"):
            return cls.DESCENDING
        if key.startswith("rand") or key == "shuffle":
            return cls.RANDOM
        raise ValueError(f"Depletion order {value} not understood")
