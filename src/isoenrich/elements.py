"""
Isotopes and chemical elements
==============================

Elements own their isotopes and are responsible for two pieces of
bookkeeping: the weighted average molar mass, and conversion between
amount and mass fractions. Both use the average molar mass that is
currently stored on the element, so callers must reweight before
converting whenever the driving fractions change.
"""

import logging
import math
import numbers
import typing
import warnings

import numpy

from isoenrich.constants import (
    FractionType,
    FRACTION_TOLERANCE,
    ABUNDANCE_TOLERANCE,
)
from isoenrich.exceptions import ConfigurationError, DataError, FractionSumWarning
from isoenrich.internal import NuclideKey, parseKey, NUMBERS
from isoenrich.typed import BoundedTyped, TypedAttr

__all__ = ["Isotope", "Element"]

__logger__ = logging.getLogger("isoenrich.elements")


class Isotope:
    """Single isotope tracked inside an :class:`Element`

    Parameters
    ----------
    key : NuclideKey or str or tuple
        Identifier, e.g. ``"Mo100"`` or ``("Mo", 100, 0)``
    molarMass : float
        Molar mass [g/mol]. Must be positive
    natural : float
        Natural amount fraction within the parent element
    halfLife : float, optional
        Half-life [h]. ``math.inf`` for stable nuclides, ``None``
        if unknown
    floor : float, optional
        Lowest fraction this isotope may be depleted to when it
        donates to another isotope. Defaults to zero

    Attributes
    ----------
    key : NuclideKey
        Identifier
    molarMass : float
        Molar mass [g/mol]
    natural : float
        Natural amount fraction
    amount : float
        Current amount fraction
    mass : float
        Current mass fraction
    floor : float
        Depletion floor
    halfLife : float or None
        Half-life [h]

    Examples
    --------
    >>> iso = Isotope("Mo99", 98.9077, 0.0, halfLife=65.94)
    >>> iso.z, iso.a
    (42, 99)
    >>> round(iso.decayConstant, 8)
    0.01051179

    """

    molarMass = BoundedTyped("molarMass", numbers.Real, gt=0.0)
    natural = BoundedTyped("natural", numbers.Real, ge=0.0, le=1.0)
    floor = BoundedTyped("floor", numbers.Real, ge=0.0, le=1.0)
    halfLife = BoundedTyped("halfLife", numbers.Real, gt=0.0, allowNone=True)

    def __init__(self, key, molarMass, natural, halfLife=None, floor=0.0):
        self.key = parseKey(key)
        self.molarMass = molarMass
        self.natural = natural
        self.halfLife = halfLife
        self.floor = floor
        self.amount = natural
        self.mass = 0.0

    def __repr__(self):
        return "<{} {} at {}>".format(
            self.__class__.__name__, self.key.name, hex(id(self))
        )

    @property
    def z(self) -> int:
        return self.key.z

    @property
    def a(self) -> int:
        return self.key.a

    @property
    def name(self) -> str:
        return self.key.name

    @property
    def isStable(self) -> bool:
        return self.halfLife is not None and math.isinf(self.halfLife)

    @property
    def decayConstant(self) -> typing.Optional[float]:
        """Decay constant [1/h], zero if stable and ``None`` if unknown"""
        if self.halfLife is None:
            return None
        return math.log(2) / self.halfLife

    def fraction(self, fractionType: FractionType) -> float:
        return getattr(self, FractionType.fromStr(fractionType).value)

    def setFraction(self, fractionType: FractionType, value: float):
        setattr(self, FractionType.fromStr(fractionType).value, float(value))


class Element:
    """Chemical element composed of ordered isotopes

    Isotopes are sorted by increasing mass number, which is also the
    default ascending depletion order. Natural abundances are
    normalized so the amount fractions sum to one. Mass fractions
    and the average molar mass are derived from the natural
    composition on construction.

    Parameters
    ----------
    symbol : str
        Chemical symbol, e.g. ``"Mo"``
    isotopes : iterable of Isotope
        Isotopes of this element. All keys must share ``symbol``
    name : str, optional
        Long name, e.g. ``"molybdenum"``
    tolerance : float, optional
        Largest allowed deviation of the tabulated natural abundances
        from one before a :class:`~isoenrich.exceptions.DataError`
        is raised

    Attributes
    ----------
    symbol : str
        Chemical symbol
    name : str
        Long name, or the symbol if not given
    z : int
        Atomic number
    isotopes : tuple of Isotope
        Isotopes sorted by mass number
    molarMass : float
        Weighted average molar mass [g/mol] from the most recent
        call to :meth:`updateMolarMass`
    massFractionSum : float or None
        Sum of isotope mass fractions found during the last mass
        weighted update, useful for tracking drift

    Raises
    ------
    DataError
        If no isotopes are given, keys disagree with ``symbol``,
        mass numbers are duplicated, or abundances do not sum to one

    """

    molarMass = BoundedTyped("molarMass", numbers.Real, gt=0.0)
    name = TypedAttr("name", str)

    def __init__(self, symbol, isotopes, name=None, tolerance=ABUNDANCE_TOLERANCE):
        self.symbol = symbol
        self.z = NUMBERS[symbol]
        self.name = name or symbol
        isotopes = sorted(isotopes, key=lambda iso: iso.key)
        if not isotopes:
            raise DataError(f"No isotopes given for element {symbol}")
        seen = set()
        for iso in isotopes:
            if iso.key.symbol != symbol:
                raise DataError(f"Isotope {iso.name} does not belong to {symbol}")
            if iso.a in seen:
                raise DataError(f"Duplicate mass number {iso.a} for {symbol}")
            seen.add(iso.a)
        self.isotopes = tuple(isotopes)
        self._index = {iso.a: iso for iso in self.isotopes}

        total = sum(iso.natural for iso in self.isotopes)
        if abs(total - 1.0) > tolerance:
            raise DataError(
                f"Natural abundances of {symbol} sum to {total}, outside of "
                f"{tolerance} of one"
            )
        if abs(total - 1.0) > FRACTION_TOLERANCE:
            __logger__.debug(
                "Normalizing natural abundances of %s from %s", symbol, total
            )
            for iso in self.isotopes:
                iso.natural = iso.natural / total

        self.massFractionSum = None
        self.reset()

    def __repr__(self):
        return "<{} {} at {}>".format(self.__class__.__name__, self.symbol, hex(id(self)))

    def __str__(self):
        return self.symbol

    def __len__(self):
        return len(self.isotopes)

    def __iter__(self):
        return iter(self.isotopes)

    def __contains__(self, key):
        try:
            self[key]
        except KeyError:
            return False
        return True

    def __getitem__(self, key) -> Isotope:
        """Return an isotope by mass number, name, or key

        Examples
        --------
        >>> mo = Element("Mo", [Isotope("Mo98", 97.905, 0.5),
        ...                     Isotope("Mo100", 99.907, 0.5)])
        >>> mo[100] is mo["Mo100"]
        True

        """
        if isinstance(key, numbers.Integral) and not isinstance(key, bool):
            massNumber = key
        else:
            nuc = parseKey(key)
            if nuc.symbol != self.symbol or nuc.i:
                raise KeyError(key)
            massNumber = nuc.a
        try:
            return self._index[massNumber]
        except KeyError as ke:
            raise KeyError(f"{self.symbol}{massNumber} is not an isotope of {self.symbol}") from ke

    @property
    def massNumbers(self) -> typing.Tuple[int, ...]:
        return tuple(iso.a for iso in self.isotopes)

    @property
    def keys(self) -> typing.Tuple[NuclideKey, ...]:
        return tuple(iso.key for iso in self.isotopes)

    @property
    def molarMasses(self) -> numpy.ndarray:
        return numpy.array([iso.molarMass for iso in self.isotopes])

    def fractions(self, fractionType: FractionType) -> numpy.ndarray:
        """Current fractions of a given type, ordered by mass number"""
        attr = FractionType.fromStr(fractionType).value
        return numpy.array([getattr(iso, attr) for iso in self.isotopes])

    def setFractions(self, fractionType: FractionType, values):
        """Overwrite fractions of a given type, ordered by mass number

        The other fraction type is not reconciled.
        """
        values = numpy.asarray(values, dtype=float)
        if values.shape != (len(self),):
            raise ValueError(
                f"Expected {len(self)} fractions for {self.symbol}, got {values.shape}"
            )
        attr = FractionType.fromStr(fractionType).value
        for iso, value in zip(self.isotopes, values):
            setattr(iso, attr, float(value))

    def updateMolarMass(self, fractionType: FractionType) -> float:
        r"""Recompute the average molar mass weighted by fractions

        For amount fractions :math:`a_i`

        .. math::

            \bar{M} = \sum_i a_i M_i

        and for mass fractions :math:`w_i`

        .. math::

            \bar{M} = \frac{\sum_i w_i}{\sum_i w_i / M_i}

        Parameters
        ----------
        fractionType : FractionType
            Which fractions are used as weights

        Returns
        -------
        float
            The updated :attr:`molarMass`

        Raises
        ------
        ConfigurationError
            If the weighted sum is zero, e.g. all fractions are zero

        """
        fractionType = FractionType.fromStr(fractionType)
        weights = self.fractions(fractionType)
        masses = self.molarMasses
        if fractionType is FractionType.AMOUNT:
            avg = weights.dot(masses)
            if avg <= 0:
                raise ConfigurationError(
                    f"Amount fractions of {self.symbol} give zero molar mass"
                )
        else:
            numer = weights.sum()
            denom = (weights / masses).sum()
            if denom <= 0:
                raise ConfigurationError(
                    f"Mass fractions of {self.symbol} give zero denominator"
                )
            self.massFractionSum = float(numer)
            avg = numer / denom
        self.molarMass = float(avg)
        return self.molarMass

    def convertFractions(self, target: FractionType):
        """Derive ``target`` fractions from the other fraction type

        Uses the currently stored :attr:`molarMass`, which should have
        been computed with the source fractions.

        Parameters
        ----------
        target : FractionType
            Fraction type to be written. ``MASS`` computes
            :math:`w_i = a_i M_i / \\bar{M}` while ``AMOUNT`` computes
            :math:`a_i = w_i \\bar{M} / M_i`

        """
        target = FractionType.fromStr(target)
        masses = self.molarMasses
        if target is FractionType.MASS:
            new = self.fractions(FractionType.AMOUNT) * masses / self.molarMass
        else:
            new = self.fractions(FractionType.MASS) * self.molarMass / masses
        self.setFractions(target, new)

    def reconcile(self, fractionType: FractionType):
        """Reweight using ``fractionType`` and derive the other type"""
        fractionType = FractionType.fromStr(fractionType)
        self.updateMolarMass(fractionType)
        self.convertFractions(fractionType.other)

    def checkFractions(self, fractionType: FractionType, tolerance=FRACTION_TOLERANCE) -> bool:
        """Warn and return False if fractions do not sum to one"""
        total = self.fractions(fractionType).sum()
        if abs(total - 1.0) > tolerance:
            warnings.warn(
                f"{FractionType.fromStr(fractionType).value} fractions of "
                f"{self.symbol} sum to {total}",
                FractionSumWarning,
            )
            return False
        return True

    def reset(self):
        """Restore natural composition, leaving floors untouched"""
        for iso in self.isotopes:
            iso.amount = iso.natural
        self.reconcile(FractionType.AMOUNT)

    def setFloors(self, globalFloor=0.0, overrides=None):
        """Apply a floor to every isotope, then per-isotope overrides

        Parameters
        ----------
        globalFloor : float, optional
            Floor applied to every isotope
        overrides : mapping, optional
            Mass number, name, or key to floor. Names and keys of
            other elements, and mass numbers this element does not
            track, are ignored so a single mapping can be shared
            across elements

        Raises
        ------
        KeyError
            If a name or key of this element is not a tracked isotope

        """
        for iso in self.isotopes:
            iso.floor = globalFloor
        if not overrides:
            return
        for key, value in overrides.items():
            if isinstance(key, numbers.Integral):
                if key in self._index:
                    self._index[key].floor = value
                continue
            nuc = parseKey(key)
            if nuc.symbol != self.symbol:
                continue
            self[nuc.a].floor = value
