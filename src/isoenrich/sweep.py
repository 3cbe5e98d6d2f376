"""
Enrichment sweeps
=================

Drive the full calculation chain over a range of enrichment levels
of a single isotope of interest, for one or more materials. At every
level the driving element starts from its natural composition, so each
row depends only on the level and not on the path taken to get there.
"""

from collections import namedtuple
from decimal import Decimal, InvalidOperation
import logging
import math
import numbers
from types import MappingProxyType
import typing

import numpy

from isoenrich.constants import FractionType, DepletionOrder
from isoenrich.density import calculateDensities
from isoenrich.exceptions import ConfigurationError
from isoenrich.internal import NuclideKey, parseKey
from isoenrich.propagate import captureReference, propagate
from isoenrich.reactions import generateChannels, getProjectiles
from isoenrich.redistribute import depletionSequence, redistribute
from isoenrich.store import MemoryStore

__all__ = [
    "SweepRange", "constructRange", "EnrichmentRequest", "IsotopeState",
    "ElementState", "SweepRow", "SweepOrchestrator",
]

__logger__ = logging.getLogger("isoenrich.sweep")

SweepRange = namedtuple("SweepRange", "levels decimals")
SweepRange.__doc__ = """Enrichment levels of a sweep

Parameters
----------
levels : tuple of float
    Levels in increasing order
decimals : int
    Number of decimal places needed to represent every level
"""


def _toDecimal(value, what: str) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(f"{what} of range must be numeric, not {value}")
    try:
        dec = Decimal(str(value).strip())
    except InvalidOperation as err:
        raise ConfigurationError(f"{what} of range must be numeric, not {value!r}") from err
    if not dec.is_finite():
        raise ConfigurationError(f"{what} of range must be finite, not {value}")
    return dec


def _decimalPlaces(dec: Decimal) -> int:
    exponent = dec.as_tuple().exponent
    return max(0, -exponent)


def constructRange(entries) -> SweepRange:
    """Build sweep levels from two or three range entries

    Entries are ``(begin, end)`` or ``(begin, increment, end)``,
    given as a sequence or a comma separated string. Every level is
    an exact decimal with as many places as the most precise entry.
    An empty or zero increment falls back to one unit in the last
    decimal place, or one if all entries are integers.

    Parameters
    ----------
    entries : str or sequence
        Range entries

    Returns
    -------
    SweepRange

    Raises
    ------
    ConfigurationError
        If the number of entries is wrong, entries are not numeric,
        the end of a three entry range is zero, the increment is
        negative, or the begin exceeds the end

    Examples
    --------
    >>> constructRange("0.1,0.05,0.3")
    SweepRange(levels=(0.1, 0.15, 0.2, 0.25, 0.3), decimals=2)
    >>> constructRange(["0.95", "0.97"]).levels
    (0.95, 0.96, 0.97)
    >>> constructRange("0, , 3")
    SweepRange(levels=(0.0, 1.0, 2.0, 3.0), decimals=0)

    """
    if isinstance(entries, str):
        entries = entries.split(",")
    entries = list(entries)
    if len(entries) == 2:
        begin, end = entries
        increment = None
    elif len(entries) == 3:
        begin, increment, end = entries
    else:
        raise ConfigurationError(
            f"Range requires two or three entries, found {len(entries)}: {entries}"
        )

    begin = _toDecimal(begin, "Begin")
    end = _toDecimal(end, "End")
    if len(entries) == 3 and end == 0:
        raise ConfigurationError("End of a three entry range must be nonzero")
    if increment is None or (isinstance(increment, str) and not increment.strip()):
        increment = None
    else:
        increment = _toDecimal(increment, "Increment")

    given = [d for d in (begin, increment, end) if d is not None]
    decimals = max(_decimalPlaces(d) for d in given)
    unit = Decimal(1).scaleb(-decimals)
    if increment is None or increment == 0:
        increment = unit
    elif increment < 0:
        raise ConfigurationError(f"Increment of range must be positive, not {increment}")
    if begin > end:
        raise ConfigurationError(f"Begin of range {begin} exceeds end {end}")

    scale = Decimal(10) ** decimals
    first = int(begin * scale)
    last = int(end * scale)
    step = int(increment * scale)
    levels = tuple(
        float(Decimal(i).scaleb(-decimals)) for i in range(first, last + 1, step)
    )
    return SweepRange(levels, decimals)


class EnrichmentRequest(
    namedtuple(
        "EnrichmentRequest",
        [
            "materials", "isotope", "fractionType", "levels", "decimals",
            "order", "globalFloor", "floors", "projectiles", "referenceLevel",
            "seed", "verbose",
        ],
    )
):
    """Immutable description of a sweep

    Parameters
    ----------
    materials : str or iterable of str
        Names of materials to sweep
    isotope : str or NuclideKey
        Isotope of interest, e.g. ``"Mo100"``
    fractionType : FractionType or str
        Type of the enrichment levels
    levels : SweepRange or iterable of float
        Enrichment levels. Each must lie in ``[0, 1]``
    decimals : int, optional
        Decimal places of the levels. Taken from ``levels`` if it is a
        :class:`SweepRange`, otherwise inferred
    order : DepletionOrder or str or sequence of int, optional
        Donor depletion order. Defaults to ascending mass number
    globalFloor : float, optional
        Depletion floor applied to every isotope
    floors : mapping, optional
        Per-isotope floors overriding ``globalFloor``, keyed by name
        or :class:`NuclideKey`
    projectiles : iterable of str, optional
        Projectiles for reaction channels
    referenceLevel : float, optional
        Level of the isotope of interest at which DCCs are one.
        Defaults to its natural fraction rounded to ``decimals``
    seed : int, optional
        Seed for a random depletion order
    verbose : bool, optional
        Log each redistribution step at info level

    """

    __slots__ = ()

    def __new__(
        cls,
        materials,
        isotope,
        fractionType=FractionType.AMOUNT,
        levels=(),
        decimals=None,
        order=DepletionOrder.ASCENDING,
        globalFloor=0.0,
        floors=None,
        projectiles=(),
        referenceLevel=None,
        seed=None,
        verbose=False,
    ):
        if isinstance(materials, str):
            materials = materials.replace(",", " ").split()
        materials = tuple(materials)
        if not materials:
            raise ConfigurationError("At least one material must be requested")
        try:
            isotope = parseKey(isotope)
        except (TypeError, ValueError) as err:
            raise ConfigurationError(f"Could not understand isotope {isotope}") from err

        try:
            fractionType = FractionType.fromStr(fractionType)
        except ValueError as err:
            raise ConfigurationError(str(err)) from err
        if isinstance(order, (str, DepletionOrder)):
            try:
                order = DepletionOrder.fromStr(order)
            except ValueError as err:
                raise ConfigurationError(str(err)) from err
        else:
            order = tuple(int(a) for a in order)

        if isinstance(levels, SweepRange):
            if decimals is None:
                decimals = levels.decimals
            levels = levels.levels
        levels = tuple(float(x) for x in levels)
        if not levels:
            raise ConfigurationError("No enrichment levels requested")
        for lvl in levels:
            if not 0 <= lvl <= 1:
                raise ConfigurationError(f"Enrichment level {lvl} must be in [0, 1]")
        if decimals is None:
            decimals = max(_decimalPlaces(Decimal(str(x))) for x in levels)

        if not isinstance(globalFloor, numbers.Real) or not 0 <= globalFloor <= 1:
            raise ConfigurationError(f"Global floor {globalFloor} must be in [0, 1]")
        checkedFloors = {}
        for key, value in (floors or {}).items():
            try:
                key = parseKey(key)
            except (TypeError, ValueError) as err:
                raise ConfigurationError(f"Could not understand isotope {key}") from err
            if not isinstance(value, numbers.Real) or not 0 <= value <= 1:
                raise ConfigurationError(f"Floor {value} of {key.name} must be in [0, 1]")
            checkedFloors[key] = float(value)

        if referenceLevel is not None and not 0 <= referenceLevel <= 1:
            raise ConfigurationError(f"Reference level {referenceLevel} must be in [0, 1]")

        return super().__new__(
            cls,
            materials,
            isotope,
            fractionType,
            levels,
            int(decimals),
            order,
            float(globalFloor),
            MappingProxyType(checkedFloors),
            getProjectiles(projectiles),
            referenceLevel,
            seed,
            bool(verbose),
        )


IsotopeState = namedtuple(
    "IsotopeState", "amount mass massDensity numberDensity dcc"
)
ElementState = namedtuple(
    "ElementState", "molarMass massFraction mass massDensity numberDensity"
)


class SweepRow(
    namedtuple(
        "SweepRow",
        [
            "material", "level", "achieved", "shortfall", "molarMass",
            "massDensity", "numberDensity", "mass", "elements", "isotopes",
            "channels",
        ],
    )
):
    """Results for one material at one enrichment level

    Parameters
    ----------
    material : str
        Material name
    level : float
        Requested level of the isotope of interest
    achieved : float
        Level reached after redistribution
    shortfall : float
        Part of the requested change that could not be supplied
    molarMass : float
        Material molar mass [g/mol]
    massDensity : float
        Material mass density [g/cm^3]
    numberDensity : float
        Material number density [1/cm^3]
    mass : float or None
        Material mass [g]
    elements : mapping of str to ElementState
        Per-element quantities
    isotopes : mapping of NuclideKey to IsotopeState
        Per-isotope quantities, including DCCs
    channels : tuple of ReactionChannel or None
        Reaction channels if projectiles were requested

    """

    __slots__ = ()

    @property
    def partial(self) -> bool:
        return self.shortfall > 0

    @property
    def dcc(self) -> typing.Dict[NuclideKey, float]:
        return {key: state.dcc for key, state in self.isotopes.items()}

    @classmethod
    def fromMaterial(cls, material, level, result, channels=None):
        elements = {}
        for elem in material:
            rec = material.elementRecords[elem.symbol]
            elements[elem.symbol] = ElementState(
                elem.molarMass, rec.massFraction, rec.mass, rec.massDensity,
                rec.numberDensity,
            )
        isotopes = {
            key: IsotopeState(rec.amount, rec.mass, rec.massDensity, rec.numberDensity, rec.dcc)
            for key, rec in material.isotopeRecords.items()
        }
        return cls(
            material.name,
            level,
            result.achieved,
            result.shortfall,
            material.molarMass,
            material.mdens,
            material.numberDensity,
            material.mass,
            MappingProxyType(elements),
            MappingProxyType(isotopes),
            tuple(channels) if channels is not None else None,
        )


class SweepOrchestrator:
    """Run an :class:`EnrichmentRequest` against a registry

    Parameters
    ----------
    registry : isoenrich.registry.Registry
        Source of elements and materials. Modified in place
    request : EnrichmentRequest
        What to compute
    store : isoenrich.store.BaseStore, optional
        Receiver of rows. Defaults to a new
        :class:`~isoenrich.store.MemoryStore`
    rng : numpy.random.Generator, optional
        Source of random depletion orders. Defaults to
        ``numpy.random.default_rng(request.seed)``

    Notes
    -----
    A random depletion order is drawn once per material before its
    levels are swept, and that same permutation is used at every
    level of the material. Materials each receive their own draw.

    Attributes
    ----------
    registry : Registry
    request : EnrichmentRequest
    store : BaseStore

    """

    def __init__(self, registry, request, store=None, rng=None):
        self.registry = registry
        self.request = request
        self.store = store if store is not None else MemoryStore()
        self._rng = rng if rng is not None else numpy.random.default_rng(request.seed)

    def _validate(self):
        req = self.request
        element = self.registry.element(req.isotope.symbol)
        target = self.registry.isotope(req.isotope)
        materials = []
        for name in req.materials:
            mat = self.registry.material(name)
            if element not in mat:
                raise ConfigurationError(
                    f"Material {mat.name} does not contain {element.symbol}"
                )
            materials.append(mat)
        for key in req.floors:
            self.registry.isotope(key)
        return element, target, materials

    def _applyFloors(self, material):
        for elem in material:
            elem.setFloors(self.request.globalFloor, self.request.floors)

    def _enrich(self, element, level, sequence):
        req = self.request
        element.reset()
        result = redistribute(
            element, req.isotope.a, level, req.fractionType,
            order=sequence, verbose=req.verbose,
        )
        if not result.aborted:
            element.reconcile(req.fractionType)
            element.checkFractions(FractionType.AMOUNT)
            element.checkFractions(FractionType.MASS)
        return result

    def referenceLevel(self, target) -> float:
        """Requested reference level, or the rounded natural fraction"""
        if self.request.referenceLevel is not None:
            return float(self.request.referenceLevel)
        if self.request.fractionType is FractionType.AMOUNT:
            natural = target.natural
        else:
            natural = target.natural * target.molarMass / self._naturalMolarMass(target)
        return round(natural, self.request.decimals)

    def _naturalMolarMass(self, target):
        element = self.registry.element(target.key.symbol)
        return sum(iso.natural * iso.molarMass for iso in element)

    def run(self):
        """Sweep every requested material over every level

        Returns
        -------
        BaseStore
            The store that received the rows

        Raises
        ------
        ConfigurationError
            If the request names unknown materials or isotopes, a
            material lacks the element of interest, or the reference
            level cannot be reached. Raised before any row is written

        """
        req = self.request
        element, target, materials = self._validate()
        # Resolve the depletion order once per material up front
        sequences = [
            depletionSequence(element, target.a, req.order, self._rng)
            for _mat in materials
        ]
        element.setFloors(req.globalFloor, req.floors)
        refLevel = self.referenceLevel(target)
        if refLevel < target.floor:
            raise ConfigurationError(
                f"Reference level {refLevel} of {target.name} is below its "
                f"floor {target.floor}"
            )
        __logger__.info(
            "Sweeping %s %s fraction over %d levels in %s",
            target.name, req.fractionType.value, len(req.levels),
            ", ".join(m.name for m in materials),
        )

        for material, sequence in zip(materials, sequences):
            self.registry.reset()
            self._applyFloors(material)
            self._enrich(element, refLevel, sequence)
            snapshot = captureReference(material, req.fractionType, refLevel)
            self.store.beforeMaterial(material, req, snapshot)

            for level in req.levels:
                if math.isclose(level, refLevel, rel_tol=0, abs_tol=1e-12):
                    level = refLevel
                result = self._enrich(element, level, sequence)
                if result.aborted:
                    __logger__.info(
                        "Skipping %s at %s: below floor %s",
                        material.name, level, target.floor,
                    )
                    continue
                propagate(material, req.fractionType, snapshot)
                calculateDensities(material, req.fractionType)
                channels = (
                    generateChannels(material, req.projectiles)
                    if req.projectiles else None
                )
                self.store.writeRow(SweepRow.fromMaterial(material, level, result, channels))

            self.store.afterMaterial(material)
        return self.store
