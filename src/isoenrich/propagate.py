"""
Material property propagation
=============================

Push element-level isotope fractions up to material-level quantities
and compute density change coefficients (DCC) against an immutable
reference snapshot.

The amount-mode DCC of isotope :math:`i` is

.. math::

    DCC_i = \\frac{a_i}{a_i^0}\\frac{M^0}{M}

where :math:`M` is the material molar mass and superscript zero
denotes the reference state. The mass-mode DCC is

.. math::

    DCC_i = \\frac{w_i}{w_i^0}\\frac{w_e}{w_e^0}

with :math:`w_e` the mass fraction of the parent element in the
material.
"""

import logging
import math
from types import MappingProxyType
import typing

from isoenrich.constants import FractionType
from isoenrich.exceptions import ConfigurationError
from isoenrich.internal import NuclideKey
from isoenrich.materials import Material

__all__ = ["ReferenceSnapshot", "captureReference", "propagate", "computeDcc"]

__logger__ = logging.getLogger("isoenrich.propagate")


class ReferenceSnapshot:
    """Read-only record of a material at the reference level

    Parameters
    ----------
    material : str
        Name of the captured material
    fractionType : FractionType
        Fraction type that drove the capture
    level : float or None
        Enrichment level of the isotope of interest, if any
    molarMass : float
        Material molar mass [g/mol]
    elementMassFractions : mapping of str to float
        Element mass fractions in the material, keyed by symbol
    amountFractions : mapping of NuclideKey to float
        Isotope amount fractions within their parent elements
    massFractions : mapping of NuclideKey to float
        Isotope mass fractions within their parent elements

    """

    __slots__ = (
        "_material", "_fractionType", "_level", "_molarMass",
        "_elementMassFractions", "_amountFractions", "_massFractions",
    )

    def __init__(
        self,
        material: str,
        fractionType: FractionType,
        level: typing.Optional[float],
        molarMass: float,
        elementMassFractions: typing.Mapping[str, float],
        amountFractions: typing.Mapping[NuclideKey, float],
        massFractions: typing.Mapping[NuclideKey, float],
    ):
        self._material = material
        self._fractionType = FractionType.fromStr(fractionType)
        self._level = level
        self._molarMass = molarMass
        self._elementMassFractions = MappingProxyType(dict(elementMassFractions))
        self._amountFractions = MappingProxyType(dict(amountFractions))
        self._massFractions = MappingProxyType(dict(massFractions))

    def __repr__(self):
        return "<{} {} {} at level {}>".format(
            self.__class__.__name__, self._material, self._fractionType.value,
            self._level,
        )

    @property
    def material(self) -> str:
        return self._material

    @property
    def fractionType(self) -> FractionType:
        return self._fractionType

    @property
    def level(self) -> typing.Optional[float]:
        return self._level

    @property
    def molarMass(self) -> float:
        return self._molarMass

    @property
    def elementMassFractions(self) -> typing.Mapping[str, float]:
        return self._elementMassFractions

    @property
    def amountFractions(self) -> typing.Mapping[NuclideKey, float]:
        return self._amountFractions

    @property
    def massFractions(self) -> typing.Mapping[NuclideKey, float]:
        return self._massFractions

    def fractions(self, fractionType: FractionType) -> typing.Mapping[NuclideKey, float]:
        if FractionType.fromStr(fractionType) is FractionType.AMOUNT:
            return self._amountFractions
        return self._massFractions


def _updateComposition(material: Material):
    material.resetDerived()
    molarMass = sum(moles * elem.molarMass for elem, moles in material.items())
    if molarMass <= 0:
        raise ConfigurationError(f"Material {material.name} has zero molar mass")
    material.molarMass = molarMass
    totalMass = material.mass

    for elem, moles in material.items():
        record = material.elementRecords[elem.symbol]
        record.massFraction = moles * elem.molarMass / molarMass
        if totalMass is not None:
            record.mass = record.massFraction * totalMass
        for iso in elem:
            isoRecord = material.isotopeRecords[iso.key]
            isoRecord.amount = iso.amount
            isoRecord.mass = iso.mass


def captureReference(
    material: Material,
    fractionType: FractionType,
    level: typing.Optional[float] = None,
) -> ReferenceSnapshot:
    """Propagate the current state and freeze it as the reference

    Parameters
    ----------
    material : Material
        Material in its reference state. Element molar masses and
        both fraction types must already be consistent
    fractionType : FractionType
        Fraction type that will drive later propagations
    level : float, optional
        Enrichment level this snapshot corresponds to

    Returns
    -------
    ReferenceSnapshot

    """
    fractionType = FractionType.fromStr(fractionType)
    _updateComposition(material)
    for record in material.isotopeRecords.values():
        record.dcc = 1.0
    snapshot = ReferenceSnapshot(
        material.name,
        fractionType,
        level,
        material.molarMass,
        {sym: rec.massFraction for sym, rec in material.elementRecords.items()},
        {key: rec.amount for key, rec in material.isotopeRecords.items()},
        {key: rec.mass for key, rec in material.isotopeRecords.items()},
    )
    __logger__.debug("Captured %r", snapshot)
    return snapshot


def computeDcc(before: float, after: float, scaleBefore: float, scaleAfter: float, inverse=False):
    """Ratio of fractions scaled by a material-level ratio

    NaN if ``before`` is zero. With ``inverse``, the scaling ratio is
    ``scaleBefore / scaleAfter``, otherwise ``scaleAfter / scaleBefore``
    """
    if before == 0:
        return math.nan
    if inverse:
        return (after / before) * (scaleBefore / scaleAfter)
    return (after / before) * (scaleAfter / scaleBefore)


def propagate(
    material: Material,
    fractionType: FractionType,
    snapshot: ReferenceSnapshot,
) -> Material:
    """Recompute material quantities and DCCs against a snapshot

    Densities are not computed here, see
    :func:`isoenrich.density.calculateDensities`.

    Parameters
    ----------
    material : Material
        Material whose elements have reconciled fractions and
        reweighted molar masses
    fractionType : FractionType
        Fraction type driving this run. Must match the snapshot
    snapshot : ReferenceSnapshot
        Reference captured for this material

    Returns
    -------
    Material
        The same material, for chaining

    Raises
    ------
    ConfigurationError
        If the snapshot was captured for another material or with
        another fraction type

    """
    fractionType = FractionType.fromStr(fractionType)
    if snapshot.fractionType is not fractionType:
        raise ConfigurationError(
            f"Reference was captured with {snapshot.fractionType.value} fractions, "
            f"cannot propagate {fractionType.value} fractions"
        )
    if snapshot.material != material.name:
        raise ConfigurationError(
            f"Reference for {snapshot.material} cannot be used with {material.name}"
        )
    _updateComposition(material)

    for elem in material:
        elemRecord = material.elementRecords[elem.symbol]
        for iso in elem:
            record = material.isotopeRecords[iso.key]
            if fractionType is FractionType.AMOUNT:
                record.dcc = computeDcc(
                    snapshot.amountFractions[iso.key], record.amount,
                    snapshot.molarMass, material.molarMass, inverse=True,
                )
            else:
                record.dcc = computeDcc(
                    snapshot.massFractions[iso.key], record.mass,
                    snapshot.elementMassFractions[elem.symbol],
                    elemRecord.massFraction,
                )
    return material
