"""Mass and number densities of a material, its elements, and isotopes"""

import logging

from isoenrich.constants import AVOGADRO, FractionType
from isoenrich.exceptions import ConfigurationError
from isoenrich.materials import Material

__all__ = ["calculateDensities"]

__logger__ = logging.getLogger("isoenrich.density")


def calculateDensities(
    material: Material, fractionType: FractionType, avogadro: float = AVOGADRO
) -> Material:
    r"""Fill density fields of a propagated material

    The material number density is :math:`N = \rho N_A / M`. Element
    mass densities are :math:`\rho_e = w_e \rho` and isotope mass
    densities :math:`\rho_i = w_i \rho_e`. Number densities follow
    the driving fraction type: in amount mode
    :math:`N_e = n_e N` and :math:`N_i = a_i N_e`, in mass mode
    :math:`N_e = \rho_e N_A / M_e` and :math:`N_i = \rho_i N_A / M_i`.
    Both routes agree when fractions are consistent.

    Parameters
    ----------
    material : Material
        Material previously passed through
        :func:`isoenrich.propagate.propagate` or
        :func:`isoenrich.propagate.captureReference`
    fractionType : FractionType
        Driving fraction type
    avogadro : float, optional
        Avogadro constant [1/mol]

    Returns
    -------
    Material
        The same material, for chaining

    Raises
    ------
    ConfigurationError
        If the material has not been propagated

    """
    fractionType = FractionType.fromStr(fractionType)
    if material.molarMass is None:
        raise ConfigurationError(
            f"Material {material.name} must be propagated before computing densities"
        )
    material.numberDensity = material.mdens * avogadro / material.molarMass

    for elem, moles in material.items():
        elemRecord = material.elementRecords[elem.symbol]
        elemRecord.massDensity = elemRecord.massFraction * material.mdens
        if fractionType is FractionType.AMOUNT:
            elemRecord.numberDensity = moles * material.numberDensity
        else:
            elemRecord.numberDensity = elemRecord.massDensity * avogadro / elem.molarMass

        for iso in elem:
            record = material.isotopeRecords[iso.key]
            record.massDensity = record.mass * elemRecord.massDensity
            if fractionType is FractionType.AMOUNT:
                record.numberDensity = record.amount * elemRecord.numberDensity
            else:
                record.numberDensity = record.massDensity * avogadro / iso.molarMass

    __logger__.debug(
        "%s: rho=%s [g/cc] N=%s [1/cc]",
        material.name, material.mdens, material.numberDensity,
    )
    return material
