import math

import numpy
import pytest

from isoenrich import FractionType, DataError, FractionSumWarning
from isoenrich.elements import Isotope, Element
from isoenrich.internal import NuclideKey


@pytest.fixture
def toyElement():
    """Two isotope element with easy numbers"""
    return Element(
        "Mo",
        [Isotope("Mo100", 100.0, 0.25), Isotope("Mo98", 98.0, 0.75)],
        name="molybdenum",
    )


def test_isotope():
    iso = Isotope("Mo99", 98.9077, 0.0, halfLife=65.94)
    assert iso.key == NuclideKey("Mo", 99, 0)
    assert iso.name == "Mo99"
    assert iso.z == 42
    assert iso.a == 99
    assert iso.floor == 0.0
    assert iso.decayConstant == pytest.approx(math.log(2) / 65.94)
    assert not iso.isStable

    stable = Isotope("Mo98", 97.905, 0.24, halfLife=math.inf)
    assert stable.isStable
    assert stable.decayConstant == 0.0
    assert Isotope("Mo95", 94.9, 0.1).decayConstant is None

    with pytest.raises(ValueError, match="Isotope.molarMass"):
        Isotope("Mo100", 0.0, 0.1)
    with pytest.raises(ValueError, match="Isotope.molarMass"):
        Isotope("Mo100", -99.9, 0.1)
    with pytest.raises(ValueError, match="Isotope.floor"):
        Isotope("Mo100", 99.9, 0.1, floor=-0.1)
    with pytest.raises(TypeError, match="Isotope.molarMass"):
        Isotope("Mo100", "99.9", 0.1)


def test_element(toyElement):
    assert toyElement.symbol == "Mo"
    assert toyElement.z == 42
    assert toyElement.name == "molybdenum"
    assert len(toyElement) == 2
    # sorted by mass number
    assert toyElement.massNumbers == (98, 100)
    assert toyElement[100] is toyElement["Mo100"]
    assert toyElement[NuclideKey("Mo", 98, 0)].natural == 0.75
    assert 98 in toyElement
    assert "Mo97" not in toyElement
    assert "Tc99" not in toyElement

    with pytest.raises(KeyError):
        toyElement[97]
    with pytest.raises(KeyError):
        toyElement["Tc99"]

    # natural composition on construction
    avg = 0.75 * 98.0 + 0.25 * 100.0
    assert toyElement.molarMass == pytest.approx(avg)
    assert toyElement[100].mass == pytest.approx(0.25 * 100.0 / avg)
    assert toyElement.fractions("mass").sum() == pytest.approx(1.0, abs=1e-12)


def test_badElements():
    with pytest.raises(DataError, match="No isotopes"):
        Element("Mo", [])
    with pytest.raises(DataError, match="does not belong"):
        Element("Mo", [Isotope("Tc99", 98.9, 1.0)])
    with pytest.raises(DataError, match="Duplicate"):
        Element("Mo", [Isotope("Mo98", 98.0, 0.5), Isotope("Mo98", 98.0, 0.5)])
    with pytest.raises(DataError, match="sum to"):
        Element("Mo", [Isotope("Mo98", 98.0, 0.5), Isotope("Mo100", 100.0, 0.4)])


def test_abundanceNormalization():
    elem = Element(
        "O",
        [
            Isotope("O16", 15.994914619, 0.99757),
            Isotope("O17", 16.999131757, 0.0003835),
            Isotope("O18", 17.999159613, 0.002045),
        ],
    )
    assert elem.fractions(FractionType.AMOUNT).sum() == pytest.approx(1.0, abs=1e-14)
    assert elem["O17"].natural > 0.0003835


def test_molarMassWeighting(toyElement):
    toyElement.setFractions("amount", [0.5, 0.5])
    assert toyElement.updateMolarMass(FractionType.AMOUNT) == pytest.approx(99.0)

    toyElement.setFractions("mass", [0.5, 0.5])
    expected = 1.0 / (0.5 / 98.0 + 0.5 / 100.0)
    assert toyElement.updateMolarMass(FractionType.MASS) == pytest.approx(expected)
    assert toyElement.massFractionSum == pytest.approx(1.0)

    toyElement.setFractions("mass", [0.0, 0.0])
    with pytest.raises(ValueError, match="zero"):
        toyElement.updateMolarMass(FractionType.MASS)

    with pytest.raises(ValueError):
        toyElement.setFractions("mass", [1.0])


def test_conversionRoundTrip(molybdenum):
    natural = molybdenum.fractions(FractionType.AMOUNT)

    molybdenum.updateMolarMass(FractionType.AMOUNT)
    molybdenum.convertFractions(FractionType.MASS)
    mass = molybdenum.fractions(FractionType.MASS)
    assert mass.sum() == pytest.approx(1.0, abs=1e-12)
    # heavier isotopes gain weight
    assert mass[-1] > natural[-1]
    assert mass[0] < natural[0]

    molybdenum.setFractions(FractionType.AMOUNT, numpy.zeros(len(molybdenum)))
    molybdenum.updateMolarMass(FractionType.MASS)
    molybdenum.convertFractions(FractionType.AMOUNT)
    assert molybdenum.fractions(FractionType.AMOUNT) == pytest.approx(natural, rel=1e-12)


def test_checkFractions(toyElement):
    assert toyElement.checkFractions(FractionType.AMOUNT)
    toyElement[100].amount = 0.3
    with pytest.warns(FractionSumWarning, match="Mo"):
        assert not toyElement.checkFractions(FractionType.AMOUNT)


def test_resetAndFloors(molybdenum):
    molybdenum.setFloors(0.01, {"Mo92": 5e-5, 100: 0.02, "O16": 0.5, 16: 0.5})
    assert molybdenum[92].floor == 5e-5
    assert molybdenum[94].floor == 0.01
    assert molybdenum[100].floor == 0.02

    molybdenum[100].amount = 0.9
    molybdenum.reset()
    assert molybdenum[100].amount == molybdenum[100].natural
    # floors survive a reset
    assert molybdenum[92].floor == 5e-5

    molybdenum.setFloors()
    assert all(iso.floor == 0.0 for iso in molybdenum)

    # mass numbers of other elements are skipped, unknown names are not
    molybdenum.setFloors(0.0, {93: 0.1, "Nb93": 0.1})
    assert all(iso.floor == 0.0 for iso in molybdenum)
    with pytest.raises(KeyError):
        molybdenum.setFloors(0.0, {"Mo93": 0.1})
