import numbers
from collections.abc import Mapping
import typing

from isoenrich.elements import Element
from isoenrich.internal import NuclideKey
from isoenrich.typed import BoundedTyped

__all__ = ["Material", "ConstituentRecord", "IsotopeRecord"]


class ConstituentRecord:
    """Material-scoped quantities for a single element

    Attributes
    ----------
    massFraction : float or None
        Mass fraction of this element in the material
    mass : float or None
        Mass [g], only if the material has a volume
    massDensity : float or None
        Mass density [g/cm^3]
    numberDensity : float or None
        Number density [1/cm^3]

    """

    __slots__ = ("massFraction", "mass", "massDensity", "numberDensity")

    def __init__(self):
        self.massFraction = None
        self.mass = None
        self.massDensity = None
        self.numberDensity = None

    def __repr__(self):
        return "<{} w={} rho={} N={}>".format(
            self.__class__.__name__, self.massFraction, self.massDensity,
            self.numberDensity,
        )


class IsotopeRecord:
    """Material-scoped quantities for a single isotope

    Attributes
    ----------
    amount : float or None
        Amount fraction within the parent element
    mass : float or None
        Mass fraction within the parent element
    massDensity : float or None
        Mass density [g/cm^3]
    numberDensity : float or None
        Number density [1/cm^3]
    dcc : float or None
        Density change coefficient relative to the reference state

    """

    __slots__ = ("amount", "mass", "massDensity", "numberDensity", "dcc")

    def __init__(self):
        self.amount = None
        self.mass = None
        self.massDensity = None
        self.numberDensity = None
        self.dcc = None

    def __repr__(self):
        return "<{} a={} w={} dcc={}>".format(
            self.__class__.__name__, self.amount, self.mass, self.dcc
        )


class Material(dict):
    """Chemical compound or mixture of elements

    Implements a Mapping interface of :class:`~isoenrich.elements.Element`
    to stoichiometric moles, e.g. two moles of oxygen per mole of MoO2.

    Parameters
    ----------
    name : str
        Name of this material, e.g. ``"moo2"``
    mdens : numbers.Real
        Tabulated mass density [g/cm^3]
    volume : numbers.Real, optional
        Volume [cm^3]. Required only to report masses
    label : str, optional
        Display label, e.g. ``"MoO2"``
    constituents : mapping of Element to float, optional
        Initial composition

    Attributes
    ----------
    name : str
        Name of this material
    label : str
        Display label
    mdens : float
        Mass density [g/cm^3]
    volume : float or None
        Volume [cm^3]
    molarMass : float or None
        Molar mass [g/mol] from the latest propagation
    numberDensity : float or None
        Number density of formula units [1/cm^3]
    elementRecords : dict of str to ConstituentRecord
        Per-element derived quantities keyed by symbol
    isotopeRecords : dict of NuclideKey to IsotopeRecord
        Per-isotope derived quantities

    """

    mdens = BoundedTyped("mdens", numbers.Real, gt=0.0)
    volume = BoundedTyped("volume", numbers.Real, gt=0.0, allowNone=True)

    def __init__(self, name, mdens, volume=None, label=None, constituents=None):
        super().__init__()
        self.name = name
        self.label = label or name
        self.mdens = mdens
        self.volume = volume
        if constituents:
            self.update(constituents)
        self.resetDerived()

    def __repr__(self):
        return "<{} {} at {}>".format(self.__class__.__name__, self.name, hex(id(self)))

    def __str__(self):
        comp = " ".join(
            "{}:{:g}".format(elem.symbol, moles) for elem, moles in self.items()
        )
        return "{} {:.5g} [g/cc] {}".format(self.label, self.mdens, comp)

    def __setitem__(self, key: Element, value: float):
        if not isinstance(key, Element):
            raise TypeError(
                f"Keys of {self.__class__.__name__} must be Element, not {type(key)}"
            )
        if not isinstance(value, numbers.Real) or isinstance(value, bool):
            raise TypeError(f"Moles of {key.symbol} must be real, not {type(value)}")
        if not value > 0:
            raise ValueError(f"Moles of {key.symbol} must be positive, not {value}")
        super().__setitem__(key, value)

    def update(self, other):
        if not isinstance(other, Mapping):
            other = dict(other)
        for key, value in other.items():
            self[key] = value

    @property
    def mass(self) -> typing.Optional[float]:
        """Mass [g] if a volume is given, otherwise ``None``"""
        if self.volume is None:
            return None
        return self.mdens * self.volume

    def getElement(self, symbol: str) -> Element:
        for elem in self:
            if elem.symbol == symbol:
                return elem
        raise KeyError(f"{symbol} not found in material {self.name}")

    def resetDerived(self):
        """Discard derived quantities and create empty records"""
        self.molarMass = None
        self.numberDensity = None
        self.elementRecords = {elem.symbol: ConstituentRecord() for elem in self}
        self.isotopeRecords: typing.Dict[NuclideKey, IsotopeRecord] = {
            iso.key: IsotopeRecord() for elem in self for iso in elem
        }
