"""Per-run container of elements and materials

A :class:`Registry` replaces module-level lookup tables so that
independent runs never share mutable isotope fractions. Elements are
registered once and shared by every material that contains them,
which means enriching molybdenum in one material changes it for all
materials in the same registry.

>>> from isoenrich.data import defaultRegistry
>>> reg = defaultRegistry()
>>> reg.material("moo2").getElement("Mo") is reg.element("Mo")
True
>>> reg.element("Mo")[100].amount = 0.5
>>> reg.reset()
>>> reg.element("Mo")[100].amount
0.09744
"""

import logging
from types import MappingProxyType
import typing

from isoenrich.elements import Element, Isotope
from isoenrich.exceptions import ConfigurationError, DataError
from isoenrich.internal import NuclideKey, normalizeSymbol, parseKey
from isoenrich.materials import Material

__all__ = ["Registry"]

__logger__ = logging.getLogger("isoenrich.registry")


class Registry:
    """Collection of :class:`Element` and :class:`Material` for one run

    Attributes
    ----------
    elements : mapping of str to Element
        Read-only view of registered elements by symbol
    materials : mapping of str to Material
        Read-only view of registered materials by name

    """

    def __init__(self):
        self._elements = {}
        self._materials = {}

    def __repr__(self):
        return "<{} elements={} materials={}>".format(
            self.__class__.__name__,
            ",".join(self._elements), ",".join(self._materials),
        )

    @property
    def elements(self) -> typing.Mapping[str, Element]:
        return MappingProxyType(self._elements)

    @property
    def materials(self) -> typing.Mapping[str, Material]:
        return MappingProxyType(self._materials)

    def addElement(self, element: Element) -> Element:
        if not isinstance(element, Element):
            raise TypeError(f"Expected Element, not {type(element)}")
        if element.symbol in self._elements:
            raise DataError(f"Element {element.symbol} already registered")
        self._elements[element.symbol] = element
        return element

    def addMaterial(self, material: Material) -> Material:
        if not isinstance(material, Material):
            raise TypeError(f"Expected Material, not {type(material)}")
        key = material.name.lower()
        if key in self._materials:
            raise DataError(f"Material {material.name} already registered")
        for elem in material:
            if self._elements.get(elem.symbol) is not elem:
                raise DataError(
                    f"Element {elem.symbol} of material {material.name} is not "
                    "registered"
                )
        self._materials[key] = material
        return material

    def element(self, symbol: str) -> Element:
        """Return a registered element by case-insensitive symbol

        Raises
        ------
        ConfigurationError
            If the symbol is unknown or not registered

        """
        try:
            return self._elements[normalizeSymbol(symbol)]
        except KeyError as ke:
            raise ConfigurationError(
                f"Element {symbol} not found. Available: {', '.join(self._elements)}"
            ) from ke

    def material(self, name: str) -> Material:
        """Return a registered material by case-insensitive name

        Raises
        ------
        ConfigurationError
            If no material has this name

        """
        try:
            return self._materials[name.lower()]
        except KeyError as ke:
            raise ConfigurationError(
                f"Material {name} not found. Available: {', '.join(self._materials)}"
            ) from ke

    def isotope(self, key) -> Isotope:
        """Return a registered isotope from a name or :class:`NuclideKey`"""
        try:
            nuc = parseKey(key)
        except (TypeError, ValueError) as err:
            raise ConfigurationError(f"Could not understand isotope {key}") from err
        elem = self.element(nuc.symbol)
        try:
            return elem[nuc]
        except KeyError as ke:
            raise ConfigurationError(
                f"{nuc.name} is not a tracked isotope of {elem.symbol}"
            ) from ke

    def reset(self):
        """Restore natural compositions and discard derived quantities"""
        for elem in self._elements.values():
            elem.reset()
        for mat in self._materials.values():
            mat.resetDerived()
        __logger__.debug("Reset %s", self)

    @classmethod
    def fromTables(
        cls,
        abundances: typing.Mapping[str, typing.Mapping[int, typing.Tuple[float, float]]],
        materials: typing.Optional[typing.Mapping[str, tuple]] = None,
        halfLives: typing.Optional[typing.Callable[[NuclideKey], typing.Optional[float]]] = None,
        names: typing.Optional[typing.Mapping[str, str]] = None,
    ):
        """Build a registry from plain tables

        Parameters
        ----------
        abundances : mapping
            ``{symbol: {massNumber: (naturalFraction, molarMass)}}``
        materials : mapping, optional
            ``{name: (label, massDensity, {symbol: moles})}``
        halfLives : callable, optional
            Function returning the half-life [h] of a
            :class:`NuclideKey`, or ``None`` if unknown
        names : mapping, optional
            Long names of the elements by symbol

        Returns
        -------
        Registry

        """
        reg = cls()
        names = names or {}
        for symbol, table in abundances.items():
            isotopes = []
            for massNumber, (natural, molarMass) in table.items():
                key = NuclideKey(symbol, massNumber, 0)
                isotopes.append(
                    Isotope(
                        key, molarMass, natural,
                        halfLife=halfLives(key) if halfLives is not None else None,
                    )
                )
            reg.addElement(Element(symbol, isotopes, name=names.get(symbol)))

        for name, (label, density, composition) in (materials or {}).items():
            constituents = {reg.element(sym): moles for sym, moles in composition.items()}
            reg.addMaterial(Material(name, density, label=label, constituents=constituents))
        return reg
