"""
Reaction channels
=================

Enumerate the product nuclides reachable from every isotope of a
material through photon, neutron, and proton induced reactions. Each
channel carries the density change coefficient of its parent so that
the effect of enrichment on a product yield can be read directly.

>>> from isoenrich.internal import NuclideKey
>>> ch = ReactionChannel(NuclideKey("Mo", 100, 0), "n", "n", 2, (42, 99), 1.0)
>>> ch.label
'Mo100(n,2n)'
>>> ch.productName
'Mo99'

"""

import logging
import math
from collections import namedtuple
import typing

from isoenrich.constants import MINUTES_PER_HOUR, HOURS_PER_YEAR
from isoenrich.exceptions import ConfigurationError
from isoenrich.internal import NuclideKey, SYMBOLS
from isoenrich.materials import Material

__all__ = [
    "Particle", "PARTICLES", "PROJECTILES", "ReactionChannel",
    "FilteredProduct", "ProductFilter", "generateChannels", "groupChannels",
    "getProjectiles",
]

__logger__ = logging.getLogger("isoenrich.reactions")


class Particle(namedtuple("Particle", "symbol name protons neutrons")):
    """Projectile or ejectile with its nucleon content"""

    __slots__ = ()

    @property
    def nucleons(self) -> int:
        return self.protons + self.neutrons


PARTICLES = {
    p.symbol: p for p in (
        Particle("g", "photon", 0, 0),
        Particle("n", "neutron", 0, 1),
        Particle("p", "proton", 1, 0),
        Particle("d", "deuteron", 1, 1),
        Particle("t", "triton", 1, 2),
        Particle("a", "alpha", 2, 2),
        # Combinations emitted together
        Particle("np", "neutron-proton", 1, 1),
        Particle("pn", "proton-neutron", 1, 1),
        Particle("an", "alpha-neutron", 2, 3),
        Particle("ann", "alpha-neutron-neutron", 2, 4),
        Particle("ap", "alpha-proton", 3, 2),
        Particle("app", "alpha-proton-proton", 4, 2),
    )
}

PROJECTILES = ("g", "n", "p")

# ejectile -> {projectile: largest multiplicity}
_MAX_MULTIPLICITY = {
    "g": {"g": 1, "n": 1, "p": 1},
    "n": {"g": 3, "n": 3, "p": 3},
    "p": {"g": 1, "n": 3, "p": 2},
    "d": {"g": 1, "n": 1, "p": 1},
    "t": {"g": 1, "n": 1, "p": 1},
    "a": {"g": 1, "n": 1, "p": 1},
}

_HOMOGENEOUS = {
    "g": ("g", "n", "p", "a"),
    "n": ("g", "n", "p", "d", "t", "a"),
    "p": ("g", "n", "p", "d", "t", "a"),
}

_HETEROGENEOUS = {
    "g": ("np",),
    "n": ("np", "an", "ann", "ap", "app"),
    "p": ("pn", "an", "ann", "ap"),
}


class ReactionChannel(
    namedtuple(
        "ReactionChannel", "parent projectile ejectile multiplicity product dcc"
    )
):
    """Single reaction from a parent isotope to a product

    Parameters
    ----------
    parent : NuclideKey
        Target isotope
    projectile : str
        Incident particle symbol
    ejectile : str
        Emitted particle symbol
    multiplicity : int
        Number of ejectiles emitted
    product : tuple of int
        ``(Z, A)`` of the product nuclide
    dcc : float or None
        Density change coefficient of the parent

    """

    __slots__ = ()

    @property
    def label(self) -> str:
        mult = "" if self.multiplicity == 1 else str(self.multiplicity)
        return "{}({},{}{})".format(
            self.parent.name, self.projectile, mult, self.ejectile
        )

    @property
    def productName(self) -> str:
        z, a = self.product
        return "{}{}".format(SYMBOLS[z], a)


def getProjectiles(projectiles) -> typing.Tuple[str, ...]:
    """Validate projectile symbols

    Accepts a whitespace or comma separated string, or an iterable.
    ``"none"`` or an empty value yields an empty tuple.

    Raises
    ------
    ConfigurationError
        If any projectile is not a photon, neutron, or proton

    """
    if projectiles is None:
        return ()
    if isinstance(projectiles, str):
        if projectiles.strip().lower() in {"", "none"}:
            return ()
        projectiles = projectiles.replace(",", " ").split()
    out = []
    for proj in projectiles:
        proj = proj.strip().lower()
        if proj not in PROJECTILES:
            raise ConfigurationError(
                f"Projectile {proj} not supported. Must be one of "
                f"{', '.join(PROJECTILES)}"
            )
        if proj not in out:
            out.append(proj)
    return tuple(out)


def _isotopeChannels(parent: NuclideKey, projectile: str, dcc):
    proj = PARTICLES[projectile]
    z = parent.z + proj.protons
    a = parent.a + proj.nucleons

    for ejectile in _HOMOGENEOUS[projectile]:
        ejec = PARTICLES[ejectile]
        for mult in range(1, _MAX_MULTIPLICITY[ejectile][projectile] + 1):
            if ejectile == projectile and mult == 1:
                continue
            product = (z - mult * ejec.protons, a - mult * ejec.nucleons)
            if product[0] < 1 or product[1] < product[0]:
                continue
            yield ReactionChannel(parent, projectile, ejectile, mult, product, dcc)

    for ejectile in _HETEROGENEOUS[projectile]:
        ejec = PARTICLES[ejectile]
        product = (z - ejec.protons, a - ejec.nucleons)
        if product[0] < 1 or product[1] < product[0]:
            continue
        yield ReactionChannel(parent, projectile, ejectile, 1, product, dcc)


def generateChannels(
    material: Material, projectiles: typing.Iterable[str]
) -> typing.List[ReactionChannel]:
    """Reaction channels for every isotope of a material

    Parameters
    ----------
    material : Material
        Propagated material. DCCs are read from
        :attr:`~isoenrich.materials.Material.isotopeRecords`
    projectiles : iterable of str
        Any of ``"g"``, ``"n"``, ``"p"``

    Returns
    -------
    list of ReactionChannel
        Ordered by projectile, element, isotope, then ejectile

    """
    projectiles = getProjectiles(projectiles)
    channels = []
    for proj in projectiles:
        for elem in material:
            for iso in elem:
                record = material.isotopeRecords.get(iso.key)
                dcc = record.dcc if record is not None else None
                channels.extend(_isotopeChannels(iso.key, proj, dcc))
    __logger__.debug(
        "Generated %d channels for %s with %s", len(channels), material.name,
        ", ".join(projectiles),
    )
    return channels


def groupChannels(
    channels: typing.Iterable[ReactionChannel],
) -> typing.Dict[str, typing.Dict[typing.Tuple[int, int], typing.List[ReactionChannel]]]:
    """Group channels by projectile, then product ``(Z, A)``

    Products are sorted by atomic number then mass number, channels
    within a product by label.
    """
    grouped = {}
    for ch in channels:
        grouped.setdefault(ch.projectile, {}).setdefault(ch.product, []).append(ch)
    return {
        proj: {
            prod: sorted(products[prod], key=lambda c: c.label)
            for prod in sorted(products)
        }
        for proj, products in grouped.items()
    }


FilteredProduct = namedtuple("FilteredProduct", "key halfLife channels")
FilteredProduct.__doc__ = """Product nuclide kept by a :class:`ProductFilter`

Parameters
----------
key : NuclideKey
    Product nuclide, possibly metastable
halfLife : float
    Half-life [h], ``inf`` if stable, ``nan`` if unknown
channels : list of ReactionChannel
    Channels producing the ground state of this product
"""


class ProductFilter:
    """Keep products whose half-lives fall inside a window

    For every product the ground state is considered, along with its
    first metastable state when that state's half-life lies strictly
    inside the window. A candidate is dropped if it is stable (unless
    ``showStable``), or if its half-life lies outside the window.
    Candidates with unknown half-lives are kept.

    Parameters
    ----------
    minHalfLife : float, optional
        Lower bound [h]. Defaults to ten minutes
    maxHalfLife : float, optional
        Upper bound [h]. Defaults to one year
    showStable : bool, optional
        Keep stable products
    halfLives : callable, optional
        Function returning the half-life [h] of a :class:`NuclideKey`,
        ``inf`` for stable, or ``None`` if unknown. Defaults to
        :func:`isoenrich.data.getHalfLife`

    Examples
    --------
    >>> f = ProductFilter()
    >>> [k.name for k, _hl in f.candidates(43, 99)]
    ['Tc99_m1']
    >>> f.candidates(42, 98)
    []

    """

    def __init__(
        self,
        minHalfLife=10 / MINUTES_PER_HOUR,
        maxHalfLife=HOURS_PER_YEAR,
        showStable=False,
        halfLives=None,
    ):
        if minHalfLife > maxHalfLife:
            raise ConfigurationError(
                f"Minimum half-life {minHalfLife} exceeds maximum {maxHalfLife}"
            )
        self.minHalfLife = minHalfLife
        self.maxHalfLife = maxHalfLife
        self.showStable = showStable
        if halfLives is None:
            from isoenrich.data import getHalfLife as halfLives
        self._halfLives = halfLives

    def _inWindow(self, halfLife):
        return self.minHalfLife < halfLife < self.maxHalfLife

    def candidates(self, z: int, a: int) -> typing.List[typing.Tuple[NuclideKey, float]]:
        """Product states of ``(z, a)`` that pass the filter"""
        ground = NuclideKey(SYMBOLS[z], a, 0)
        keys = [ground]
        meta = NuclideKey(ground.symbol, a, 1)
        metaHalfLife = self._halfLives(meta)
        if metaHalfLife is not None and self._inWindow(metaHalfLife):
            keys.append(meta)

        kept = []
        for key in keys:
            halfLife = self._halfLives(key)
            if halfLife is None:
                kept.append((key, math.nan))
                continue
            if math.isinf(halfLife):
                if self.showStable:
                    kept.append((key, halfLife))
                continue
            if halfLife < self.minHalfLife or halfLife > self.maxHalfLife:
                continue
            kept.append((key, halfLife))
        return kept

    def apply(self, grouped) -> typing.Dict[str, typing.List[FilteredProduct]]:
        """Filter the output of :func:`groupChannels`"""
        out = {}
        for proj, products in grouped.items():
            kept = out.setdefault(proj, [])
            for (z, a), channels in products.items():
                for key, halfLife in self.candidates(z, a):
                    kept.append(FilteredProduct(key, halfLife, channels))
        return out
