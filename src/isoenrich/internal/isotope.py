import re
from collections import namedtuple
import numbers

from .symbols import NUMBERS, SYMBOLS

__all__ = ["NuclideKey", "getKeyFromName", "parseKey", "normalizeSymbol"]

_NAME_REG = re.compile(
    r"^\s*([A-Za-z]{1,2})-?([0-9]+)(?:(m)|_m([0-9]+))?\s*$"
)


class NuclideKey(namedtuple("NuclideKey", "symbol a i")):
    """Composite key identifying a nuclide by element and mass number

    Sorting follows element symbol, then mass number, then isomeric
    state. Prefer :func:`parseKey` to build keys from user input.

    Parameters
    ----------
    symbol : str
        Element symbol, e.g. ``"Mo"``
    a : int
        Mass number
    i : int
        Isomeric state. Zero for the ground state

    Examples
    --------
    >>> k = NuclideKey("Mo", 100, 0)
    >>> k.name, k.z
    ('Mo100', 42)
    >>> NuclideKey("Tc", 99, 1).name
    'Tc99_m1'

    """

    __slots__ = ()

    @property
    def z(self) -> int:
        return NUMBERS[self.symbol]

    @property
    def name(self) -> str:
        base = "{}{}".format(self.symbol, self.a)
        if self.i:
            return base + "_m{}".format(self.i)
        return base

    @property
    def isMetastable(self) -> bool:
        return self.i > 0

    def __str__(self):
        return self.name


def normalizeSymbol(symbol: str) -> str:
    """Return the properly capitalized element symbol

    Raises
    ------
    KeyError
        If ``symbol`` does not name a known element

    """
    candidate = symbol.strip().capitalize()
    if candidate not in NUMBERS:
        raise KeyError("Unknown element symbol {}".format(symbol))
    return candidate


def getKeyFromName(name: str) -> NuclideKey:
    """Parse names like ``"Mo100"``, ``"mo-100"``, ``"Tc99m"``, ``"Tc99_m1"``"""
    match = _NAME_REG.match(name)
    if match is None:
        raise ValueError("Could not parse nuclide name {}".format(name))
    symbol, a, shortMeta, meta = match.groups()
    if meta:
        i = int(meta)
    else:
        i = 1 if shortMeta else 0
    try:
        symbol = normalizeSymbol(symbol)
    except KeyError as ke:
        raise ValueError("Could not parse nuclide name {}".format(name)) from ke
    return NuclideKey(symbol, int(a), i)


def parseKey(key) -> NuclideKey:
    """Coerce names, ``(z, a[, i])`` or ``(symbol, a[, i])`` into a key"""
    if isinstance(key, NuclideKey):
        return key
    if isinstance(key, str):
        return getKeyFromName(key)
    if isinstance(key, (tuple, list)) and len(key) in {2, 3}:
        head, a, *rest = key
        i = rest[0] if rest else 0
        if not isinstance(a, numbers.Integral) or not isinstance(i, numbers.Integral):
            raise TypeError("Mass number and isomeric state must be integers: {}".format(key))
        if isinstance(head, numbers.Integral):
            if not 0 < head < len(SYMBOLS):
                raise ValueError("Atomic number {} out of range".format(head))
            symbol = SYMBOLS[head]
        else:
            symbol = normalizeSymbol(str(head))
        return NuclideKey(symbol, int(a), int(i))
    raise TypeError(
        "Unsupported type {} cannot be converted to {}. Expected a name or "
        "sequence of (z or symbol, a, [i])".format(type(key), NuclideKey.__name__)
    )
