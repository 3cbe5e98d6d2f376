"""
Built-in reference data
=======================

Natural isotopic compositions and atomic masses follow the CIAAW
representative isotopic compositions. Half-lives are given in hours,
with :data:`STABLE` marking stable nuclides. Keys of
:data:`HALF_LIVES` are mass numbers for ground states and strings
like ``"93m"`` for the first metastable state.

>>> reg = defaultRegistry()
>>> mo = reg.element("Mo")
>>> [iso.a for iso in mo]
[92, 94, 95, 96, 97, 98, 100]
>>> reg.material("moo3").label
'MoO3'

"""

import math
from types import MappingProxyType

from isoenrich.internal import NuclideKey
from isoenrich.registry import Registry

__all__ = [
    "STABLE", "ELEMENT_NAMES", "ABUNDANCES", "MATERIALS", "HALF_LIVES",
    "getHalfLife", "defaultRegistry",
]

STABLE = math.inf

ELEMENT_NAMES = MappingProxyType({
    "O": "oxygen",
    "Sr": "strontium",
    "Y": "yttrium",
    "Zr": "zirconium",
    "Nb": "niobium",
    "Mo": "molybdenum",
    "Tc": "technetium",
    "Au": "gold",
})

# symbol -> {mass number: (natural amount fraction, molar mass [g/mol])}
ABUNDANCES = MappingProxyType({
    "O": {
        16: (0.99757, 15.994914619),
        17: (0.00038, 16.999131757),
        18: (0.00205, 17.999159613),
    },
    "Zr": {
        90: (0.5145, 89.90469876),
        91: (0.1122, 90.90564022),
        92: (0.1715, 91.90503532),
        94: (0.1738, 93.90631252),
        96: (0.0280, 95.90827762),
    },
    "Nb": {
        93: (1.0, 92.9063732),
    },
    "Mo": {
        92: (0.14649, 91.906807),
        94: (0.09187, 93.905084),
        95: (0.15873, 94.9058374),
        96: (0.16673, 95.9046748),
        97: (0.09582, 96.906017),
        98: (0.24292, 97.905404),
        100: (0.09744, 99.907468),
    },
    "Au": {
        197: (1.0, 196.966570),
    },
})

# name -> (label, mass density [g/cm^3], {symbol: moles per formula unit})
MATERIALS = MappingProxyType({
    "momet": ("Mo", 10.28, {"Mo": 1}),
    "moo2": ("MoO2", 6.47, {"Mo": 1, "O": 2}),
    "moo3": ("MoO3", 4.69, {"Mo": 1, "O": 3}),
    "aumet": ("Au", 11.34, {"Au": 1}),
})

# symbol -> {mass number or "<mass number>m": half-life [h]}
HALF_LIVES = MappingProxyType({
    "O": {16: STABLE, 17: STABLE, 18: STABLE},
    "Sr": {
        75: 1.97222e-05, 76: 0.002472222, 77: 0.0025, 78: 0.041666667,
        79: 0.0375, 80: 1.771666667, 81: 0.371666667, 82: 613.2,
        83: 32.41, "83m": 0.001375, 84: STABLE, 85: 1556.16,
        "85m": 1.127166667, 86: STABLE, 87: STABLE, "87m": 2.803,
        88: STABLE, 89: 1212.72, 90: 252200.4, 91: 9.63,
        92: 2.71, 93: 0.123716667, 94: 0.020916667, 95: 0.006638889,
        96: 0.000297222, 97: 0.000118333, 98: 0.000181389, 99: 7.47222e-05,
        100: 5.61111e-05, 101: 3.27778e-05, 102: 1.91667e-05,
    },
    "Y": {
        79: 0.004111111, 80: 0.009722222, 81: 0.019555556, 82: 0.002638889,
        83: 0.118, "83m": 0.0475, 84: 0.001277778, "84m": 0.658333333,
        85: 2.68, "85m": 4.86, 86: 14.74, "86m": 0.8,
        87: 79.8, "87m": 13.37, 88: 2559.6, "88m": 3.86111e-06,
        89: STABLE, "89m": 0.004461111, 90: 64, "90m": 3.19,
        91: 1404.24, "91m": 0.8285, 92: 3.54, 93: 10.18,
        "93m": 0.000227778, 94: 0.311666667, 95: 0.171666667, 96: 0.001483333,
        "96m": 0.002666667, 97: 0.001041667, "97m": 0.000325, 98: 0.000152222,
        "98m": 0.000555556, 99: 0.000408333, 100: 0.000204722, "100m": 0.000261111,
        101: 0.000125, 102: 0.0001, "102m": 8.33333e-05, 103: 6.38889e-05,
    },
    "Zr": {
        81: 0.004166667, 82: 0.008888889, 83: 0.012222222, 84: 0.431666667,
        85: 0.131, "85m": 0.003027778, 86: 16.5, 87: 1.68,
        "87m": 0.003888889, 88: 2001.6, 89: 78.41, "89m": 0.069666667,
        90: STABLE, "90m": 0.000224778, 91: STABLE, 92: STABLE,
        93: 13402.8, 94: STABLE, 95: 1536.48, 96: 3.3288e23,
        97: 16.91, 98: 0.008527778, 99: 0.000583333, 100: 0.001972222,
        101: 0.000638889, 102: 0.000805556, 103: 0.000361111, 104: 0.000333333,
        105: 0.000166667,
    },
    "Nb": {
        83: 0.001138889, 84: 0.003333333, 85: 0.005805556, 86: 0.024444444,
        "86m": 0.015555556, 87: 0.043333333, "87m": 0.061666667, 88: 0.241666667,
        "88m": 0.13, 89: 1.9, "89m": 1.18, 90: 14.6,
        "90m": 0.005225, 91: 5956800, "91m": 1460.64, 92: 3.03972e11,
        "92m": 243.6, 93: STABLE, "93m": 141298.8, 94: 177828000,
        "94m": 0.104383333, 95: 839.4, "95m": 86.6, 96: 23.35,
        97: 1.201666667, "97m": 0.014638889, 98: 0.000794444, "98m": 0.855,
        99: 0.004166667, "99m": 0.043333333, 100: 0.000416667, "100m": 0.000830556,
        101: 0.001972222, 102: 0.000361111, "102m": 0.001194444, 103: 0.000416667,
        104: 0.001333333, "104m": 0.000255556, 105: 0.000819444, 106: 0.000283333,
        107: 9.16667e-05, 108: 5.36111e-05, 109: 5.27778e-05, 110: 4.72222e-05,
    },
    "Mo": {
        86: 0.005444444, 87: 0.003722222, 88: 0.133333333, 89: 0.034,
        "89m": 5.27778e-05, 90: 5.56, 91: 0.258166667, "91m": 0.018055556,
        92: STABLE, 93: 35040000, "93m": 6.85, 94: STABLE,
        95: STABLE, 96: STABLE, 97: STABLE, 98: STABLE,
        99: 65.94, 100: 8.76e22, 101: 0.2435, 102: 0.188333333,
        103: 0.01875, 104: 0.016666667, 105: 0.009888889, 106: 0.002333333,
        107: 0.000972222, 108: 0.000302778, 109: 0.000147222, 110: 8.33333e-05,
    },
    "Tc": {
        88: 0.001777778, "88m": 0.001611111, 89: 0.003555556, "89m": 0.003583333,
        90: 0.013666667, "90m": 0.002416667, 91: 0.052333333, "91m": 0.055,
        92: 0.0705, 93: 2.75, "93m": 0.725, 94: 4.883333333,
        "94m": 0.866666667, 95: 20, "95m": 1464, 96: 102.72,
        "96m": 51.5, 97: 22776000000, "97m": 2162.4, 98: 36792000000,
        99: 1849236000, "99m": 6.01, 100: 0.004388889, 101: 0.237,
        102: 0.001466667, "102m": 0.0725, 103: 0.015055556, 104: 0.305,
        105: 0.126666667, 106: 0.009888889, 107: 0.005888889, 108: 0.001436111,
        109: 0.000241667, 110: 0.000255556, 111: 8.33333e-05, 112: 7.77778e-05,
        113: 3.61111e-05,
    },
    "Au": {197: STABLE},
})


def getHalfLife(key: NuclideKey):
    """Half-life [h] of a nuclide, :data:`STABLE`, or ``None`` if unknown

    >>> getHalfLife(NuclideKey("Tc", 99, 1))
    6.01
    >>> getHalfLife(NuclideKey("Mo", 98, 0))
    inf

    """
    table = HALF_LIVES.get(key.symbol)
    if table is None:
        return None
    if key.i == 0:
        return table.get(key.a)
    if key.i == 1:
        return table.get("{}m".format(key.a))
    return None


def defaultRegistry() -> Registry:
    """Fresh registry populated with the built-in elements and materials"""
    return Registry.fromTables(
        ABUNDANCES, MATERIALS, halfLives=getHalfLife, names=ELEMENT_NAMES
    )
