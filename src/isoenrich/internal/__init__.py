from .isotope import NuclideKey, getKeyFromName, parseKey, normalizeSymbol
from .symbols import SYMBOLS, NUMBERS
