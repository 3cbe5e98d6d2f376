from .constants import FractionType, DepletionOrder
from .exceptions import ConfigurationError, DataError, FractionSumWarning
from .internal import NuclideKey
from .elements import Isotope, Element
from .materials import Material
from .redistribute import Redistribution, redistribute
from .propagate import ReferenceSnapshot, captureReference, propagate
from .density import calculateDensities
from .reactions import ReactionChannel, ProductFilter, generateChannels, groupChannels
from .registry import Registry
from .data import defaultRegistry
from .store import BaseStore, MemoryStore
from .sweep import (
    SweepRange,
    constructRange,
    EnrichmentRequest,
    SweepRow,
    SweepOrchestrator,
)
from .settings import Settings

__version__ = "0.1.0"
