"""
Settings for enrichment sweeps

Turns user input, typically the ``[isoenrich]`` section of an INI
file and its ``[isoenrich.<name>]`` subsections, into an
:class:`~isoenrich.sweep.EnrichmentRequest`
"""

import copy
import configparser
import pathlib
import re
import typing
from abc import abstractmethod, ABCMeta
from collections.abc import Mapping
import numbers

from isoenrich.constants import FractionType, DepletionOrder
from isoenrich.internal import parseKey
from isoenrich.reactions import getProjectiles
from isoenrich.sweep import SweepRange, constructRange, EnrichmentRequest
from isoenrich.typed import TypedAttr, BoundedTyped

__all__ = [
    "Settings", "SubSetting", "FloorSettings", "asBool", "asInt",
    "asPositiveInt", "asType",
]

# section name -> SubSetting subclass. The main section is reserved
_CONFIG_CLASSES = {"isoenrich": None}
_SECTION_NAME = re.compile("^[A-Za-z][A-Za-z0-9_]*$")
_TRUE = frozenset({"1", "yes", "y", "true", "on"})
_FALSE = frozenset({"0", "no", "n", "false", "off"})


def asBool(key: str, value: typing.Union[str, bool, int]) -> bool:
    """
    Interpret a setting as a boolean

    Parameters
    ----------
    key : str
        Setting name, only used in error messages
    value : str or bool or int
        Booleans pass through. Integers must be ``0`` or ``1``.
        Strings are compared without case against ``1 yes y true on``
        and ``0 no n false off``

    Raises
    ------
    ValueError
        For integers other than zero and one
    TypeError
        For anything else that cannot be read as a boolean

    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(
            f"Could not coerce {key}={value} to boolean: integer must be zero or one"
        )
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise TypeError(f"Could not coerce {key}={value} to boolean")


def asType(dtype: type, key: str, value: str):
    """Call ``dtype(value)``, reporting failures as :class:`TypeError`

    Parameters
    ----------
    dtype : type or callable
        Converter applied to ``value``
    key : str
        Setting name, only used in error messages
    value : object
        Raw value, usually a string from a configuration file

    """
    try:
        return dtype(value)
    except (TypeError, ValueError, ArithmeticError) as err:
        raise TypeError(f"Could not coerce {key}={value} to {dtype}") from err


def asInt(key: str, value: typing.Any) -> int:
    """Interpret a setting as an integer

    Integral values are returned as ``int``. Other values go through
    ``float`` and must be whole, so ``"42"`` and ``42.0`` are read
    as ``42`` while ``4.2`` is refused. Booleans are refused too.

    Raises
    ------
    TypeError
        If the value is a boolean, not numeric, or not whole

    """
    if isinstance(value, bool):
        raise TypeError(f"Refusing to read {key}={value} from bool as integer")
    if isinstance(value, numbers.Integral):
        return int(value)
    number = value if isinstance(value, float) else asType(float, key, value)
    if not number.is_integer():
        raise TypeError(f"Could not coerce {key}={value} to integer")
    return int(number)


def asPositiveInt(key: str, value: typing.Any) -> int:
    """As :func:`asInt`, additionally requiring a value above zero"""
    number = asInt(key, value)
    if number <= 0:
        raise ValueError(f"{key} must be a positive integer, not {value}")
    return number


def asFraction(key: str, value: typing.Any) -> float:
    """Interpret a setting as a float between zero and one"""
    if isinstance(value, bool):
        raise TypeError(f"Refusing to read {key}={value} from bool as fraction")
    number = asType(float, key, value)
    if not 0 <= number <= 1:
        raise ValueError(f"{key} must be between zero and one, not {number}")
    return number


class SubSetting(metaclass=ABCMeta):
    """Base class for a named group of settings

    Subclasses are registered under ``sectionName`` when they are
    defined and are then reachable as ``Settings().<sectionName>``,
    and from ``[isoenrich.<sectionName>]`` sections passed to
    :meth:`Settings.updateAll`. Names must be unique identifiers
    without periods.

    """

    def __init_subclass__(cls, sectionName: str, **kwargs):
        if not _SECTION_NAME.match(sectionName):
            raise ValueError(
                f"Invalid section name {sectionName} for {cls}: must be an "
                "identifier without periods"
            )
        super().__init_subclass__(**kwargs)

        if sectionName in _CONFIG_CLASSES:
            raise ValueError(
                f"Section {sectionName} is already taken. Registered sections: "
                f"{', '.join(sorted(_CONFIG_CLASSES))}"
            )
        _CONFIG_CLASSES[sectionName] = cls

    @abstractmethod
    def update(self, options: typing.Mapping[str, typing.Any]):
        """Apply options read from this section"""


class FloorSettings(SubSetting, sectionName="floors"):
    """Per-isotope depletion floors overriding the global floor

    Keys are isotope names, e.g. ``"Mo92"`` or ``"mo-92"``, and
    values fractions in ``[0, 1]``.

    >>> f = FloorSettings()
    >>> f.update({"mo92": "5e-5"})
    >>> f.floors
    {NuclideKey(symbol='Mo', a=92, i=0): 5e-05}

    """

    def __init__(self, floors=None):
        self.floors = {}
        if floors:
            self.update(dict(floors))

    def update(self, options):
        for name, value in options.items():
            try:
                key = parseKey(name)
            except (TypeError, ValueError) as err:
                raise ValueError(f"Could not understand floor for {name}") from err
            self.floors[key] = asFraction(f"floor of {name}", value)


class Settings:
    """Main setting configuration with validation and dynamic lookup

    Sub-settings like :class:`FloorSettings` may not exist at
    construction, but are created the first time they are accessed::

    >>> s = Settings()
    >>> s.floors.floors
    {}

    Parameters
    ----------
    materials : str or sequence of str, optional
        Materials to sweep. Default: ``("momet", )``
    isotope : str, optional
        Isotope of interest. Default: ``"Mo100"``
    fractionType : str or FractionType, optional
        Type of enrichment levels. Default: amount fraction
    range : str or sequence or SweepRange, optional
        Sweep range entries. Default: ``"0,0.0001,1"``
    referenceLevel : float, optional
        Level at which DCCs are one. Default is the natural fraction
    globalFloor : float, optional
        Depletion floor for every isotope. Default: zero
    depletionOrder : str or DepletionOrder, optional
        Donor order. Default: ascending
    projectiles : str or sequence of str, optional
        Projectiles for reaction channels. Default: none
    seed : int, optional
        Seed for a random depletion order
    verbose : bool, optional
        Report every redistribution step at info level

    Attributes
    ----------
    materials : tuple of str
    isotope : NuclideKey
    fractionType : FractionType
    range : SweepRange
    referenceLevel : float or None
    globalFloor : float
    depletionOrder : DepletionOrder
    projectiles : tuple of str
    seed : int or None
    verbose : bool

    Examples
    --------
    >>> s = Settings()
    >>> s.update({"isotope": "mo98", "range": "0.9, 0.95",
    ...           "fraction type": "mass_frac"})
    >>> s.isotope.name, s.fractionType.value, len(s.range.levels)
    ('Mo98', 'mass', 6)

    """

    _name = "isoenrich"
    globalFloor = BoundedTyped("_globalFloor", numbers.Real, ge=0.0, le=1.0)
    referenceLevel = BoundedTyped(
        "_referenceLevel", numbers.Real, ge=0.0, le=1.0, allowNone=True
    )
    seed = TypedAttr("_seed", numbers.Integral, allowNone=True)
    verbose = TypedAttr("_verbose", bool)

    def __init__(
        self,
        materials=("momet", ),
        isotope="Mo100",
        fractionType=FractionType.AMOUNT,
        range="0,0.0001,1",
        referenceLevel=None,
        globalFloor=0.0,
        depletionOrder=DepletionOrder.ASCENDING,
        projectiles=(),
        seed=None,
        verbose=False,
    ):
        self.materials = materials
        self.isotope = isotope
        self.fractionType = fractionType
        self.range = range
        self.referenceLevel = referenceLevel
        self.globalFloor = globalFloor
        self.depletionOrder = depletionOrder
        self.projectiles = projectiles
        self.seed = seed
        self.verbose = verbose

    def __getattr__(self, name):
        klass = _CONFIG_CLASSES.get(name)
        if klass is None:
            raise AttributeError(
                f"{self.__class__.__name__} has no setting or section {name}"
            )
        subset = klass()
        setattr(self, name, subset)
        return subset

    @property
    def name(self):
        return self._name

    @property
    def materials(self) -> typing.Tuple[str, ...]:
        return self._materials

    @materials.setter
    def materials(self, value):
        if isinstance(value, str):
            value = value.replace(",", " ").split()
        value = tuple(value)
        if not value or not all(isinstance(v, str) for v in value):
            raise TypeError(f"Materials must be non-empty sequence of str, not {value}")
        self._materials = value

    @property
    def isotope(self):
        return self._isotope

    @isotope.setter
    def isotope(self, value):
        self._isotope = parseKey(value)

    @property
    def fractionType(self) -> FractionType:
        return self._fractionType

    @fractionType.setter
    def fractionType(self, value):
        self._fractionType = FractionType.fromStr(value)

    @property
    def range(self) -> SweepRange:
        return self._range

    @range.setter
    def range(self, value):
        if not isinstance(value, SweepRange):
            value = constructRange(value)
        self._range = value

    @property
    def depletionOrder(self) -> DepletionOrder:
        return self._depletionOrder

    @depletionOrder.setter
    def depletionOrder(self, value):
        self._depletionOrder = DepletionOrder.fromStr(value)

    @property
    def projectiles(self) -> typing.Tuple[str, ...]:
        return self._projectiles

    @projectiles.setter
    def projectiles(self, value):
        self._projectiles = getProjectiles(value)

    def updateAll(self, options):
        """Apply the main section and every ``isoenrich.<name>`` section

        Parameters
        ----------
        options : mapping of str to mapping
            Sections by name, as read from an INI file. Sections whose
            name does not start with ``isoenrich`` are ignored

        Raises
        ------
        ValueError
            If a section ``isoenrich.<name>`` has no registered
            :class:`SubSetting`

        """
        main = options.get(self.name)
        if main is not None:
            self.update(dict(main))

        prefix = self.name + "."
        for key, section in options.items():
            if not key.startswith(prefix):
                continue
            sectionName = key[len(prefix):]
            if _CONFIG_CLASSES.get(sectionName) is None:
                raise ValueError(
                    f"No section found matching {sectionName}. Registered "
                    f"sections: {', '.join(s for s in _CONFIG_CLASSES if s != self.name)}"
                )
            getattr(self, sectionName).update(dict(section))

    def update(self, options: typing.Mapping[str, typing.Any]):
        """Apply options from the main ``[isoenrich]`` section

        Recognized keys, all optional

        *. ``"materials"`` : names separated by spaces or commas
        *. ``"isotope"`` : isotope of interest, e.g. ``"Mo100"``
        *. ``"fraction type"`` : ``"amount"`` or ``"mass"``
        *. ``"range"`` : two or three range entries
        *. ``"reference level"`` : fraction or ``"none"``
        *. ``"global floor"`` : fraction
        *. ``"depletion order"`` : ``"ascending"``, ``"descending"``,
           or ``"random"``
        *. ``"projectiles"`` : any of ``g n p``, or ``"none"``
        *. ``"seed"`` : integer or ``"none"``
        *. ``"verbose"`` : boolean

        Parameters
        ----------
        options : dict of str to object
            Raw values, typically strings. Recognized keys are popped
            from ``options``

        Raises
        ------
        ValueError
            If keys remain that are not recognized

        """
        materials = options.pop("materials", None)
        isotope = options.pop("isotope", None)
        fracType = options.pop("fraction type", None)
        rng = options.pop("range", None)
        # False marks an absent key since None clears the value
        refLevel = options.pop("reference level", False)
        floor = options.pop("global floor", None)
        order = options.pop("depletion order", None)
        projectiles = options.pop("projectiles", None)
        seed = options.pop("seed", False)
        verbose = options.pop("verbose", None)

        if options:
            raise ValueError(
                f"Unrecognized {self.name} settings: {', '.join(options)}"
            )

        if materials is not None:
            self.materials = materials
        if isotope is not None:
            self.isotope = isotope
        if fracType is not None:
            self.fractionType = fracType
        if rng is not None:
            self.range = rng
        if refLevel is not False:
            if refLevel is None or (isinstance(refLevel, str) and refLevel.lower() == "none"):
                self.referenceLevel = None
            else:
                self.referenceLevel = asFraction("reference level", refLevel)
        if floor is not None:
            self.globalFloor = asFraction("global floor", floor)
        if order is not None:
            self.depletionOrder = order
        if projectiles is not None:
            self.projectiles = projectiles
        if seed is not False:
            if seed is None or (isinstance(seed, str) and seed.lower() == "none"):
                self.seed = None
            else:
                self.seed = asInt("seed", seed)
        if verbose is not None:
            self.verbose = asBool("verbose", verbose)

    @classmethod
    def fromConfig(
        cls,
        options: typing.Union[str, pathlib.Path, typing.Mapping[str, typing.Any]],
    ):
        """Create settings from a configuration file or mapping

        Must have a section ``isoenrich``. Floors are read from
        ``isoenrich.floors``:

        .. code:: INI

            [isoenrich]
            materials = momet moo3
            isotope = Mo100
            fraction type = amount
            range = 0.0974, 0.0001, 0.0980
            depletion order = ascending

            [isoenrich.floors]
            Mo92 = 5e-5

        Parameters
        ----------
        options : str or pathlib.Path or Mapping
            Path to an INI file, or two-tiered mapping

        Returns
        -------
        Settings

        """
        if isinstance(options, (str, pathlib.Path)):
            cfg = configparser.ConfigParser()
            with open(options, "r") as stream:
                cfg.read_file(stream, str(options))
            options = {name: dict(section) for name, section in cfg.items()}
            if cls._name not in options:
                raise ValueError(f"No section {cls._name} found in {options}")
        elif not isinstance(options, Mapping):
            raise TypeError(
                f"Options must be a mapping-type or file, not {type(options)}"
            )
        else:
            options = copy.deepcopy(options)

        settings = cls()
        settings.updateAll(options)
        return settings

    def toRequest(self, registry=None) -> EnrichmentRequest:
        """Build the request described by these settings

        Parameters
        ----------
        registry : isoenrich.registry.Registry, optional
            If given, materials, the isotope of interest, and
            floor isotopes are checked to exist

        Returns
        -------
        EnrichmentRequest

        Raises
        ------
        ConfigurationError
            If anything cannot be found in ``registry``

        """
        if registry is not None:
            for name in self.materials:
                registry.material(name)
            registry.isotope(self.isotope)
            for key in self.floors.floors:
                registry.isotope(key)

        return EnrichmentRequest(
            self.materials,
            self.isotope,
            fractionType=self.fractionType,
            levels=self.range,
            order=self.depletionOrder,
            globalFloor=self.globalFloor,
            floors=self.floors.floors,
            projectiles=self.projectiles,
            referenceLevel=self.referenceLevel,
            seed=self.seed,
            verbose=self.verbose,
        )
