import random
import string

import pytest

from isoenrich import FractionType, DepletionOrder, ConfigurationError
from isoenrich.internal import NuclideKey
from isoenrich.settings import (
    Settings, SubSetting, FloorSettings, asBool, asInt, asPositiveInt, asType,
)
from isoenrich.sweep import EnrichmentRequest


def test_defaults():
    s = Settings()
    assert s.materials == ("momet", )
    assert s.isotope == NuclideKey("Mo", 100, 0)
    assert s.fractionType is FractionType.AMOUNT
    assert s.range.decimals == 4
    assert len(s.range.levels) == 10001
    assert s.referenceLevel is None
    assert s.globalFloor == 0.0
    assert s.depletionOrder is DepletionOrder.ASCENDING
    assert s.projectiles == ()
    assert s.seed is None
    assert not s.verbose
    assert isinstance(s.floors, FloorSettings)
    assert s.floors.floors == {}


def test_settings():
    s = Settings()
    s.update(
        {
            "materials": "moo2, moo3",
            "isotope": "mo98",
            "fraction type": "mass_frac",
            "range": "0.24, 0.01, 0.30",
            "reference level": "0.25",
            "global floor": "1e-4",
            "depletion order": "desc",
            "projectiles": "g n",
            "seed": "42",
            "verbose": "yes",
        }
    )
    assert s.materials == ("moo2", "moo3")
    assert s.isotope == NuclideKey("Mo", 98, 0)
    assert s.fractionType is FractionType.MASS
    assert s.range.levels[0] == 0.24
    assert s.range.levels[-1] == 0.3
    assert s.referenceLevel == 0.25
    assert s.globalFloor == 1e-4
    assert s.depletionOrder is DepletionOrder.DESCENDING
    assert s.projectiles == ("g", "n")
    assert s.seed == 42
    assert s.verbose

    s.update({"reference level": "none", "seed": "None"})
    assert s.referenceLevel is None
    assert s.seed is None

    with pytest.raises(ValueError, match="Unrecognized.*unknown"):
        Settings().update({"unknown": 1})

    with pytest.raises(ValueError, match="global floor"):
        Settings().update({"global floor": 2})

    with pytest.raises(ConfigurationError, match="exceeds"):
        Settings().update({"range": "0.5, 0.1"})

    with pytest.raises(ValueError, match="Depletion order"):
        Settings().update({"depletion order": "sideways"})

    with pytest.raises(TypeError, match="Settings._verbose"):
        Settings().verbose = "yes"

    with pytest.raises(ValueError, match="Settings._globalFloor"):
        Settings().globalFloor = -1.0


def test_subsettings():
    randomSection = "".join(random.sample(string.ascii_letters, 10))
    settings = Settings()
    assert not hasattr(settings, "demo")
    assert not hasattr(settings, randomSection)

    class IncompleteSetting(SubSetting, sectionName="incomplete"):
        pass

    with pytest.raises(TypeError, match=".*abstract method"):
        IncompleteSetting()

    class MySubSettings(SubSetting, sectionName="demo"):
        def __init__(self):
            self.truth = True

        def update(self, options):
            v = options.get("truth", None)
            if v is not None:
                self.truth = asBool("truth", v)

    t = settings.demo
    assert isinstance(t, MySubSettings)
    assert not hasattr(settings, randomSection)
    assert t.truth

    settings.updateAll({"isoenrich.demo": {"truth": "0"}})
    assert not t.truth

    fresh = Settings()
    fresh.updateAll(
        {
            "isoenrich": {"isotope": "Mo92"},
            "isoenrich.demo": {"truth": "n"},
            "isoenrich.floors": {"Mo94": "0.01"},
            "other": {"ignored": True},
        }
    )
    assert fresh.isotope == NuclideKey("Mo", 92, 0)
    assert not fresh.demo.truth
    assert fresh.floors.floors == {NuclideKey("Mo", 94, 0): 0.01}

    with pytest.raises(ValueError, match=f".*{randomSection}"):
        fresh.updateAll({f"isoenrich.{randomSection}": {"key": "value"}})

    with pytest.raises(ValueError, match=".*demo"):

        class DuplicateSetting(SubSetting, sectionName="demo"):
            pass


@pytest.mark.parametrize(
    "name", ("0hello", "hello world", "isoenrich.floors", "mock-test", "w!ld3xample")
)
def test_badSubsectionNames(name):
    with pytest.raises(ValueError, match=f".*{name}"):

        class Failure(SubSetting, sectionName=name):
            pass


def test_floors():
    f = FloorSettings({"Mo-92": 5e-5})
    f.update({"mo100": "0.02"})
    assert f.floors == {
        NuclideKey("Mo", 92, 0): 5e-5,
        NuclideKey("Mo", 100, 0): 0.02,
    }
    with pytest.raises(ValueError, match="floor"):
        f.update({"not an isotope": 0.1})
    with pytest.raises(ValueError, match="between zero and one"):
        f.update({"Mo92": 1.5})


def test_configFile(tmp_path, registry):
    cfg = tmp_path / "enrich.cfg"
    cfg.write_text(
        "[isoenrich]\n"
        "materials = momet moo3\n"
        "isotope = Mo100\n"
        "fraction type = amount\n"
        "range = 0.0970, 0.0001, 0.0980\n"
        "depletion order = ascending\n"
        "projectiles = n\n"
        "\n"
        "[isoenrich.floors]\n"
        "Mo92 = 5e-5\n"
    )
    settings = Settings.fromConfig(cfg)
    assert settings.materials == ("momet", "moo3")
    assert settings.floors.floors == {NuclideKey("Mo", 92, 0): 5e-5}

    request = settings.toRequest(registry)
    assert isinstance(request, EnrichmentRequest)
    assert request.materials == ("momet", "moo3")
    assert request.levels == settings.range.levels
    assert request.decimals == 4
    assert request.floors == {NuclideKey("Mo", 92, 0): 5e-5}
    assert request.projectiles == ("n", )

    fromMap = Settings.fromConfig(
        {"isoenrich": {"materials": "moo2"}, "isoenrich.floors": {"Mo94": 0.0}}
    )
    assert fromMap.materials == ("moo2", )

    empty = tmp_path / "empty.cfg"
    empty.write_text("[DEFAULT]\nkey = value\n")
    with pytest.raises(ValueError, match="isoenrich"):
        Settings.fromConfig(empty)

    with pytest.raises(TypeError, match="mapping"):
        Settings.fromConfig(1)


def test_toRequestChecksRegistry(registry):
    s = Settings(materials="steel")
    with pytest.raises(ConfigurationError, match="steel"):
        s.toRequest(registry)

    s = Settings(isotope="Mo93")
    with pytest.raises(ConfigurationError, match="Mo93"):
        s.toRequest(registry)
    # without a registry nothing is looked up
    assert s.toRequest().isotope == NuclideKey("Mo", 93, 0)


def test_validators():
    bools = {
        True: {True, 1, "1", "y", "YES", "trUe", "on"},
        False: {False, "fAlSe", 0, "0", "no", "N", "off"},
    }
    for expected, options in bools.items():
        for testv in options:
            assert asBool("test", testv) == expected

    with pytest.raises(ValueError, match="test=.*zero or one"):
        asBool("test", 2)

    with pytest.raises(TypeError, match="test=possibly"):
        asBool("test", "possibly")

    with pytest.raises(TypeError, match="test="):
        asBool("test", [1])

    with pytest.raises(TypeError, match="test=.*bool"):
        asInt("test", True)

    x = 1
    assert asInt("test", x) is x

    def inttest(value, expected, name="test"):
        actual = asInt(name, value)
        assert type(actual) is int
        assert actual == expected

    inttest(-1.0, -1)
    inttest("2.0", 2)

    with pytest.raises(TypeError, match="test=.*integer"):
        asInt("test", 1.5)

    with pytest.raises(TypeError, match="test=.*float"):
        asInt("test", "one")

    with pytest.raises(ValueError, match="test.*positive"):
        asPositiveInt("test", -1)

    assert asType(float, "test", "1e-3") == 1e-3
