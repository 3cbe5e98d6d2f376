import math

import pytest

from isoenrich import FractionType, ConfigurationError
from isoenrich.internal import NuclideKey
from isoenrich.propagate import captureReference
from isoenrich.reactions import (
    PARTICLES, ReactionChannel, ProductFilter, generateChannels, groupChannels,
    getProjectiles,
)

MO100 = NuclideKey("Mo", 100, 0)


def channelsOf(channels, parent, projectile):
    return {
        ch.label: ch for ch in channels
        if ch.parent == parent and ch.projectile == projectile
    }


def test_particles():
    assert PARTICLES["a"].nucleons == 4
    assert PARTICLES["ann"].protons == 2
    assert PARTICLES["ann"].neutrons == 4
    assert PARTICLES["app"].nucleons == 6
    assert PARTICLES["np"][2:] == PARTICLES["pn"][2:] == PARTICLES["d"][2:]


def test_getProjectiles():
    assert getProjectiles("g n p") == ("g", "n", "p")
    assert getProjectiles("n, P, n") == ("n", "p")
    assert getProjectiles("none") == ()
    assert getProjectiles(None) == ()
    assert getProjectiles(["g"]) == ("g",)
    with pytest.raises(ConfigurationError, match="not supported"):
        getProjectiles("d")


def test_neutronChannels(momet):
    captureReference(momet, FractionType.AMOUNT)
    channels = generateChannels(momet, "n")
    mo100 = channelsOf(channels, MO100, "n")

    assert mo100["Mo100(n,2n)"].product == (42, 99)
    assert mo100["Mo100(n,2n)"].productName == "Mo99"
    assert mo100["Mo100(n,3n)"].product == (42, 98)
    assert mo100["Mo100(n,g)"].product == (42, 101)
    assert mo100["Mo100(n,p)"].product == (41, 100)
    assert mo100["Mo100(n,2p)"].product == (40, 99)
    assert mo100["Mo100(n,3p)"].product == (39, 98)
    assert mo100["Mo100(n,d)"].product == (41, 99)
    assert mo100["Mo100(n,t)"].product == (41, 98)
    assert mo100["Mo100(n,a)"].product == (40, 97)
    assert mo100["Mo100(n,np)"].product == (41, 99)
    assert mo100["Mo100(n,an)"].product == (40, 96)
    assert mo100["Mo100(n,ann)"].product == (40, 95)
    assert mo100["Mo100(n,ap)"].product == (39, 96)
    assert mo100["Mo100(n,app)"].product == (38, 95)
    # elastic scattering is not a channel
    assert "Mo100(n,n)" not in mo100
    assert len(mo100) == 14
    assert all(ch.dcc == 1.0 for ch in channels)


def test_photonAndProtonChannels(momet):
    captureReference(momet, FractionType.AMOUNT)
    channels = generateChannels(momet, ["g", "p"])

    photon = channelsOf(channels, MO100, "g")
    assert photon["Mo100(g,n)"].product == (42, 99)
    assert photon["Mo100(g,a)"].product == (40, 96)
    assert photon["Mo100(g,np)"].product == (41, 98)
    assert photon["Mo100(g,3n)"].product == (42, 97)
    assert photon["Mo100(g,p)"].product == (41, 99)
    assert "Mo100(g,g)" not in photon
    assert "Mo100(g,2p)" not in photon
    assert len(photon) == 6

    proton = channelsOf(channels, MO100, "p")
    assert proton["Mo100(p,2n)"].product == (43, 99)
    assert proton["Mo100(p,2p)"].product == (41, 99)
    assert proton["Mo100(p,pn)"].product == (42, 99)
    assert "Mo100(p,3p)" not in proton
    assert "Mo100(p,p)" not in proton


def test_channelDccs(momet):
    captureReference(momet, FractionType.AMOUNT)
    momet.isotopeRecords[MO100].dcc = 2.5
    channels = generateChannels(momet, "n")
    assert {ch.dcc for ch in channels if ch.parent == MO100} == {2.5}

    momet.resetDerived()
    assert all(ch.dcc is None for ch in generateChannels(momet, "g"))


def test_grouping(momet):
    captureReference(momet, FractionType.AMOUNT)
    grouped = groupChannels(generateChannels(momet, "n p"))

    assert list(grouped) == ["n", "p"]
    products = list(grouped["n"])
    assert products == sorted(products)

    mo99 = grouped["n"][(42, 99)]
    labels = [ch.label for ch in mo99]
    assert labels == sorted(labels)
    assert "Mo100(n,2n)" in labels
    assert "Mo98(n,g)" in labels

    tc99 = grouped["p"][(43, 99)]
    assert [ch.label for ch in tc99] == ["Mo100(p,2n)", "Mo98(p,g)"]


def test_productFilter():
    pf = ProductFilter()
    # Tc99 ground state lives too long, but Tc99m is shown
    assert pf.candidates(43, 99) == [(NuclideKey("Tc", 99, 1), 6.01)]
    assert pf.candidates(42, 99) == [(NuclideKey("Mo", 99, 0), 65.94)]
    # stable products are hidden by default
    assert pf.candidates(42, 98) == []
    # too short
    assert pf.candidates(42, 101) == [(NuclideKey("Mo", 101, 0), 0.2435)]
    assert pf.candidates(42, 103) == []

    withStable = ProductFilter(showStable=True)
    assert withStable.candidates(42, 98) == [(NuclideKey("Mo", 98, 0), math.inf)]

    unknown = pf.candidates(50, 120)
    assert len(unknown) == 1
    assert unknown[0][0] == NuclideKey("Sn", 120, 0)
    assert math.isnan(unknown[0][1])

    with pytest.raises(ConfigurationError):
        ProductFilter(minHalfLife=10, maxHalfLife=1)


def test_applyFilter(momet):
    captureReference(momet, FractionType.AMOUNT)
    grouped = groupChannels(generateChannels(momet, "p"))
    kept = ProductFilter().apply(grouped)
    names = [prod.key.name for prod in kept["p"]]
    assert "Tc99_m1" in names
    assert "Tc99" not in names
    tc99m = next(p for p in kept["p"] if p.key.name == "Tc99_m1")
    assert tc99m.halfLife == 6.01
    assert tc99m.channels is grouped["p"][(43, 99)]


def test_strontiumProducts(momet):
    """(n,app) on molybdenum reaches strontium"""
    captureReference(momet, FractionType.AMOUNT)
    grouped = groupChannels(generateChannels(momet, "n"))
    assert {a for z, a in grouped["n"] if z == 38} == {87, 89, 90, 91, 92, 93, 95}

    kept = ProductFilter().apply(grouped)
    strontium = [(p.key.name, p.halfLife) for p in kept["n"] if p.key.symbol == "Sr"]
    # Sr87 is stable, Sr90 too long lived, Sr93 and Sr95 too short
    assert strontium == [
        ("Sr87_m1", 2.803), ("Sr89", 1212.72), ("Sr91", 9.63), ("Sr92", 2.71),
    ]

    withStable = ProductFilter(showStable=True)
    assert withStable.candidates(38, 87) == [
        (NuclideKey("Sr", 87, 0), math.inf), (NuclideKey("Sr", 87, 1), 2.803),
    ]


def test_channelLabel():
    ch = ReactionChannel(MO100, "p", "n", 2, (43, 99), None)
    assert ch.label == "Mo100(p,2n)"
    assert ch.productName == "Tc99"
