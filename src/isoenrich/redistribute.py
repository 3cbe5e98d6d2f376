"""
Isotope redistribution
======================

Move fraction between the isotope of interest and the remaining
isotopes of an element, respecting per-isotope depletion floors.
"""

import logging
import numbers
from collections import namedtuple
import typing

import numpy

from isoenrich.constants import FractionType, DepletionOrder
from isoenrich.elements import Element
from isoenrich.exceptions import ConfigurationError

__all__ = ["Redistribution", "depletionSequence", "redistribute"]

__logger__ = logging.getLogger("isoenrich.redistribute")

OrderLike = typing.Union[DepletionOrder, str, typing.Sequence[int]]


class Redistribution(
    namedtuple("Redistribution", "aborted requested achieved shortfall")
):
    """Outcome of a single call to :func:`redistribute`

    Parameters
    ----------
    aborted : bool
        True if the goal was below the floor of the isotope of
        interest and nothing was changed
    requested : float
        Goal fraction of the isotope of interest
    achieved : float
        Fraction of the isotope of interest after redistribution
    shortfall : float
        Change that could not be supplied because donors reached
        their floors. Zero when the goal was fully reached

    """

    __slots__ = ()

    @property
    def partial(self) -> bool:
        return not self.aborted and self.shortfall > 0


def depletionSequence(
    element: Element,
    massNumber: int,
    order: OrderLike = DepletionOrder.ASCENDING,
    rng: typing.Optional[numpy.random.Generator] = None,
) -> typing.Tuple[int, ...]:
    """Mass numbers of donor isotopes in the order they are depleted

    Parameters
    ----------
    element : Element
        Element containing the isotope of interest
    massNumber : int
        Mass number of the isotope of interest, excluded from the
        sequence
    order : DepletionOrder or str or sequence of int, optional
        Ascending or descending mass number, a random permutation,
        or an explicit sequence of mass numbers. An explicit
        sequence must contain every other isotope exactly once
    rng : numpy.random.Generator, optional
        Source of the random permutation. A new, unseeded generator
        is created if not given and ``order`` is random

    Returns
    -------
    tuple of int

    Examples
    --------
    >>> from isoenrich.data import defaultRegistry
    >>> mo = defaultRegistry().element("Mo")
    >>> depletionSequence(mo, 100, "descending")
    (98, 97, 96, 95, 94, 92)

    """
    others = tuple(a for a in element.massNumbers if a != massNumber)
    if len(others) == len(element.massNumbers):
        raise ConfigurationError(
            f"{element.symbol}{massNumber} is not an isotope of {element.symbol}"
        )

    if not isinstance(order, (str, DepletionOrder)):
        explicit = tuple(order)
        if sorted(explicit) != sorted(others):
            raise ConfigurationError(
                f"Explicit depletion order {explicit} must contain each of "
                f"{others} exactly once"
            )
        return explicit

    order = DepletionOrder.fromStr(order)
    if order is DepletionOrder.ASCENDING:
        return others
    if order is DepletionOrder.DESCENDING:
        return others[::-1]
    if rng is None:
        rng = numpy.random.default_rng()
    return tuple(int(x) for x in rng.permutation(others))


def redistribute(
    element: Element,
    massNumber: int,
    goal: float,
    fractionType: FractionType,
    order: OrderLike = DepletionOrder.ASCENDING,
    rng: typing.Optional[numpy.random.Generator] = None,
    verbose: bool = False,
) -> Redistribution:
    """Set the fraction of one isotope, balancing with the others

    When enriching, donors are depleted one at a time in the
    requested order, each down to its floor, until the change is
    supplied or all donors are exhausted. When depleting, the whole
    surplus is handed to the first isotope in the order.

    Only the fractions of ``fractionType`` are modified. Reconciling
    the other fraction type and the molar mass is left to the caller.

    Parameters
    ----------
    element : Element
        Element to modify in place
    massNumber : int
        Mass number of the isotope of interest
    goal : float
        Requested fraction of the isotope of interest
    fractionType : FractionType
        Type of ``goal`` and of the fractions that are redistributed
    order : DepletionOrder or str or sequence of int, optional
        Depletion order passed to :func:`depletionSequence`
    rng : numpy.random.Generator, optional
        Generator used for a random order
    verbose : bool, optional
        Log each step at info rather than debug level

    Returns
    -------
    Redistribution

    """
    if not isinstance(goal, numbers.Real) or isinstance(goal, bool):
        raise TypeError(f"Goal fraction must be real, not {type(goal)}")
    if not 0 <= goal <= 1:
        raise ConfigurationError(f"Goal fraction {goal} must be between zero and one")

    fractionType = FractionType.fromStr(fractionType)
    level = logging.INFO if verbose else logging.DEBUG
    target = element[massNumber]
    current = target.fraction(fractionType)

    if goal < target.floor:
        __logger__.info(
            "Goal %s for %s is below its floor %s. Skipping",
            goal, target.name, target.floor,
        )
        return Redistribution(True, goal, current, 0.0)

    sequence = depletionSequence(element, massNumber, order, rng)
    delta = goal - current
    remaining = delta
    __logger__.log(
        level, "Moving %s %s fraction to %s from %s",
        delta, fractionType.value, target.name, sequence,
    )

    for donorA in sequence:
        donor = element[donorA]
        have = donor.fraction(fractionType)
        if remaining < 0:
            # All surplus goes to the first isotope in the order
            donor.setFraction(fractionType, have - remaining)
            __logger__.log(level, "%s received %s", donor.name, -remaining)
            remaining = 0.0
            break
        if remaining == 0:
            break
        donatable = have - donor.floor
        if donatable <= 0:
            __logger__.log(level, "%s already at floor %s", donor.name, donor.floor)
            continue
        if remaining >= donatable:
            donor.setFraction(fractionType, donor.floor)
            remaining -= donatable
        else:
            donor.setFraction(fractionType, have - remaining)
            remaining = 0.0
        __logger__.log(
            level, "%s now %s", donor.name, donor.fraction(fractionType)
        )

    target.setFraction(fractionType, current + delta - remaining)
    result = Redistribution(
        False, goal, target.fraction(fractionType), max(remaining, 0.0)
    )
    if result.partial:
        __logger__.warning(
            "Donors of %s exhausted: reached %s of requested %s",
            target.name, result.achieved, goal,
        )
    return result
