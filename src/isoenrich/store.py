"""
Classes for receiving sweep results

The orchestrator hands every computed row to a store. Report writers
for specific file formats are expected to subclass :class:`BaseStore`.
"""

from abc import ABC, abstractmethod
import logging
import typing

__all__ = ["BaseStore", "MemoryStore"]

__logger__ = logging.getLogger("isoenrich.store")


class BaseStore(ABC):
    """Abstract base class for storing rows produced by a sweep"""

    @abstractmethod
    def beforeMaterial(self, material, request, snapshot) -> None:
        """Called once per material before any row is written

        Parameters
        ----------
        material : isoenrich.materials.Material
            Material about to be swept
        request : isoenrich.sweep.EnrichmentRequest
            Request driving the sweep
        snapshot : isoenrich.propagate.ReferenceSnapshot
            Reference state used for density change coefficients

        """

    @abstractmethod
    def writeRow(self, row) -> None:
        """Store a single point of the sweep

        Parameters
        ----------
        row : isoenrich.sweep.SweepRow
            Results for one material at one enrichment level

        """

    def afterMaterial(self, material) -> None:
        """Called once per material after the last row"""


class MemoryStore(BaseStore):
    """Collect rows in memory, grouped by material name

    Attributes
    ----------
    rows : dict of str to list of SweepRow
        Rows in the order they were written
    snapshots : dict of str to ReferenceSnapshot
        Reference used for each material
    request : EnrichmentRequest or None
        Most recent request

    """

    def __init__(self):
        self.rows = {}
        self.snapshots = {}
        self.request = None

    def __len__(self):
        return sum(len(rows) for rows in self.rows.values())

    def beforeMaterial(self, material, request, snapshot):
        self.request = request
        self.snapshots[material.name] = snapshot
        self.rows[material.name] = []

    def writeRow(self, row):
        self.rows.setdefault(row.material, []).append(row)

    def afterMaterial(self, material):
        __logger__.debug(
            "Stored %d rows for %s", len(self.rows.get(material.name, ())),
            material.name,
        )

    def allRows(self) -> typing.List:
        return [row for rows in self.rows.values() for row in rows]
