"""
Pedigree graph for inheritance analysis.

Builds an immutable, in-memory view of the individuals of a pedigree and
their parent/child relations. The graph is built once per analysis run and
shared read-only by every per-variant evaluation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from .errors import PedigreeCycleError
from .models import FOUNDER_SENTINEL, AffectedStatus, Diagnostic, Individual, Sex

logger = logging.getLogger(__name__)

_SEX_CODES = {
    "0": Sex.UNKNOWN,
    "1": Sex.MALE,
    "2": Sex.FEMALE,
    "male": Sex.MALE,
    "m": Sex.MALE,
    "female": Sex.FEMALE,
    "f": Sex.FEMALE,
}

_AFFECTED_CODES = {
    "-9": AffectedStatus.UNKNOWN,
    "0": AffectedStatus.UNKNOWN,
    "1": AffectedStatus.UNAFFECTED,
    "2": AffectedStatus.AFFECTED,
}


@dataclass(frozen=True)
class Trio:
    """A child with its registered parents, if any."""

    child: Individual
    father: Individual | None = None
    mother: Individual | None = None

    @property
    def is_complete(self) -> bool:
        return self.father is not None and self.mother is not None

    @property
    def parents(self) -> tuple:
        return tuple(p for p in (self.father, self.mother) if p is not None)


def _parse_code(value: Any, codes: Mapping[str, Any], default: Any) -> tuple:
    """Map a PED code to an enum member; second item is False if it was invalid."""
    if isinstance(value, (Sex, AffectedStatus)):
        return value, True
    if value is None:
        return default, True
    key = str(value).strip().lower()
    if key in ("", "."):
        return default, True
    if key in codes:
        return codes[key], True
    return default, False


def _parent_id(value: Any) -> str:
    if value is None:
        return FOUNDER_SENTINEL
    value = str(value).strip()
    if value in ("", "."):
        return FOUNDER_SENTINEL
    return value


class PedigreeGraph:
    """
    Individuals of a pedigree and the relations between them.

    Use :meth:`build` (records) or :meth:`from_pedigree_data` (the mapping
    returned by :func:`mendelsift.ped_reader.read_pedigree`).
    """

    def __init__(
        self, individuals: Mapping[str, Individual], diagnostics: Iterable[Diagnostic] = ()
    ):
        self._individuals = dict(individuals)
        self.diagnostics = tuple(diagnostics)
        self._trios: dict[str, tuple] = {}
        self._children: dict[str, list] = {}

        for sample_id, ind in self._individuals.items():
            father = ind.father_id if ind.father_id in self._individuals else None
            mother = ind.mother_id if ind.mother_id in self._individuals else None
            if father and mother:
                self._trios[sample_id] = (father, mother)
            for parent in (father, mother):
                if parent:
                    self._children.setdefault(parent, []).append(sample_id)

        self._check_cycles()

    @classmethod
    def build(cls, records: Iterable[Mapping[str, Any] | Individual]) -> "PedigreeGraph":
        """
        Build a pedigree graph from pedigree records.

        Tolerated anomalies (invalid sex or affected codes, duplicate or
        empty sample IDs, dangling parent references) are recorded as
        diagnostics on the graph. A cyclic pedigree raises.

        Parameters
        ----------
        records : Iterable
            Records with keys ``family_id``, ``sample_id``, ``father_id``,
            ``mother_id``, ``sex``, ``affected_status``, or Individual objects

        Returns
        -------
        PedigreeGraph

        Raises
        ------
        PedigreeCycleError
            If an individual is its own ancestor.
        """
        individuals: dict[str, Individual] = {}
        diagnostics: list[Diagnostic] = []

        for record in records:
            if isinstance(record, Individual):
                ind = record
            else:
                ind = cls._individual_from_record(record, diagnostics)
                if ind is None:
                    continue
            if ind.sample_id in individuals:
                diagnostics.append(
                    Diagnostic(
                        "duplicate_sample",
                        f"Duplicate pedigree record for '{ind.sample_id}'; keeping the first",
                        sample_id=ind.sample_id,
                    )
                )
                continue
            individuals[ind.sample_id] = ind

        for ind in individuals.values():
            for role, parent_id in (("father", ind.father_id), ("mother", ind.mother_id)):
                if parent_id != FOUNDER_SENTINEL and parent_id not in individuals:
                    diagnostics.append(
                        Diagnostic(
                            "unregistered_parent",
                            f"{role.capitalize()} '{parent_id}' of '{ind.sample_id}' is not in "
                            "the pedigree; treated as an ungenotyped founder",
                            sample_id=ind.sample_id,
                        )
                    )

        for diag in diagnostics:
            logger.warning(diag.message)

        graph = cls(individuals, diagnostics)
        logger.debug(
            f"Built pedigree graph with {len(graph)} individuals and {len(graph._trios)} "
            "complete trios"
        )
        return graph

    @classmethod
    def from_pedigree_data(
        cls, pedigree_data: Mapping[str, Mapping[str, Any]] | None
    ) -> "PedigreeGraph":
        """Build a graph from a sample-ID-keyed mapping of PED records."""
        if not pedigree_data:
            return cls({})
        records = []
        for sample_id, info in pedigree_data.items():
            record = dict(info)
            record.setdefault("sample_id", sample_id)
            records.append(record)
        return cls.build(records)

    @staticmethod
    def _individual_from_record(
        record: Mapping[str, Any], diagnostics: list
    ) -> Individual | None:
        sample_id = str(record.get("sample_id") or "").strip()
        if not sample_id:
            diagnostics.append(
                Diagnostic("empty_sample_id", "Skipping record with empty sample ID")
            )
            return None

        sex, valid = _parse_code(record.get("sex"), _SEX_CODES, Sex.UNKNOWN)
        if not valid:
            diagnostics.append(
                Diagnostic(
                    "invalid_sex",
                    f"Invalid sex code {record.get('sex')!r} for '{sample_id}'; using unknown",
                    sample_id=sample_id,
                )
            )
        affected, valid = _parse_code(
            record.get("affected_status"), _AFFECTED_CODES, AffectedStatus.UNKNOWN
        )
        if not valid:
            diagnostics.append(
                Diagnostic(
                    "invalid_affected_status",
                    f"Invalid affected status {record.get('affected_status')!r} for "
                    f"'{sample_id}'; using unknown",
                    sample_id=sample_id,
                )
            )

        return Individual(
            sample_id=sample_id,
            family_id=str(record.get("family_id") or ""),
            father_id=_parent_id(record.get("father_id")),
            mother_id=_parent_id(record.get("mother_id")),
            sex=sex,
            affected_status=affected,
        )

    def _check_cycles(self) -> None:
        # Iterative DFS over child -> parent edges; grey nodes are on the current path.
        white, grey, black = 0, 1, 2
        state = {sample_id: white for sample_id in self._individuals}

        for start in self._individuals:
            if state[start] != white:
                continue
            stack = [(start, iter(self.get_parent_ids(start)))]
            path = [start]
            state[start] = grey
            while stack:
                node, parents = stack[-1]
                parent = next(parents, None)
                if parent is None:
                    state[node] = black
                    stack.pop()
                    path.pop()
                    continue
                if state[parent] == grey:
                    cycle = path[path.index(parent):] + [parent]
                    logger.error(f"Cyclic pedigree detected at sample '{parent}'")
                    raise PedigreeCycleError(parent, cycle)
                if state[parent] == white:
                    state[parent] = grey
                    path.append(parent)
                    stack.append((parent, iter(self.get_parent_ids(parent))))

    def __len__(self) -> int:
        return len(self._individuals)

    def __contains__(self, sample_id: object) -> bool:
        return sample_id in self._individuals

    def __iter__(self) -> Iterator[Individual]:
        return iter(self._individuals.values())

    @property
    def sample_ids(self) -> list:
        return list(self._individuals)

    def get_individual(self, sample_id: str) -> Individual | None:
        return self._individuals.get(sample_id)

    def get_parent_ids(self, sample_id: str) -> tuple:
        """Return the IDs of the registered parents of a sample."""
        ind = self._individuals.get(sample_id)
        if ind is None:
            return ()
        return tuple(
            pid
            for pid in (ind.father_id, ind.mother_id)
            if pid != FOUNDER_SENTINEL and pid in self._individuals
        )

    def get_parents(self, sample_id: str) -> tuple:
        """Return the registered parents of a sample as Individuals."""
        return tuple(self._individuals[pid] for pid in self.get_parent_ids(sample_id))

    def get_trio(self, sample_id: str) -> Trio:
        """
        Get the trio of a sample.

        Parents are only included when registered in the pedigree.

        Raises
        ------
        KeyError
            If the sample is not in the pedigree.
        """
        child = self._individuals[sample_id]
        father = mother = None
        if child.father_id != FOUNDER_SENTINEL:
            father = self._individuals.get(child.father_id)
        if child.mother_id != FOUNDER_SENTINEL:
            mother = self._individuals.get(child.mother_id)
        return Trio(child, father, mother)

    def has_complete_trio(self, sample_id: str) -> bool:
        return sample_id in self._trios

    def is_founder(self, sample_id: str) -> bool:
        """
        True if neither parent of the sample is registered in the pedigree.

        Unregistered ids, such as a dangling parent reference, count as
        ungenotyped founders.
        """
        if sample_id not in self._individuals:
            return True
        return not self.get_parent_ids(sample_id)

    def get_children(self, sample_id: str) -> list:
        return list(self._children.get(sample_id, []))

    def get_ancestors(self, sample_id: str) -> set:
        """All registered ancestors of a sample."""
        ancestors: set = set()
        pending = list(self.get_parent_ids(sample_id))
        while pending:
            parent = pending.pop()
            if parent in ancestors:
                continue
            ancestors.add(parent)
            pending.extend(self.get_parent_ids(parent))
        return ancestors

    def get_family_members(self, sample_id: str) -> list:
        """
        All individuals sharing the sample's family ID, in pedigree order.

        Individuals without a family ID are grouped with their relatives
        through parent links instead.
        """
        ind = self._individuals.get(sample_id)
        if ind is None:
            return []
        if ind.family_id:
            return [
                sid for sid, other in self._individuals.items() if other.family_id == ind.family_id
            ]

        related = {sample_id}
        pending = [sample_id]
        while pending:
            current = pending.pop()
            for other in list(self.get_parent_ids(current)) + self.get_children(current):
                if other not in related:
                    related.add(other)
                    pending.append(other)
        return [sid for sid in self._individuals if sid in related]

    def affected_samples(self) -> list:
        return [sid for sid, ind in self._individuals.items() if ind.is_affected]

    def is_affected(self, sample_id: str) -> bool:
        ind = self._individuals.get(sample_id)
        return ind is not None and ind.is_affected

    def is_male(self, sample_id: str) -> bool:
        ind = self._individuals.get(sample_id)
        return ind is not None and ind.is_male

    def is_female(self, sample_id: str) -> bool:
        ind = self._individuals.get(sample_id)
        return ind is not None and ind.is_female
