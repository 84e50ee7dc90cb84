"""
Symbol synonym families.

Packaging symbols are labelled inconsistently by the detection model and by
requirement authors ("CE", "ce mark", "ce_mark"). A synonym family groups the
accepted spellings of one symbol. The table is immutable and shared by the
evidence normalizer and the matcher.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

_SEPARATORS = re.compile(r"[\s_\-]+")


def canonical_form(name: str) -> str:
    """Lowercase and collapse ``_``, ``-`` and whitespace runs into one space."""
    return _SEPARATORS.sub(" ", name.strip().lower()).strip()


@dataclass(frozen=True)
class SynonymFamily:
    """Accepted spellings of one symbol.

    A name belongs to the family when its canonical form equals a member's
    canonical form, or contains one of the ``triggers``. Short members such
    as ``ce`` or ``tm`` are members only, never triggers, so they do not
    match inside unrelated words.
    """
    canonical: str
    members: FrozenSet[str]
    triggers: FrozenSet[str] = frozenset()

    @property
    def canonical_members(self) -> FrozenSet[str]:
        return frozenset(canonical_form(m) for m in self.members)

    def matches(self, name: str) -> bool:
        form = canonical_form(name)
        if not form:
            return False
        if form in self.canonical_members:
            return True
        return any(trigger in form for trigger in self.triggers)


@dataclass(frozen=True)
class SynonymTable:
    """Ordered, immutable collection of synonym families."""
    families: Tuple[SynonymFamily, ...]

    def families_for(self, name: str) -> Tuple[SynonymFamily, ...]:
        return tuple(family for family in self.families if family.matches(name))

    def family_for(self, name: str) -> Optional[SynonymFamily]:
        """First family the name belongs to, or None."""
        for family in self.families:
            if family.matches(name):
                return family
        return None

    def expand(self, name: str) -> FrozenSet[str]:
        """All members of every family the name belongs to."""
        expanded: set = set()
        for family in self.families_for(name):
            expanded.update(family.members)
        return frozenset(expanded)

    def extended(self, families: Iterable[SynonymFamily]) -> "SynonymTable":
        """Return a new table with extra families appended."""
        return SynonymTable(self.families + tuple(families))


DEFAULT_SYNONYM_TABLE = SynonymTable(families=(
    SynonymFamily(
        canonical="ce_mark",
        members=frozenset({"ce mark", "ce", "ce_mark"}),
        triggers=frozenset({"ce mark"}),
    ),
    SynonymFamily(
        canonical="age_grade",
        members=frozenset({"age grade", "3+", "age_grade"}),
        triggers=frozenset({"age grade", "3+"}),
    ),
    SynonymFamily(
        canonical="mobius_loop",
        members=frozenset({"mobius loop", "mobius", "loop", "recycling"}),
        triggers=frozenset({"mobius", "recycling", "loop"}),
    ),
    SynonymFamily(
        canonical="registered_trademark",
        members=frozenset({"registered trademark", "trademark", "registered", "®", "tm"}),
        triggers=frozenset({"trademark", "registered", "®"}),
    ),
    SynonymFamily(
        canonical="small_parts_warning",
        members=frozenset({"small parts warning", "small parts", "small_parts", "choking hazard"}),
        triggers=frozenset({"small part", "choking hazard"}),
    ),
    SynonymFamily(
        canonical="country_of_origin",
        members=frozenset({"country of origin", "country_of_origin", "made in", "origin"}),
        triggers=frozenset({"country of origin", "made in", "origin"}),
    ),
))
