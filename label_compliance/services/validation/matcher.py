"""
Requirement matching against normalized evidence.

Layered, deterministic string matching. Each layer is tried in order and the
first success wins:

1. Exact containment: the target occurs in a text item, or the target and a
   symbol class contain one another.
2. Canonical containment: the target with separators rewritten to ``_`` or
   to a space, against the symbol classes.
3. Synonym family: any member of the target's synonym family (or of the
   requirement's own synonyms) is a symbol class.
4. Keyword overlap: the share of target words (longer than two characters)
   found in the evidence reaches KEYWORD_MATCH_RATIO.
"""
import logging
import re
from typing import FrozenSet, Iterable, List

from label_compliance.core.constants import KEYWORD_MATCH_RATIO, MIN_KEYWORD_LENGTH
from label_compliance.models.evidence_models import NormalizedEvidence
from label_compliance.models.validation_models import MatchResult, MatchStrategy
from label_compliance.services.synonyms import DEFAULT_SYNONYM_TABLE, SynonymTable, canonical_form

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s_\-]+")
_WORDS = re.compile(r"[^\W_]+")

NOT_FOUND = MatchResult(found=False)


class Matcher:
    """Decide whether a requirement target is present in the evidence."""

    def __init__(
        self,
        synonyms: SynonymTable = DEFAULT_SYNONYM_TABLE,
        keyword_ratio: float = KEYWORD_MATCH_RATIO,
        min_keyword_length: int = MIN_KEYWORD_LENGTH
    ):
        """
        Initialize matcher.

        Args:
            synonyms: Shared symbol synonym table
            keyword_ratio: Minimum share of target words for the keyword fallback
            min_keyword_length: Shortest word that counts as a keyword
        """
        self.synonyms = synonyms
        self.keyword_ratio = keyword_ratio
        self.min_keyword_length = min_keyword_length

    def split_keywords(self, text: str) -> List[str]:
        """Words of ``text`` long enough to count as keywords."""
        return [w for w in _WORDS.findall(text.lower()) if len(w) >= self.min_keyword_length]

    # ============================================================================
    # LAYERS
    # ============================================================================

    def _symbol_overlap(self, target: str, symbol_classes: FrozenSet[str]) -> bool:
        return any(
            target in symbol or symbol in target
            for symbol in symbol_classes
        )

    def match_exact(self, target: str, evidence: NormalizedEvidence) -> bool:
        """Layer 1: target in a text item, or target/symbol containment."""
        if any(target in text for text in evidence.texts):
            return True
        return self._symbol_overlap(target, evidence.symbol_classes)

    def match_canonical(self, target: str, evidence: NormalizedEvidence) -> bool:
        """Layer 2: separator-rewritten target against symbol classes."""
        variants = {_SEPARATORS.sub("_", target), canonical_form(target)} - {target}
        return any(self._symbol_overlap(variant, evidence.symbol_classes) for variant in variants)

    def match_synonym(
        self,
        target: str,
        evidence: NormalizedEvidence,
        extra_synonyms: Iterable[str] = ()
    ) -> bool:
        """Layer 3: a member of the target's synonym family is a symbol class."""
        members = set(self.synonyms.expand(target))
        members.update(s.strip().lower() for s in extra_synonyms if isinstance(s, str) and s.strip())
        if not members:
            return False

        detected = {canonical_form(symbol) for symbol in evidence.symbol_classes}
        return any(canonical_form(member) in detected for member in members)

    def keyword_ratio_for(self, target: str, evidence: NormalizedEvidence) -> float:
        """
        Layer 4 score: share of target keywords present in the evidence.

        A target word counts when it is a whole evidence keyword or a substring
        of any text item or symbol class.
        """
        target_words = self.split_keywords(target)
        if not target_words:
            return 0.0

        items = list(evidence.texts) + list(evidence.symbol_classes)
        keywords = {word for item in items for word in self.split_keywords(item)}

        matched = [
            word for word in target_words
            if word in keywords or any(word in item for item in items)
        ]
        return len(matched) / len(target_words)

    # ============================================================================
    # PUBLIC API
    # ============================================================================

    def match(
        self,
        target: str,
        evidence: NormalizedEvidence,
        extra_synonyms: Iterable[str] = ()
    ) -> MatchResult:
        """
        Match one requirement target against the evidence.

        Args:
            target: Text pattern or symbol class name
            evidence: Normalized evidence sets
            extra_synonyms: Requirement-specific names equivalent to the target

        Returns:
            MatchResult naming the layer that succeeded. An empty target or
            empty evidence is never found.
        """
        if not isinstance(target, str) or not target.strip():
            return NOT_FOUND
        if evidence.is_empty:
            return NOT_FOUND

        target = target.strip().lower()

        if self.match_exact(target, evidence):
            result = MatchResult(found=True, strategy=MatchStrategy.EXACT, match_ratio=1.0)
        elif self.match_canonical(target, evidence):
            result = MatchResult(found=True, strategy=MatchStrategy.CANONICAL, match_ratio=1.0)
        elif self.match_synonym(target, evidence, extra_synonyms):
            result = MatchResult(found=True, strategy=MatchStrategy.SYNONYM, match_ratio=1.0)
        else:
            ratio = self.keyword_ratio_for(target, evidence)
            if ratio >= self.keyword_ratio:
                result = MatchResult(found=True, strategy=MatchStrategy.KEYWORD, match_ratio=ratio)
            else:
                result = MatchResult(found=False, match_ratio=ratio)

        logger.debug(
            f"Match '{target}': found={result.found} strategy={result.strategy} "
            f"ratio={result.match_ratio:.2f}"
        )
        return result

    def is_found(self, target: str, evidence: NormalizedEvidence, extra_synonyms: Iterable[str] = ()) -> bool:
        return self.match(target, evidence, extra_synonyms).found
