"""TF-IDF vectors over a small hand-authored taxonomy.

Each taxonomy label is a "seed document". IDF is computed across the seed
documents only, with smoothing::

    idf(t) = ln(K / (1 + df(t))) + 1

so a term present in every seed still carries a small positive weight. Input
text is projected onto the seed vocabulary; terms the taxonomy never mentions
are dropped before scoring.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

Tokenizer = Callable[[str], List[str]]
Vector = Mapping[str, float]


def term_frequency(tokens: Sequence[str]) -> Dict[str, float]:
    """Raw counts normalized by the most frequent term."""
    counts = Counter(tokens)
    peak = max(counts.values(), default=1)
    return {term: count / peak for term, count in counts.items()}


def _weigh(tokens: Sequence[str], idf: Mapping[str, float]) -> Dict[str, float]:
    tf = term_frequency(tokens)
    return {term: tf[term] * idf[term] for term in tf if term in idf}


def cosine_similarity(a: Vector, b: Vector) -> float:
    dot = sum(weight * b.get(term, 0.0) for term, weight in a.items())
    mag_a = math.sqrt(sum(w * w for w in a.values()))
    mag_b = math.sqrt(sum(w * w for w in b.values()))
    denom = mag_a * mag_b
    return 0.0 if denom == 0 else dot / denom


@dataclass(frozen=True)
class TfidfModel:
    """Immutable seed vectors + IDF table for one taxonomy."""

    tokenizer: Tokenizer
    idf: Mapping[str, float]
    seed_vectors: Mapping[str, Vector]
    labels: Tuple[str, ...] = field(default=())

    @classmethod
    def build(cls, taxonomy: Mapping[str, str], tokenizer: Tokenizer) -> "TfidfModel":
        seed_docs = {label: tokenizer(seed_text) for label, seed_text in taxonomy.items()}
        doc_count = len(seed_docs)

        doc_freq: Counter = Counter()
        for tokens in seed_docs.values():
            doc_freq.update(set(tokens))

        idf = {term: math.log(doc_count / (1 + df)) + 1 for term, df in doc_freq.items()}

        seed_vectors = {label: MappingProxyType(_weigh(tokens, idf)) for label, tokens in seed_docs.items()}
        return cls(
            tokenizer=tokenizer,
            idf=MappingProxyType(idf),
            seed_vectors=MappingProxyType(seed_vectors),
            labels=tuple(taxonomy),
        )

    def vectorize(self, tokens: Sequence[str]) -> Dict[str, float]:
        return _weigh(tokens, self.idf)

    def score(self, text: str) -> List[Tuple[str, float]]:
        """Cosine similarity of ``text`` against every label, in taxonomy order."""
        tokens = self.tokenizer(text)
        if not tokens:
            return []
        vector = self.vectorize(tokens)
        return [(label, cosine_similarity(vector, seed)) for label, seed in self.seed_vectors.items()]
