"""
A k-th order Markov model over characters, for synthesizing text.

"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Union

import numpy as np
from tqdm import tqdm

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


class MarkovModelError(ValueError):
    """Base class for Markov model errors."""


class ConstructionError(MarkovModelError):
    """Raised when a model cannot be built from the given corpus and order."""


class InvalidArgument(MarkovModelError):
    """Raised when a query or generation call gets a malformed argument."""


class KgramNotFound(InvalidArgument):
    """Raised when a well-formed kgram is absent from the model."""


class MarkovModel:
    """Character-level Markov model of order k with cyclic corpus wrap-around."""

    def __init__(self, corpus: str, k: int, rng: RandomSource = None,
                 progress: bool = False):
        """
        Build the frequency table from corpus.
        Args:
            corpus: Training text, treated as cyclic
            k: Order of the model (context length)
            rng: numpy Generator or integer seed used as the default randomness source
            progress: Show a tqdm progress bar over the corpus
        """
        if not isinstance(k, (int, np.integer)) or isinstance(k, bool):
            raise ConstructionError(f"Order must be an integer, got {type(k).__name__}")
        if k < 0:
            raise ConstructionError("Order must be non-negative")
        if not corpus:
            raise ConstructionError("Corpus cannot be empty")
        if len(corpus) < k:
            raise ConstructionError("Text length must be at least k")

        self._k = int(k)
        self._alphabet = ''.join(sorted(set(corpus)))
        self._rng = self._as_generator(rng)
        self._frequencies: Dict[str, Counter] = {}

        n = len(corpus)
        positions = range(n)
        if progress:
            positions = tqdm(positions, desc="Building model", unit="char")

        for i in positions:
            kgram = corpus[i:i + self._k]
            # Wrap around to the front of the corpus
            if i + self._k > n:
                kgram += corpus[:(i + self._k) % n]

            next_char = corpus[(i + self._k) % n]
            self._frequencies.setdefault(kgram, Counter())[next_char] += 1

        logger.info("Built order-%d model: %d chars, %d contexts, alphabet of %d",
                    self._k, n, len(self._frequencies), len(self._alphabet))

    @staticmethod
    def _as_generator(rng: RandomSource) -> np.random.Generator:
        if isinstance(rng, np.random.Generator):
            return rng
        return np.random.default_rng(rng)

    @property
    def order(self) -> int:
        """Order k of the model."""
        return self._k

    @property
    def alphabet(self) -> str:
        """Sorted unique characters of the corpus."""
        return self._alphabet

    def _check_kgram(self, kgram: str) -> None:
        if len(kgram) != self._k:
            raise InvalidArgument(
                f"kgram must be of length k ({self._k}), got {len(kgram)}")

    def _lookup(self, kgram: str) -> Counter:
        self._check_kgram(kgram)
        try:
            return self._frequencies[kgram]
        except KeyError:
            raise KgramNotFound(f"kgram not found in the model: {kgram!r}") from None

    def frequency(self, kgram: str, char: Optional[str] = None) -> int:
        """
        Count occurrences of kgram, or of char following kgram.

        With only kgram, an unknown kgram counts as 0. With char, the kgram
        must be present in the model, otherwise KgramNotFound is raised.
        """
        if char is None:
            self._check_kgram(kgram)
            counts = self._frequencies.get(kgram)
            return sum(counts.values()) if counts else 0

        counts = self._lookup(kgram)
        if len(char) != 1:
            raise InvalidArgument(f"Expected a single character, got {char!r}")
        return counts.get(char, 0)

    def successors(self, kgram: str) -> Dict[str, int]:
        """Return a copy of the successor counts for kgram."""
        return dict(self._lookup(kgram))

    def kgrams(self) -> List[str]:
        """Return the stored kgrams in sorted order."""
        return sorted(self._frequencies)

    def sample_next(self, kgram: str, rng: RandomSource = None) -> str:
        """Draw a random character following kgram, weighted by frequency."""
        counts = self._lookup(kgram)
        generator = self._rng if rng is None else self._as_generator(rng)

        chars = list(counts.keys())
        weights = np.fromiter(counts.values(), dtype=float, count=len(chars))
        probabilities = weights / weights.sum()

        next_char = chars[generator.choice(len(chars), p=probabilities)]
        logger.debug("Sampled %r after %r from %d candidates", next_char, kgram, len(chars))
        return next_char

    def generate(self, kgram: str, length: int, rng: RandomSource = None) -> str:
        """
        Simulate a trajectory through the chain.
        Args:
            kgram: Seed kgram, becomes the first k characters of the result
            length: Total length of the generated text, at least k
            rng: Randomness source for this run (defaults to the model's own)
        Returns:
            Text of exactly `length` characters starting with kgram
        """
        self._lookup(kgram)
        if length < self._k:
            raise InvalidArgument(f"length must be at least k ({self._k}), got {length}")

        generator = self._rng if rng is None else self._as_generator(rng)
        result = list(kgram)

        while len(result) < length:
            # result[-0:] would be the whole list, so slice from an explicit start
            context = ''.join(result[len(result) - self._k:])
            result.append(self.sample_next(context, generator))

        return ''.join(result)

    def get_stats(self) -> Dict:
        """Return basic statistics about the model."""
        total_transitions = sum(sum(counter.values()) for counter in self._frequencies.values())
        return {
            "contexts": len(self._frequencies),
            "total_transitions": total_transitions,
            "avg_transitions_per_context": total_transitions / len(self._frequencies)
        }

    def __str__(self) -> str:
        lines = [
            f"Markov Model Order: {self._k}",
            f"Alphabet: {' '.join(self._alphabet)}",
            "Frequencies:",
        ]
        for kgram in self.kgrams():
            counts = self._frequencies[kgram]
            breakdown = ', '.join(f"{c}->{n}" for c, n in sorted(counts.items()))
            lines.append(f"{kgram}: {breakdown} | total: {sum(counts.values())}")
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"MarkovModel(order={self._k}, contexts={len(self._frequencies)})"
