"""Quality-based trimming and fragmentation of reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..io.records import SequenceRecord

AMBIGUOUS_CHARS = frozenset("Nn")

MODE_SPLIT = 1
MODE_HOMOPOLYMERS = 2
MODE_AMBIGUOUS = 4


@dataclass(frozen=True, slots=True)
class TrimPolicy:
    """Settings that decide which parts of a read are retained.

    min_quality: lowest Phred score a base may have to start or extend a fragment.
    min_length: shortest retained fragment, not counting tolerated ambiguous bases.
    split: keep every acceptable fragment instead of only the first one.
    homopolymers: let a low-quality base extend a fragment when it repeats the
        previous retained base.
    ambiguous: let low-quality ``N`` bases extend a fragment.
    tag: 5' tag every read must start with; reads are trimmed past it.
    tag_mismatches: mismatches tolerated between the read prefix and ``tag``.
    """

    min_quality: int = 20
    min_length: int = 50
    split: bool = False
    homopolymers: bool = False
    ambiguous: bool = False
    tag: str = ""
    tag_mismatches: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.min_quality, bool) or not isinstance(self.min_quality, int):
            raise ValueError(f"min_quality must be an integer, got {self.min_quality!r}")
        if self.min_length < 1:
            raise ValueError(f"min_length must be at least 1, got {self.min_length}")
        if self.tag_mismatches < 0:
            raise ValueError(f"tag_mismatches cannot be negative, got {self.tag_mismatches}")

    @classmethod
    def from_mode(cls, mode: int, **kwargs) -> "TrimPolicy":
        """Build a policy from the ``split | homopolymers | ambiguous`` bit mask."""

        if mode < 0 or mode > (MODE_SPLIT | MODE_HOMOPOLYMERS | MODE_AMBIGUOUS):
            raise ValueError(f"mode must be between 0 and 7, got {mode}")
        return cls(
            split=bool(mode & MODE_SPLIT),
            homopolymers=bool(mode & MODE_HOMOPOLYMERS),
            ambiguous=bool(mode & MODE_AMBIGUOUS),
            **kwargs,
        )

    @property
    def mode(self) -> int:
        return (
            (MODE_SPLIT if self.split else 0)
            | (MODE_HOMOPOLYMERS if self.homopolymers else 0)
            | (MODE_AMBIGUOUS if self.ambiguous else 0)
        )

    def describe_mode(self) -> str:
        return "/".join(
            [
                "split" if self.split else "truncate",
                "tolerate homopolymers" if self.homopolymers else "don't tolerate homopolymers",
                "tolerate ambigs" if self.ambiguous else "don't tolerate ambigs",
            ]
        )


@dataclass(frozen=True, slots=True)
class Fragment:
    """Half-open ``[start, end)`` slice of a read kept after trimming."""

    start: int
    end: int
    ambiguous: int = 0

    @property
    def length(self) -> int:
        """Retained length, tolerated ambiguous bases excluded."""

        return self.end - self.start - self.ambiguous


def tag_mismatches(sequence: str, tag: str) -> int:
    """Count case-insensitive mismatches between the read prefix and ``tag``."""

    mismatches = 0
    for idx, expected in enumerate(tag):
        if idx >= len(sequence) or sequence[idx].upper() != expected.upper():
            mismatches += 1
    return mismatches


def extract_fragments(record: SequenceRecord, policy: TrimPolicy) -> List[Fragment]:
    """Return the fragments of ``record`` that pass ``policy``, left to right."""

    sequence = record.sequence
    quality = record.quality
    length = record.length
    cursor = 0

    if policy.tag:
        if tag_mismatches(sequence, policy.tag) > policy.tag_mismatches:
            return []
        cursor = len(policy.tag)

    # latest position a fragment may start at, not an exclusive bound
    max_start = length - policy.min_length
    fragments: List[Fragment] = []

    while True:
        while cursor <= max_start and quality[cursor] < policy.min_quality:
            cursor += 1
        if cursor > max_start:
            break

        start = cursor
        ambiguous = 0
        last = ""
        while cursor < length:
            base = sequence[cursor].upper()
            if quality[cursor] < policy.min_quality:
                if policy.homopolymers and base == last:
                    cursor += 1
                    continue
                if policy.ambiguous and base in AMBIGUOUS_CHARS:
                    ambiguous += 1
                    cursor += 1
                    continue
                break
            last = base
            cursor += 1

        if cursor - start - ambiguous < policy.min_length:
            continue

        fragments.append(Fragment(start, cursor, ambiguous))
        if not policy.split:
            break

    return fragments
