"""Length-distribution statistics and the end-of-run summary."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List

import pandas as pd

if TYPE_CHECKING:
    from .runner import TrimRequest, TrimResult


@dataclass(slots=True)
class LengthStats:
    count: int
    mean: float
    median: float
    variance: float
    std: float
    minimum: int
    p2_5: int
    p97_5: int
    maximum: int

    @classmethod
    def from_lengths(cls, lengths: Iterable[int]) -> "LengthStats":
        values = pd.Series(sorted(lengths), dtype="int64")
        count = len(values)
        if count == 0:
            return cls(0, 0.0, 0.0, 0.0, 0.0, 0, 0, 0, 0)
        # a single observation has no spread
        variance = float(values.var(ddof=1)) if count > 1 else 0.0
        return cls(
            count=count,
            mean=float(values.mean()),
            median=float(values.median()),
            variance=variance,
            std=math.sqrt(variance),
            minimum=int(values.iloc[0]),
            # percentiles are read off the sorted values by index
            p2_5=int(values.iloc[int(0.025 * count)]),
            p97_5=int(values.iloc[int(0.975 * count)]),
            maximum=int(values.iloc[-1]),
        )

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def format_lines(self, title: str) -> List[str]:
        return [
            title,
            f"    mean:                {self.mean:g}",
            f"    median:              {self.median:g}",
            f"    variance             {self.variance:g}",
            f"    standard deviation:  {self.std:g}",
            f"    min:                 {self.minimum}",
            f"    2.5%:                {self.p2_5}",
            f"    97.5%:               {self.p97_5}",
            f"    max:                 {self.maximum}",
        ]


def format_report(request: "TrimRequest", result: "TrimResult") -> List[str]:
    """Render run settings, counts and both length distributions as text lines."""

    policy = request.policy
    lines = ["run settings:"]
    if request.fastq is not None:
        lines.append(f"    input fastq:         {request.fastq}")
    else:
        lines.append(f"    input fasta:         {request.fasta}")
        lines.append(f"    input qual:          {request.qual}")
    lines.extend(
        [
            f"    min q-score:         {policy.min_quality}",
            f"    min fragment length: {policy.min_length}",
            f"    run mode:            {policy.mode} ({policy.describe_mode()})",
        ]
    )
    if policy.tag:
        lines.append(f"    5' tag:              {policy.tag}")
        lines.append(f"    max tag mismatches:  {policy.tag_mismatches}")
    lines.extend(
        [
            "",
            "run summary:",
            f"    original reads:      {result.total_reads}",
            f"    contributing reads:  {result.contributing_reads}",
            f"    retained fragments:  {result.retained_fragments}",
            "",
        ]
    )
    lines.extend(result.read_stats.format_lines("original read length distribution:"))
    lines.append("")
    lines.extend(result.fragment_stats.format_lines("retained fragment length distribution:"))
    return lines
