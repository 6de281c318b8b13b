"""Structured evaluation report builder.

Aggregates known-answer checks, roundtrip tests and avalanche measurements
into a single serializable report.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .avalanche import AvalancheResult
from .roundtrip import RoundtripResult
from .vectors import VectorResult


@dataclass
class EvaluationReport:
    """Complete evaluation report aggregating all analysis results."""
    timestamp: str = ""
    vector_results: List[VectorResult] = field(default_factory=list)
    roundtrip_results: List[RoundtripResult] = field(default_factory=list)
    avalanche_results: List[AvalancheResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def all_pass(self) -> bool:
        return (
            all(v.passed for v in self.vector_results)
            and all(r.is_perfect for r in self.roundtrip_results)
            and all(a.passes for a in self.avalanche_results)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize full report for JSON export."""
        return {
            "timestamp": self.timestamp,
            "vectors": [v.to_dict() for v in self.vector_results],
            "roundtrip": [r.to_dict() for r in self.roundtrip_results],
            "avalanche": [a.to_dict() for a in self.avalanche_results],
            "summary": {
                "vectors_all_pass": all(v.passed for v in self.vector_results),
                "roundtrip_all_pass": all(r.is_perfect for r in self.roundtrip_results),
                "avalanche_all_pass": all(a.passes for a in self.avalanche_results),
                "failing_checks": self.failing_checks(),
            },
        }

    def to_summary(self) -> str:
        lines = [f"Evaluation Report: {self.timestamp}", "=" * 50]

        if self.vector_results:
            ok = sum(1 for v in self.vector_results if v.passed)
            lines.append(f"\nReference vectors: {ok}/{len(self.vector_results)} pass")
            for v in self.vector_results:
                lines.append(f"  {v.summary()}")

        if self.roundtrip_results:
            ok = sum(1 for r in self.roundtrip_results if r.is_perfect)
            lines.append(f"\nRoundtrip tests: {ok}/{len(self.roundtrip_results)} targets pass")
            for r in self.roundtrip_results:
                lines.append(f"  {r.summary()}")

        if self.avalanche_results:
            ok = sum(1 for a in self.avalanche_results if a.passes)
            lines.append(f"\nAvalanche: {ok}/{len(self.avalanche_results)} pass")
            for a in self.avalanche_results:
                lines.append(f"  {a.summary()}")

        return "\n".join(lines)

    def failing_checks(self) -> List[str]:
        out: List[str] = []
        out += [f"vector:{v.algorithm}:{v.key_hex}" for v in self.vector_results if not v.passed]
        out += [f"roundtrip:{r.target}" for r in self.roundtrip_results if not r.is_perfect]
        out += [f"avalanche:{a.primitive}:{a.input_type}" for a in self.avalanche_results if not a.passes]
        return out
