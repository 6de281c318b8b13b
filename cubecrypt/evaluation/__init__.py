"""Self-test framework for the primitives and the file pipeline.

Provides known-answer checks against published vectors, roundtrip
verification and avalanche measurements.

Research / education only. Do NOT use in production.
"""

from .vectors import KnownAnswer, VectorResult, RC4_VECTORS, XTEA_VECTORS, check_vector, check_reference_vectors
from .roundtrip import RoundtripResult, RoundtripFailure, run_roundtrip_tests, run_all_targets
from .avalanche import AvalancheResult, hash_avalanche, block_avalanche
from .report import EvaluationReport

__all__ = [
    "KnownAnswer",
    "VectorResult",
    "RC4_VECTORS",
    "XTEA_VECTORS",
    "check_vector",
    "check_reference_vectors",
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "run_all_targets",
    "AvalancheResult",
    "hash_avalanche",
    "block_avalanche",
    "EvaluationReport",
]
