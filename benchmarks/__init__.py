"""
PNG Info Tools Benchmarking Suite

Measures how quickly the chunk-stream decoder extracts metadata compared
with Pillow's own PNG text reader.

Usage:
    python -m benchmarks.run --help
"""

__version__ = "0.1.0"

from benchmarks.utils import BenchmarkUtils
from benchmarks.performance import PerformanceBenchmark

BENCHMARK_TYPES = {
    "performance": PerformanceBenchmark,
}

DEFAULT_CONFIGS = {
    "performance": {
        "small": {"sizes": [(512, 512), (1024, 1024), (2048, 2048)], "iterations": 10},
        "medium": {"sizes": [(1024, 1024), (2048, 2048), (4096, 4096)], "iterations": 5},
        "large": {"sizes": [(2048, 2048), (4096, 4096), (6144, 6144)], "iterations": 3}
    }
}
