"""
Command-line interface for running PNG info benchmarks.
"""

import argparse
import sys
import traceback
from typing import List, Tuple

from benchmarks import (
    BENCHMARK_TYPES,
    DEFAULT_CONFIGS,
    BenchmarkUtils
)


def parse_size_argument(size_arg: str) -> List[Tuple[int, int]]:
    """
    Parse size argument into a list of (width, height) tuples.

    Args:
        size_arg: Comma-separated list of sizes (e.g., "512,1024,2048" or "512x512,1024x1024")

    Returns:
        List of (width, height) tuples
    """
    sizes = []
    for size_str in size_arg.split(','):
        if 'x' in size_str:
            width, height = map(int, size_str.split('x'))
            sizes.append((width, height))
        else:
            size = int(size_str)
            sizes.append((size, size))
    return sizes


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="PNG Info Benchmarking Suite",
        epilog="Example: python -m benchmarks.run --type performance --sizes 512,1024,2048"
    )
    parser.add_argument("--type", choices=list(BENCHMARK_TYPES.keys()), default="performance",
                        help="Type of benchmark to run")
    parser.add_argument("--preset", choices=["small", "medium", "large"],
                        help="Use preset configuration (overrides other options)")
    parser.add_argument("--sizes", default="512,1024,2048",
                        help="Comma-separated list of image sizes (size or widthxheight)")
    parser.add_argument("--iterations", type=int, default=10,
                        help="Number of iterations for each test")
    parser.add_argument("--output", choices=["json", "csv", "markdown", "all"],
                        default="csv", help="Output format for results")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output")
    return parser.parse_args()


def run_performance_benchmark(args):
    """Run performance benchmark with given arguments."""
    PerformanceBenchmark = BENCHMARK_TYPES["performance"]

    if args.preset:
        config = DEFAULT_CONFIGS["performance"][args.preset]
        sizes = config["sizes"]
        iterations = config["iterations"]
    else:
        sizes = parse_size_argument(args.sizes)
        iterations = args.iterations

    print(f"Running performance benchmark with {iterations} iterations for each size...")
    benchmark = PerformanceBenchmark(sizes, iterations)
    benchmark.run()

    saved_files = benchmark.save_results(args.output)

    print("\nPerformance benchmark complete!")
    for format_type, path in saved_files.items():
        print(f"Results saved as {format_type}: {path}")


def main():
    """Main entry point for the benchmark suite."""
    BenchmarkUtils.ensure_dirs()
    args = parse_args()

    try:
        if args.verbose:
            print(f"Starting {args.type} benchmark with the following settings:")
            for arg, value in vars(args).items():
                print(f"  {arg}: {value}")
            print()

        if args.type == "performance":
            run_performance_benchmark(args)
        else:
            print(f"Unknown or unavailable benchmark type: {args.type}")
            return 1
        return 0

    except KeyboardInterrupt:
        print("\nBenchmark interrupted.")
        return 130
    except Exception as e:
        print(f"\nError running benchmark: {e}")
        if args.verbose:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
