"""
Performance benchmarks for PNG metadata decoding.

Compares the chunk-stream decoder with Pillow reading the same text
annotations across various image sizes.
"""

import csv
import json
import statistics
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

import psutil
from PIL import Image

from pnginfo_tools.decoder import ChunkStreamDecoder
from pnginfo_tools.settings import DecoderSettings

from benchmarks.utils import BenchmarkUtils, RESULTS_DIR


class PerformanceBenchmark:
    """
    Benchmark for comparing metadata extraction time.

    Each size is decoded by Pillow, by the decoder from a file path and by
    the decoder from bytes already in memory. Resident memory of the process
    is sampled with psutil after each handler.
    """

    def __init__(self, sizes: List[Tuple[int, int]], iterations: int = 10):
        """
        Initialize the performance benchmark.

        Args:
            sizes: List of (width, height) tuples defining image sizes
            iterations: Number of iterations for each test
        """
        self.sizes = sizes
        self.iterations = iterations
        self.decoder = ChunkStreamDecoder(DecoderSettings())
        self.process = psutil.Process()
        self.results = {}

    def run(self):
        """
        Run the performance benchmark and return the results.

        Returns:
            Dictionary containing benchmark results
        """
        images = BenchmarkUtils.generate_test_images(self.sizes)

        results = {}
        print("\nRunning performance benchmark...")
        for (width, height), image_path in images.items():
            buffer = image_path.read_bytes()
            handlers = {
                "PIL": lambda: self._run_pil_read(image_path),
                "Decoder": lambda: self.decoder.decode(image_path.read_bytes()),
                "InMemory": lambda: self.decoder.decode(buffer),
            }

            size_results = {
                "megapixels": (width * height) / 1_000_000,
                "file_size": image_path.stat().st_size / (1024 * 1024),  # MB
                "width": width,
                "height": height,
                "handlers": {}
            }

            for name, handler_func in handlers.items():
                # Warm-up run
                for _ in range(3):
                    handler_func()

                times = []
                for _ in range(self.iterations):
                    start_time = time.perf_counter()
                    handler_func()
                    times.append((time.perf_counter() - start_time) * 1000)  # ms

                times.sort()
                size_results["handlers"][name] = {
                    "mean_ms": statistics.mean(times),
                    "std_ms": statistics.stdev(times) if len(times) > 1 else 0.0,
                    "median_ms": statistics.median(times),
                    "p25_ms": times[len(times) // 4],
                    "p75_ms": times[len(times) * 3 // 4],
                    "rss_mb": self.process.memory_info().rss / (1024 * 1024),
                }

            pil_mean = size_results["handlers"]["PIL"]["mean_ms"]
            for name in ("Decoder", "InMemory"):
                handler_mean = size_results["handlers"][name]["mean_ms"]
                size_results["handlers"][name]["speedup"] = pil_mean / handler_mean

            results[f"{width}x{height}"] = size_results

        self.results = results
        return results

    @staticmethod
    def _run_pil_read(image_path: Path) -> Dict[str, str]:
        """Read text annotations and size using Pillow."""
        with Image.open(image_path) as img:
            img.load()
            return dict(img.text)

    def save_results(self, format_type: str = "all") -> Dict[str, Path]:
        """
        Save benchmark results in various formats.

        Args:
            format_type: Output format, one of "json", "csv", "markdown", or "all"

        Returns:
            Dictionary mapping format types to output file paths
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        saved_files = {}

        if format_type in ("json", "all"):
            json_path = RESULTS_DIR / f"performance_benchmark_{timestamp}.json"
            with open(json_path, 'w') as f:
                json.dump(self.results, f, indent=2)
            saved_files["json"] = json_path

        if format_type in ("csv", "all"):
            csv_path = RESULTS_DIR / f"performance_benchmark_{timestamp}.csv"
            with open(csv_path, 'w', newline='') as f:
                writer = csv.writer(f)
                writer.writerow([
                    'Size', 'Width', 'Height', 'Megapixels', 'File Size (MB)',
                    'PIL Mean (ms)', 'PIL Std (ms)',
                    'Decoder Mean (ms)', 'Decoder Std (ms)', 'Decoder Speedup',
                    'InMemory Mean (ms)', 'InMemory Std (ms)', 'InMemory Speedup',
                    'RSS (MB)'
                ])
                for size_name, data in self.results.items():
                    pil_data = data["handlers"]["PIL"]
                    decoder_data = data["handlers"]["Decoder"]
                    memory_data = data["handlers"]["InMemory"]
                    writer.writerow([
                        size_name, data["width"], data["height"],
                        data["megapixels"], data["file_size"],
                        pil_data["mean_ms"], pil_data["std_ms"],
                        decoder_data["mean_ms"], decoder_data["std_ms"], decoder_data["speedup"],
                        memory_data["mean_ms"], memory_data["std_ms"], memory_data["speedup"],
                        memory_data["rss_mb"]
                    ])
            saved_files["csv"] = csv_path

        if format_type in ("markdown", "all"):
            md_path = RESULTS_DIR / f"performance_benchmark_{timestamp}.md"
            with open(md_path, 'w') as f:
                f.write("# PNG Info Decoding Benchmark\n\n")
                f.write(f"Date: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
                f.write("## Summary\n\n")
                f.write("| Size | Megapixels | File Size (MB) | PIL (ms) | Decoder (ms) | In-memory (ms) | Decoder Speedup |\n")
                f.write("|------|------------|---------------|----------|--------------|----------------|-----------------|\n")
                for size_name, data in self.results.items():
                    pil_data = data["handlers"]["PIL"]
                    decoder_data = data["handlers"]["Decoder"]
                    memory_data = data["handlers"]["InMemory"]
                    f.write(f"| {size_name} | {data['megapixels']:.1f} | {data['file_size']:.1f} | "
                            f"{pil_data['mean_ms']:.2f} ± {pil_data['std_ms']:.2f} | "
                            f"{decoder_data['mean_ms']:.2f} ± {decoder_data['std_ms']:.2f} | "
                            f"{memory_data['mean_ms']:.2f} ± {memory_data['std_ms']:.2f} | "
                            f"{decoder_data['speedup']:.1f}x |\n")
                f.write("\n")
            saved_files["markdown"] = md_path

        print("\nPerformance Benchmark Summary:")
        print("-" * 80)
        print(f"{'Size':<10} {'PIL (ms)':<15} {'Decoder (ms)':<15} {'In-memory (ms)':<15} {'Speedup':<10}")
        print("-" * 80)
        for size_name in sorted(self.results.keys(), key=lambda x: int(x.split('x')[0])):
            data = self.results[size_name]
            pil_data = data["handlers"]["PIL"]
            decoder_data = data["handlers"]["Decoder"]
            memory_data = data["handlers"]["InMemory"]
            print(f"{size_name:<10} "
                  f"{pil_data['mean_ms']:>6.2f} ± {pil_data['std_ms']:>5.2f} "
                  f"{decoder_data['mean_ms']:>6.2f} ± {decoder_data['std_ms']:>5.2f} "
                  f"{memory_data['mean_ms']:>6.2f} ± {memory_data['std_ms']:>5.2f} "
                  f"{decoder_data['speedup']:>8.1f}x")

        return saved_files
