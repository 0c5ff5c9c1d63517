"""
Utilities for benchmark preparation and execution.

This module provides shared functionality for generating test images,
managing benchmark directories, and creating generation metadata.
"""

import json
import random
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Tuple, Optional

import numpy as np
from PIL import Image, PngImagePlugin

# Constants
BENCHMARK_DIR = Path(__file__).parent
DATA_DIR = BENCHMARK_DIR / "data"
RESULTS_DIR = BENCHMARK_DIR / "results"


class BenchmarkUtils:
    """Utilities for benchmark preparation and execution."""

    @staticmethod
    def ensure_dirs():
        """Ensure the data and results directories exist."""
        for directory in (DATA_DIR, RESULTS_DIR):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def create_test_image(path: Path, width: int, height: int,
                          metadata: Optional[Dict[str, Any]] = None) -> Path:
        """
        Create a gradient test image carrying plain, compressed and
        international text chunks.

        Args:
            path: Path to save the image
            width: Image width in pixels
            height: Image height in pixels
            metadata: Optional metadata to add to the image

        Returns:
            Path to the created image
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Gradient pattern for more realistic file sizes
        img_array = np.zeros((height, width, 3), dtype=np.uint8)
        y, x = np.mgrid[0:height, 0:width]
        img_array[..., 0] = np.sin(x/width * 3.14) * 127 + 128
        img_array[..., 1] = np.sin(y/height * 3.14) * 127 + 128
        img_array[..., 2] = np.sin((x+y)/(width+height) * 3.14) * 127 + 128
        img = Image.fromarray(img_array)

        png_info = PngImagePlugin.PngInfo()
        for index, (key, value) in enumerate((metadata or {}).items()):
            value = json.dumps(value) if isinstance(value, (dict, list)) else str(value)
            # Rotate through the three text chunk kinds
            if index % 3 == 0:
                png_info.add_text(key, value)
            elif index % 3 == 1:
                png_info.add_text(key, value, zip=True)
            else:
                png_info.add_itxt(key, value)
        img.save(path, "PNG", pnginfo=png_info, dpi=(72, 72))

        if not path.exists():
            raise RuntimeError(f"Failed to create image at {path} - file does not exist after save")
        return path

    @staticmethod
    def create_generation_metadata() -> Dict[str, Any]:
        """Metadata shaped like a ComfyUI export."""
        workflow = {
            "nodes": {
                "1": {
                    "inputs": {
                        "seed": random.randint(100000, 999999),
                        "steps": 20,
                        "cfg": 7.5,
                        "sampler_name": "euler_a",
                        "scheduler": "normal",
                        "denoise": 0.75,
                    },
                    "class_type": "KSampler",
                },
                "2": {
                    "inputs": {"ckpt_name": "v1-5-pruned.ckpt"},
                    "class_type": "CheckpointLoaderSimple",
                },
            },
            "extra": {"timestamp": datetime.now().isoformat()},
        }
        return {
            "parameters": "masterpiece, best quality, ultra realistic",
            "workflow": workflow,
            "Comment": "素材 / negative: worst quality, low quality",
            "prompt": {"1": {"inputs": {"text": "a quiet harbour at dawn"}}},
        }

    @staticmethod
    def generate_test_images(sizes: List[Tuple[int, int]]) -> Dict[Tuple[int, int], Path]:
        """
        Generate test images of different sizes, reusing existing ones.

        Args:
            sizes: List of (width, height) tuples

        Returns:
            Dictionary mapping size tuples to image paths
        """
        BenchmarkUtils.ensure_dirs()
        metadata = BenchmarkUtils.create_generation_metadata()
        images = {}

        print("Generating test images...")
        for width, height in sizes:
            path = DATA_DIR / f"test_{width}x{height}.png"
            if not path.exists():
                BenchmarkUtils.create_test_image(path, width, height, metadata)
            images[(width, height)] = path

        return images
