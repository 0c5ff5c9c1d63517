"""
Concurrent decoding of many PNG files

A bad file is logged and recorded in ``errors``; it never stops the rest of
the batch.
"""
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import logging

from pnginfo_tools.decoder import ChunkStreamDecoder
from pnginfo_tools.models import DecodedMetadata
from pnginfo_tools.settings import DecoderSettings

logger = logging.getLogger("pnginfo_batch")

PNG_SUFFIX = '.png'
GLOB_CHARS = '*?['


class BatchDecoder:
    """
    Decode metadata from a set of PNG files using a thread pool.

    Can be used directly or as a context manager, in which case one pool is
    shared by every call made inside the block.

    Example:
        with BatchDecoder(workers=4) as batch:
            batch.decode_glob("renders/*.png")
        for path, metadata in batch.results.items():
            print(path, metadata.text_chunks.get("prompt"))
    """

    def __init__(self, workers: Optional[int] = None,
                 decoder: Optional[ChunkStreamDecoder] = None):
        """
        Initialise a batch decoder.

        Args:
            workers: Number of worker threads; taken from the settings if None.
            decoder: Decoder shared by all workers.
        """
        settings = decoder.settings if decoder else DecoderSettings.from_env()
        self.workers = workers or settings.batch_workers
        self.decoder = decoder or ChunkStreamDecoder(settings)
        self.results: Dict[str, DecodedMetadata] = {}
        self.errors: List[Tuple[str, str]] = []
        self.skipped: List[str] = []
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self):
        self._executor = ThreadPoolExecutor(max_workers=self.workers)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None
        logger.info(f"Batch decoding completed: {len(self.results)} files decoded, "
                    f"{len(self.errors)} errors, {len(self.skipped)} skipped")

    def decode_files(self, filepaths: List[Union[str, Path]]) -> Dict[str, DecodedMetadata]:
        """
        Decode every PNG file in the list.

        Args:
            filepaths: Paths to decode. Paths without a .png suffix are skipped.

        Returns:
            Mapping of path string to decoded metadata for the files decoded
            by this call, in input order.
        """
        paths = []
        for filepath in filepaths:
            path = Path(filepath) if isinstance(filepath, str) else filepath
            if path.suffix.lower() != PNG_SUFFIX:
                logger.debug(f"Skipping non-PNG file: {path}")
                self.skipped.append(str(path))
                continue
            paths.append(path)

        if not paths:
            return {}

        if self._executor:
            decoded = self._run(self._executor, paths)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                decoded = self._run(executor, paths)

        self.results.update(decoded)
        return decoded

    def decode_glob(self, pattern: str, recursive: bool = False) -> Dict[str, DecodedMetadata]:
        """
        Decode all files matching a glob pattern.

        Args:
            pattern: Glob pattern, relative to the current directory or absolute.
                     Wildcards may appear in directory components too.
            recursive: Whether to search subdirectories.

        Returns:
            Mapping of path string to decoded metadata.
        """
        base_path, relative_pattern = self._split_pattern(pattern)
        glob_pattern = '**/' + relative_pattern if recursive else relative_pattern
        matched_files = sorted(path for path in base_path.glob(glob_pattern) if path.is_file())

        logger.info(f"Found {len(matched_files)} files matching pattern: {pattern}")
        return self.decode_files(matched_files)

    @staticmethod
    def _split_pattern(pattern: str) -> Tuple[Path, str]:
        """Split a pattern at its first wildcard component: (search root, remainder)."""
        parts = Path(pattern).parts
        index = max(len(parts) - 1, 0)
        for position, part in enumerate(parts):
            if any(char in part for char in GLOB_CHARS):
                index = position
                break
        base_path = Path(*parts[:index]) if index else Path('.')
        return base_path, '/'.join(parts[index:])

    def _run(self, executor: ThreadPoolExecutor, paths: List[Path]) -> Dict[str, DecodedMetadata]:
        futures = [(path, executor.submit(self._decode_file, path)) for path in paths]

        decoded = {}
        for path, future in futures:
            try:
                decoded[str(path)] = future.result()
            except Exception as e:
                logger.error(f"Error decoding {path}: {e}")
                self.errors.append((str(path), str(e)))
        return decoded

    def _decode_file(self, path: Path) -> DecodedMetadata:
        return self.decoder.decode(path.read_bytes())
