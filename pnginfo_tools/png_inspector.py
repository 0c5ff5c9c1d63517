"""
PNG metadata inspector with AI-generation parameter parsing
"""
from pathlib import Path
from pprint import pprint
from typing import Any, Dict, Optional, Union
import json
import logging

from PIL import Image

from pnginfo_tools.decoder import ChunkStreamDecoder
from pnginfo_tools.errors import FormatError
from pnginfo_tools.models import DecodedMetadata

logger = logging.getLogger("pnginfo_inspector")

# Keys used by ComfyUI and similar tools to embed generation settings
AI_PARAMETER_KEYS = ('prompt', 'workflow', 'parameters')


class PNGInfoInspector:
    def __init__(self, image_path: Union[str, Path], decoder: Optional[ChunkStreamDecoder] = None):
        self.image_path = Path(image_path)
        self.decoder = decoder or ChunkStreamDecoder()
        self.decoded: Optional[DecodedMetadata] = None
        self.metadata: Dict[str, Any] = {}
        self._load_metadata()

    def _load_metadata(self) -> None:
        """Decode the file and derive the inspection fields."""
        try:
            self.decoded = self.decoder.decode(self.image_path.read_bytes())
        except FileNotFoundError:
            logger.error(f"File not found - {self.image_path}")
            self.metadata['error'] = 'File not found'
            self.metadata['text'] = {}
            return
        except FormatError:
            logger.error(f"Not a valid PNG file - {self.image_path}")
            self.metadata['error'] = 'Not a valid PNG file'
            self.metadata['text'] = {}
            return
        except Exception as e:
            logger.error(f"Unexpected error while reading {self.image_path} - {e}")
            self.metadata['error'] = f'Unexpected error: {e}'
            self.metadata['text'] = {}
            return

        info = self.decoded.technical_info
        self.metadata['size'] = (info.width, info.height)
        self.metadata['mode'] = self._read_image_mode()
        self.metadata['color_type'] = info.color_type_name
        self.metadata['technical'] = info.to_dict()
        self.metadata['text'] = dict(self.decoded.text_chunks)
        self.metadata['text_keys'] = list(self.decoded.text_chunks.keys())
        self.metadata['raw_chunks'] = [
            (chunk.kind, chunk.length, chunk.hex_offset) for chunk in self.decoded.raw_chunks
        ]

        ai_parameters = self._parse_ai_parameters(self.decoded.text_chunks)
        if ai_parameters:
            self.metadata['ai_parameters'] = ai_parameters

        if self.decoded.diagnostics:
            self.metadata['warnings'] = [d.message for d in self.decoded.diagnostics]

    def _read_image_mode(self) -> Optional[str]:
        """Pillow's view of the pixel mode, for cross-checking the header."""
        try:
            with Image.open(self.image_path) as img:
                return img.mode
        except (OSError, Image.DecompressionBombError) as e:
            logger.warning(f"Pillow could not open {self.image_path}: {e}")
            return None

    @staticmethod
    def _parse_ai_parameters(text_chunks: Dict[str, str]) -> Dict[str, Any]:
        """JSON-decode known generation keys; non-JSON values are kept as text."""
        parsed = {}
        for key in AI_PARAMETER_KEYS:
            if key not in text_chunks:
                continue
            try:
                parsed[key] = json.loads(text_chunks[key])
            except json.JSONDecodeError:
                parsed[key] = text_chunks[key]
        return parsed

    def print_detailed_summary(self) -> None:
        """Print the text, technical and raw chunk views."""
        print(f"\n{'='*80}")
        print(f"Detailed Metadata Summary for {self.image_path.name}")
        print(f"{'='*80}")

        if 'error' in self.metadata:
            print(f"\nERROR ENCOUNTERED:")
            print(self.metadata['error'])
            return

        info = self.decoded.technical_info
        print(f"\nTECHNICAL INFORMATION:")
        print(f"Dimensions: {info.width or '?'} x {info.height or '?'}")
        print(f"Bit Depth: {info.bit_depth if info.bit_depth is not None else 'N/A'}")
        print(f"Color Type: {info.color_type} ({info.color_type_name})")
        print(f"Interlaced: {'N/A' if info.is_interlaced is None else ('Yes' if info.is_interlaced else 'No')}")
        if info.physical_dimensions:
            dims = info.physical_dimensions
            print(f"Resolution: {dims.pixels_per_unit_x} x {dims.pixels_per_unit_y} pixels/{dims.unit}")
        if info.last_modified:
            print(f"Last Modified: {info.last_modified}")

        if self.metadata['text_keys']:
            print(f"\nMETADATA KEYS FOUND: {', '.join(self.metadata['text_keys'])}")
        else:
            print("\nNo text metadata found.")

        if 'ai_parameters' in self.metadata:
            print("\nGENERATION PARAMETERS:")
            pprint(self.metadata['ai_parameters'], indent=2)

        print("\nCHUNKS:")
        for index, (kind, length, hex_offset) in enumerate(self.metadata['raw_chunks'], 1):
            print(f"#{index}: {kind} length={length} bytes offset={hex_offset}")

        if 'warnings' in self.metadata:
            print("\nWARNINGS:")
            for warning in self.metadata['warnings']:
                print(f"- {warning}")


def inspect_file(filepath: Union[str, Path]) -> None:
    """Inspect a single PNG file."""
    inspector = PNGInfoInspector(filepath)
    inspector.print_detailed_summary()


if __name__ == "__main__":
    import sys
    if len(sys.argv) != 2:
        print("Usage: python -m pnginfo_tools.png_inspector <image_path>")
        sys.exit(1)
    inspect_file(sys.argv[1])
