"""
Test suite for batch decoding of PNG files
"""
import json
import logging
from pathlib import Path

import pytest

import pnginfo_tools as pnginfo
from pnginfo_tools.batch_operations import BatchDecoder
from pnginfo_tools.decoder import ChunkStreamDecoder
from pnginfo_tools.settings import DecoderSettings

from png_factory import create_test_image


class TestBatchDecoder:
    @pytest.fixture(autouse=True)
    def setup_test_env(self, tmp_path):
        """Fresh directory of annotated test images for every test."""
        self.image_dir = tmp_path / "batch_tests"
        self.paths = []
        for i in range(6):
            self.paths.append(create_test_image(
                self.image_dir / f"test_{i}.png",
                size=(32 + i, 32),
                text={'index': str(i)},
                compressed_text={'prompt': json.dumps({'seed': 1000 + i})},
            ))
        yield

    def _decoder(self, workers=2):
        return BatchDecoder(workers=workers, decoder=ChunkStreamDecoder(DecoderSettings()))

    def test_decode_files(self):
        batch = self._decoder()
        results = batch.decode_files(self.paths)

        assert list(results) == [str(path) for path in self.paths]
        for i, path in enumerate(self.paths):
            metadata = results[str(path)]
            assert metadata.text_chunks['index'] == str(i)
            assert json.loads(metadata.text_chunks['prompt']) == {'seed': 1000 + i}
            assert metadata.technical_info.width == 32 + i
        assert batch.errors == []

    def test_invalid_file_is_isolated(self, caplog):
        invalid_path = self.image_dir / "invalid.png"
        invalid_path.write_bytes(b"Not a PNG file")
        paths = self.paths[:2] + [invalid_path] + self.paths[2:]

        batch = self._decoder()
        with caplog.at_level(logging.ERROR, logger="pnginfo_batch"):
            results = batch.decode_files(paths)

        assert len(results) == len(self.paths)
        assert str(invalid_path) not in results
        assert len(batch.errors) == 1
        assert batch.errors[0][0] == str(invalid_path)
        assert "signature" in batch.errors[0][1]
        assert "invalid.png" in caplog.text

    def test_missing_file_is_isolated(self):
        missing = self.image_dir / "missing.png"
        batch = self._decoder()
        results = batch.decode_files([missing, self.paths[0]])

        assert list(results) == [str(self.paths[0])]
        assert batch.errors[0][0] == str(missing)

    def test_non_png_files_skipped(self):
        notes = self.image_dir / "notes.txt"
        notes.write_text("not an image")

        batch = self._decoder()
        results = batch.decode_files([notes, self.paths[0]])

        assert list(results) == [str(self.paths[0])]
        assert batch.skipped == [str(notes)]
        assert batch.errors == []

    def test_context_manager_accumulates_results(self):
        with self._decoder(workers=3) as batch:
            batch.decode_files(self.paths[:3])
            batch.decode_files(self.paths[3:])

        assert len(batch.results) == len(self.paths)
        assert batch._executor is None

    def test_decode_glob(self):
        (self.image_dir / "nested").mkdir()
        create_test_image(self.image_dir / "nested" / "deep.png", text={'index': 'deep'})

        flat = self._decoder().decode_glob(str(self.image_dir / "*.png"))
        assert len(flat) == len(self.paths)

        recursive = self._decoder().decode_glob(str(self.image_dir / "*.png"), recursive=True)
        assert len(recursive) == len(self.paths) + 1
        assert any(m.text_chunks.get('index') == 'deep' for m in recursive.values())

    def test_decode_glob_wildcard_directory(self):
        for name in ('run_a', 'run_b'):
            create_test_image(self.image_dir / name / "out.png", text={'run': name})

        results = self._decoder().decode_glob(str(self.image_dir / "run_*" / "out.png"))
        assert [m.text_chunks['run'] for m in results.values()] == ['run_a', 'run_b']

    def test_decode_glob_relative_pattern(self, monkeypatch):
        monkeypatch.chdir(self.image_dir.parent)

        results = self._decoder().decode_glob(f"{self.image_dir.name}/test_?.png")
        assert list(results) == [str(Path(self.image_dir.name) / f"test_{i}.png") for i in range(6)]

    @pytest.mark.parametrize("pattern,base,remainder", [
        ('/renders/*/out.png', Path('/renders'), '*/out.png'),
        ('/renders/day1/out.png', Path('/renders/day1'), 'out.png'),
        ('*.png', Path('.'), '*.png'),
        ('renders/[ab]/*.png', Path('renders'), '[ab]/*.png'),
    ])
    def test_split_pattern(self, pattern, base, remainder):
        assert BatchDecoder._split_pattern(pattern) == (base, remainder)

    def test_empty_input(self):
        batch = self._decoder()
        assert batch.decode_files([]) == {}
        assert batch.results == {}

    def test_workers_from_settings(self, monkeypatch):
        monkeypatch.setenv('PNGINFO_BATCH_WORKERS', '3')
        assert BatchDecoder().workers == 3

    def test_read_many(self):
        batch = pnginfo.read_many(self.paths, workers=2)
        assert len(batch.results) == len(self.paths)
        assert batch.errors == []


class TestSimplifiedAPI:
    def test_read(self, tmp_path):
        path = create_test_image(tmp_path / "single.png", text={'Author': 'Alice'})

        metadata = pnginfo.read(path)
        assert metadata.text_chunks == {'Author': 'Alice'}
        assert pnginfo.read(str(path)) == metadata
        assert pnginfo.read_text(path) == {'Author': 'Alice'}

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            pnginfo.read(tmp_path / "nonexistent.png")

    def test_read_invalid_file(self, tmp_path):
        invalid_path = tmp_path / "invalid.txt"
        invalid_path.write_bytes(b"Not a PNG file")
        with pytest.raises(pnginfo.FormatError):
            pnginfo.read(invalid_path)

    def test_decode_from_bytes(self, tmp_path):
        path = create_test_image(tmp_path / "bytes.png", international_text={'Comment': '素材'})
        assert pnginfo.decode(path.read_bytes()).text_chunks == {'Comment': '素材'}
