"""
Tests for the compressed-text decompression step and decoder settings
"""
import logging
import struct
import zlib

import pytest

from pnginfo_tools.decoder import decode
from pnginfo_tools.inflate import InflateResult, inflate, zlib_inflate
from pnginfo_tools.settings import DEFAULT_BATCH_WORKERS, DEFAULT_MAX_TEXT_SIZE, DecoderSettings

TEXT = b'masterpiece, best quality, a quiet harbour at dawn'


def raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


class TestZlibInflate:
    def test_zlib_stream(self):
        assert zlib_inflate(zlib.compress(TEXT)) == TEXT

    def test_raw_deflate_stream(self):
        assert zlib_inflate(raw_deflate(TEXT)) == TEXT

    def test_empty_text(self):
        assert zlib_inflate(zlib.compress(b'')) == b''

    def test_size_limit(self):
        with pytest.raises(ValueError):
            zlib_inflate(zlib.compress(b'x' * 4096), max_size=1024)

    def test_exact_size_limit(self):
        assert zlib_inflate(zlib.compress(b'x' * 1024), max_size=1024) == b'x' * 1024

    def test_truncated_stream(self):
        compressed = zlib.compress(TEXT * 20)
        with pytest.raises(zlib.error):
            zlib_inflate(compressed[:len(compressed) // 2])


class TestInflateStep:
    def test_success(self):
        result = inflate(zlib.compress(TEXT))
        assert result.ok
        assert result.data == TEXT
        assert result.error is None

    def test_failure_is_returned_not_raised(self):
        result = inflate(b'\xde\xad\xbe\xef')
        assert not result.ok
        assert result.error
        assert not result.unavailable

    def test_unavailable(self):
        assert inflate(zlib.compress(TEXT), inflater=None) == InflateResult(unavailable=True)

    def test_custom_inflater_errors_are_contained(self):
        def broken(data, max_size):
            raise RuntimeError("decompressor crashed")

        result = inflate(b'anything', inflater=broken)
        assert result.error == "decompressor crashed"

    def test_custom_inflater_receives_limit(self):
        seen = {}

        def recording(data, max_size):
            seen['max_size'] = max_size
            return data

        assert inflate(b'abc', inflater=recording, max_size=99).data == b'abc'
        assert seen == {'max_size': 99}


class TestDecoderSettings:
    def test_defaults(self, monkeypatch):
        for name in ('PNGINFO_MAX_TEXT_SIZE', 'PNGINFO_VERIFY_CRC', 'PNGINFO_BATCH_WORKERS'):
            monkeypatch.delenv(name, raising=False)

        settings = DecoderSettings.from_env()
        assert settings == DecoderSettings()
        assert settings.max_text_size == DEFAULT_MAX_TEXT_SIZE
        assert settings.verify_crc is False
        assert settings.batch_workers == DEFAULT_BATCH_WORKERS

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('PNGINFO_MAX_TEXT_SIZE', '2048')
        monkeypatch.setenv('PNGINFO_VERIFY_CRC', 'yes')
        monkeypatch.setenv('PNGINFO_BATCH_WORKERS', '8')

        settings = DecoderSettings.from_env()
        assert settings.max_text_size == 2048
        assert settings.verify_crc is True
        assert settings.batch_workers == 8

    @pytest.mark.parametrize("value", ['0', 'false', 'no', ''])
    def test_crc_flag_off(self, monkeypatch, value):
        monkeypatch.setenv('PNGINFO_VERIFY_CRC', value)
        assert DecoderSettings.from_env().verify_crc is False

    @pytest.mark.parametrize("value", ['lots', '1.5', '0', '-3'])
    def test_invalid_integers_fall_back_to_defaults(self, monkeypatch, caplog, value):
        monkeypatch.setenv('PNGINFO_MAX_TEXT_SIZE', value)
        monkeypatch.setenv('PNGINFO_BATCH_WORKERS', value)

        with caplog.at_level(logging.WARNING, logger="pnginfo_settings"):
            settings = DecoderSettings.from_env()

        assert settings.max_text_size == DEFAULT_MAX_TEXT_SIZE
        assert settings.batch_workers == DEFAULT_BATCH_WORKERS
        assert 'PNGINFO_MAX_TEXT_SIZE' in caplog.text
        assert 'PNGINFO_BATCH_WORKERS' in caplog.text

    def test_invalid_environment_does_not_break_decoding(self, monkeypatch):
        monkeypatch.setenv('PNGINFO_MAX_TEXT_SIZE', 'lots')
        png = (b'\x89PNG\r\n\x1a\n' + struct.pack('>I', 0) + b'IEND'
               + struct.pack('>I', zlib.crc32(b'IEND') & 0xFFFFFFFF))

        metadata = decode(png)
        assert [chunk.kind for chunk in metadata.raw_chunks] == ['IEND']
