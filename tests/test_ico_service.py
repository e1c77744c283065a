import errno
import logging
import os
import sys

import pytest
from PIL import Image

from conftest import RED, solid_image
from icogen.errors import DecodeError, IcoError, NoMatchingImagesError, SinkWriteError, WriteError
from icogen.models.image_model import DecodedImage, EncodingOptions, ImageFile
from icogen.services import ico_service
from icogen.services.ico_service import (
    AssemblerState,
    IconAssembler,
    create_icon_file,
    generate_ico,
    read_ico,
)
from icogen.services.ico_structs import parse_bitmap_info_header, parse_directory, parse_file_header
from icogen.services.output_sink import OutputSink


def _entries(data, count):
    return [parse_directory(data, 6 + 16 * i) for i in range(count)]


def test_end_to_end_three_red_images(tmp_path):
    dest = create_icon_file([solid_image(16), solid_image(32), solid_image(256)], tmp_path / "app.ico")
    data = dest.read_bytes()

    assert parse_file_header(data).count == 3
    entries = _entries(data, 3)
    assert [e.offset for e in entries] == [54, 54 + 1064, 54 + 1064 + 4136]
    assert [(e.width, e.height) for e in entries] == [(16, 16), (32, 32), (0, 0)]
    assert len(data) == 54 + 1064 + 4136 + 256 * 256 * 4 + 40

    for entry in entries:
        info = parse_bitmap_info_header(data, entry.offset)
        assert info.size == 40
        first_pixel = data[entry.offset + 40:entry.offset + 44]
        assert first_pixel == bytes([0, 0, 255, 255])


def test_directory_offsets_chain():
    images = [solid_image(48), solid_image(16), solid_image(24)]
    sink = _MemorySink()
    IconAssembler().write(images, sink)
    data = bytes(sink.buffer)

    entries = _entries(data, len(images))
    for prev, cur, image in zip(entries, entries[1:], images):
        assert cur.offset == prev.offset + len(image.data) + 40
    for entry, image in zip(entries, images):
        assert entry.size == len(image.data) + 40
        info = parse_bitmap_info_header(data, entry.offset)
        assert info.width == image.width
        assert info.height == image.height * 2


def test_assembler_reaches_complete():
    assembler = IconAssembler()
    assembler.write([solid_image(16)], _MemorySink())
    assert assembler.state is AssemblerState.COMPLETE


def test_assembler_rejects_empty_input():
    assembler = IconAssembler()
    sink = _MemorySink()
    with pytest.raises(NoMatchingImagesError):
        assembler.write([], sink)
    assert sink.buffer == bytearray()
    assert assembler.state is AssemblerState.FAILED


def test_round_trip_through_file(tmp_path):
    top = bytes([10, 20, 30, 40]) * 16
    rest = bytes([200, 100, 50, 0]) * (16 * 15)
    image = DecodedImage(width=16, height=16, data=top + rest)
    dest = create_icon_file([image], tmp_path / "x.ico")
    assert read_ico(dest) == [image]


@pytest.mark.parametrize("keep", [4, 30, 100])
def test_read_ico_truncated_file(tmp_path, keep):
    dest = create_icon_file([solid_image(16)], tmp_path / "x.ico")
    dest.write_bytes(dest.read_bytes()[:keep])
    with pytest.raises(IcoError):
        read_ico(dest)


def test_read_ico_inconsistent_image_size(tmp_path):
    dest = create_icon_file([solid_image(16)], tmp_path / "x.ico")
    data = bytearray(dest.read_bytes())
    # biSizeImage of the first bitmap header
    data[22 + 20:22 + 24] = (1000).to_bytes(4, "little")
    dest.write_bytes(bytes(data))
    with pytest.raises(IcoError):
        read_ico(dest)


def test_read_ico_rejects_non_icon(tmp_path):
    path = tmp_path / "x.ico"
    path.write_bytes(b"\x00\x00\x02\x00\x01\x00")
    with pytest.raises(IcoError):
        read_ico(path)


def test_pillow_reads_output(tmp_path):
    dest = create_icon_file([solid_image(16), solid_image(256)], tmp_path / "app.ico")
    with Image.open(dest) as icon:
        assert icon.format == "ICO"
        assert icon.size == (256, 256)
        assert icon.convert("RGBA").getpixel((0, 0)) == RED


def test_create_icon_file_without_images_creates_nothing(tmp_path):
    dest = tmp_path / "app.ico"
    with pytest.raises(NoMatchingImagesError):
        create_icon_file([], dest)
    assert not dest.exists()


class _FailingWriteStream:
    """Файловый поток, у которого запись номер `fail_on` падает с `OSError`."""

    def __init__(self, inner, fail_on):
        self._inner = inner
        self._fail_on = fail_on
        self.writes = 0

    def write(self, data):
        self.writes += 1
        if self.writes == self._fail_on:
            raise OSError(errno.ENOSPC, "No space left on device")
        return self._inner.write(data)

    def flush(self):
        self._inner.flush()

    def close(self):
        self._inner.close()


def test_write_fault_mid_stream_removes_file(tmp_path, monkeypatch):
    original_open = OutputSink.open

    def open_with_failing_stream(self):
        original_open(self)
        self._stream = _FailingWriteStream(self._stream, fail_on=3)

    monkeypatch.setattr(OutputSink, "open", open_with_failing_stream)
    dest = tmp_path / "app.ico"
    with pytest.raises(SinkWriteError) as info:
        create_icon_file([solid_image(16), solid_image(32)], dest)
    assert isinstance(info.value.__cause__, OSError)
    assert not dest.exists()


def test_conversion_fault_removes_file(tmp_path, monkeypatch):
    def broken(*_args, **_kwargs):
        raise RuntimeError("conversion failed")

    monkeypatch.setattr(ico_service, "convert_png_to_dib", broken)
    dest = tmp_path / "app.ico"
    with pytest.raises(RuntimeError):
        create_icon_file([solid_image(16)], dest)
    assert not dest.exists()


# ---- generate_ico ----

def test_generate_ico_defaults(make_png, out_dir, caplog):
    images = [ImageFile(p, s, s) for s, p in ((s, make_png(s)) for s in (16, 32, 256))]
    caplog.set_level(logging.INFO, logger="icogen")

    dest = generate_ico(images, out_dir)

    assert dest == (out_dir / "app.ico").absolute()
    assert dest.is_absolute()
    data = dest.read_bytes()
    assert parse_file_header(data).count == 3
    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["ICO:", f"  Create: {dest}"]


def test_generate_ico_filters_sizes_and_keeps_order(make_png, out_dir):
    images = [
        ImageFile(make_png(32), 32, 32),
        ImageFile(make_png(20), 20, 20),
        ImageFile(make_png(16), 16, 16),
        ImageFile(make_png(48), 48, 48),
        ImageFile(make_png(64, 32), 64, 32),
    ]
    dest = generate_ico(images, out_dir, EncodingOptions(name="icon", sizes=(16, 32, 64)))

    assert dest.name == "icon.ico"
    data = dest.read_bytes()
    assert parse_file_header(data).count == 2
    assert [e.width for e in _entries(data, 2)] == [32, 16]


def test_generate_ico_no_matching_images(make_png, out_dir):
    images = [ImageFile(make_png(20), 20, 20)]
    with pytest.raises(NoMatchingImagesError):
        generate_ico(images, out_dir)
    assert list(out_dir.iterdir()) == []


def test_generate_ico_decode_failure_leaves_no_file(tmp_path, out_dir):
    bogus = tmp_path / "16.png"
    bogus.write_bytes(b"not a png")
    with pytest.raises(DecodeError):
        generate_ico([ImageFile(bogus, 16, 16)], out_dir)
    assert list(out_dir.iterdir()) == []


def test_generate_ico_missing_output_dir(make_png, tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(WriteError):
        generate_ico([ImageFile(make_png(16), 16, 16)], missing)
    assert not missing.exists()


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="directory permissions are not enforced",
)
def test_generate_ico_read_only_dir(make_png, out_dir):
    out_dir.chmod(0o555)
    try:
        with pytest.raises(WriteError):
            generate_ico([ImageFile(make_png(16), 16, 16)], out_dir)
        assert list(out_dir.iterdir()) == []
    finally:
        out_dir.chmod(0o755)


class _MemorySink:
    def __init__(self):
        self.buffer = bytearray()

    def write(self, data):
        self.buffer.extend(data)
