"""
Unit Tests for Upload Staging Service
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from portfolio.services.staging import StagedFile


def make_upload(data: bytes, filename: str = "cover.png", content_type: str = "image/png"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
async def test_write_copies_upload(staging):
    upload = make_upload(b"x" * 3000)
    await upload.read(10)

    staged = await staging.write("cover_1_abcdef.png", upload, 3000)

    assert staged.path.read_bytes() == b"x" * 3000
    assert staged.content_type == "image/png"
    assert staged.original_filename == "cover.png"
    staged.discard()


@pytest.mark.asyncio
async def test_stage_discards_on_success(staging):
    async with staging.stage("a_1_abcdef.png", make_upload(b"data"), 4) as staged:
        path = staged.path
        assert path.exists()

    assert not path.exists()
    assert staged.discarded


@pytest.mark.asyncio
async def test_stage_discards_on_error(staging):
    with pytest.raises(RuntimeError):
        async with staging.stage("b_1_abcdef.png", make_upload(b"data"), 4) as staged:
            path = staged.path
            raise RuntimeError("store exploded")

    assert not path.exists()
    assert list(staging.base_path.iterdir()) == []


def test_discard_twice_is_safe(tmp_path):
    path = tmp_path / "scratch"
    path.write_bytes(b"abc")
    staged = StagedFile("scratch", "scratch.png", "image/png", 3, path=path)

    staged.discard()
    staged.discard()

    assert not path.exists()
    assert staged.discarded


def test_discard_after_external_removal(tmp_path):
    path = tmp_path / "gone"
    path.write_bytes(b"abc")
    staged = StagedFile("gone", "gone.png", "image/png", 3, path=path)
    path.unlink()

    staged.discard()
    assert staged.discarded


def test_in_memory_staged_file():
    staged = StagedFile("mem", "mem.png", "image/png", 3, data=b"abc")
    assert staged.read_bytes() == b"abc"
    staged.discard()
    assert staged.discarded
