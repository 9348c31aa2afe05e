# tests/infrastructure/services/test_sprite_pipeline_service.py
import io
from dataclasses import replace

import pytest
from PIL import Image

from iconsprite.config.settings import PipelineSettings, RasterSettings, VectorSettings
from iconsprite.domain.export.entities import ExportFormat
from iconsprite.domain.export.interfaces import ExportUrlsResponse
from iconsprite.domain.sprite.entities import SpriteBuildResult
from iconsprite.infrastructure.export.exporter import IconExporter
from iconsprite.infrastructure.services.sprite_pipeline_service import SpritePipelineService
from iconsprite.infrastructure.sprite.svg_assembler import SvgSpriteAssembler
from iconsprite.shared.errors import ExportFailedError, SpriteGenerationError


def _svg(view_box: str = "0 0 24 24") -> bytes:
    return f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{view_box}"><path d="M0 0h24v24H0z"/></svg>'.encode()


# ───────────────────────── фейки ─────────────────────────
class _FakeClient:
    """PNG-байти для формату png, SVG-розмітка для svg."""

    def __init__(self, png: bytes, svg: bytes = b"", broken_format=None) -> None:
        self.png = png
        self.svg = svg or _svg()
        self.broken_format = broken_format

    async def get_export_urls(self, file_key, *, ids, format, scale=None, svg_options=None):
        if format is self.broken_format:
            return ExportUrlsResponse(images={i: None for i in ids})
        return ExportUrlsResponse(images={i: f"{format.value}://{i}" for i in ids})

    async def download(self, url):
        return self.png if url.startswith("png://") else self.svg


class _PassThroughOptimizer:
    def optimize(self, svg: str) -> str:
        return svg


class _SyncWriter:
    def __init__(self) -> None:
        self.results = []

    def write(self, result):
        self.results.append(result)


class _AsyncWriter(_SyncWriter):
    async def write(self, result):
        self.results.append(result)


def _service(client, settings=None, writer=None) -> SpritePipelineService:
    settings = settings or PipelineSettings()
    exporter = IconExporter(client, batch_size=settings.export.batch_size, max_concurrency=settings.export.max_concurrency)
    return SpritePipelineService(
        exporter,
        settings,
        assembler=SvgSpriteAssembler(_PassThroughOptimizer()),
        writer=writer,
    )


def _metadata(make_node):
    return {"b": make_node("b", "X", 32, 32), "a": make_node("a", "Y", 24, 24)}


# ───────────────────────── сценарії ─────────────────────────
@pytest.mark.asyncio
async def test_full_build_produces_every_artifact(make_node, png_bytes):
    writer = _SyncWriter()
    service = _service(_FakeClient(png_bytes(24, 24)), writer=writer)

    result = await service.build("FILE", _metadata(make_node))

    assert result.ok
    assert result.failures == ()
    assert (result.standard.width, result.standard.height) == (36, 64)
    assert (result.retina.width, result.retina.height) == (72, 128)
    assert [icon.id for icon in result.standard.icons] == ["a", "b"]
    assert [icon.id for icon in result.vector.icons] == ["a", "b"]
    assert '<use href="#a"' in result.preview
    assert writer.results == [result]
    with Image.open(io.BytesIO(result.retina.buffer)) as image:
        assert image.size == (72, 128)


@pytest.mark.asyncio
async def test_scale_one_skips_retina(make_node, png_bytes):
    settings = replace(PipelineSettings(), raster=RasterSettings(scale=1))

    result = await _service(_FakeClient(png_bytes(24, 24)), settings).build("FILE", _metadata(make_node))

    assert result.standard is not None
    assert result.retina is None


@pytest.mark.asyncio
async def test_preview_can_be_disabled(make_node, png_bytes):
    settings = replace(PipelineSettings(), vector=VectorSettings(preview=False))

    result = await _service(_FakeClient(png_bytes(24, 24)), settings).build("FILE", _metadata(make_node))

    assert result.vector is not None
    assert result.preview is None


@pytest.mark.asyncio
async def test_raster_export_failure_does_not_block_vector(make_node, png_bytes):
    client = _FakeClient(png_bytes(24, 24), broken_format=ExportFormat.PNG)

    result = await _service(client).build("FILE", _metadata(make_node))

    assert not result.ok
    assert isinstance(result.errors[ExportFormat.PNG], ExportFailedError)
    assert result.standard is None and result.retina is None
    assert result.vector is not None
    assert len(result.errors[ExportFormat.PNG].sample_reasons) == 2
    # невдачі проваленого формату не губляться
    assert [failure.export_id for failure in result.failures] == ["X", "Y"]
    assert all(failure.format is ExportFormat.PNG for failure in result.failures)


@pytest.mark.asyncio
async def test_bad_svg_view_box_reported_per_format(make_node, png_bytes):
    client = _FakeClient(png_bytes(24, 24), svg=_svg("abc"))

    result = await _service(client).build("FILE", _metadata(make_node))

    assert isinstance(result.errors[ExportFormat.SVG], SpriteGenerationError)
    assert result.vector is None and result.preview is None
    assert result.standard is not None


@pytest.mark.asyncio
async def test_async_writer_is_awaited(make_node, png_bytes):
    writer = _AsyncWriter()

    result = await _service(_FakeClient(png_bytes(24, 24)), writer=writer).build("FILE", _metadata(make_node))

    assert isinstance(result, SpriteBuildResult)
    assert writer.results == [result]


@pytest.mark.asyncio
async def test_vector_only_run(make_node, png_bytes):
    settings = PipelineSettings()
    settings = replace(settings, export=replace(settings.export, raster=False))

    result = await _service(_FakeClient(png_bytes(24, 24)), settings).build("FILE", _metadata(make_node))

    assert result.standard is None
    assert result.vector is not None
    assert result.ok
