from __future__ import annotations

import io
from pathlib import Path
import sys
from types import SimpleNamespace
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from google.genai import types
from PIL import Image


def make_png(color: tuple[int, int, int], size: tuple[int, int] = (10, 10)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def image_part(data: bytes, mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def text_part(text: str) -> types.Part:
    return types.Part(text=text)


def make_response(*candidate_parts: list[types.Part]) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=list(parts)))
            for parts in candidate_parts
        ]
    )


class _FakeModels:
    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content(self, *, model: str, contents: Any, config: Any) -> Any:
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient:
    """Stands in for ``genai.Client``; only ``client.aio.models`` is used."""

    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.models = _FakeModels(response=response, error=error)
        self.aio = SimpleNamespace(models=self.models)

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self.models.calls


@pytest.fixture()
def red_png() -> bytes:
    return make_png((255, 0, 0))


@pytest.fixture()
def blue_png() -> bytes:
    return make_png((0, 0, 255))


@pytest.fixture()
def person_path(tmp_path: Path, red_png: bytes) -> Path:
    path = tmp_path / "person.png"
    path.write_bytes(red_png)
    return path


@pytest.fixture()
def product_path(tmp_path: Path, blue_png: bytes) -> Path:
    path = tmp_path / "product.png"
    path.write_bytes(blue_png)
    return path
