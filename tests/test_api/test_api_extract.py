"""Tests for API endpoints."""

from __future__ import annotations

import base64
import io
import json

from fastapi.testclient import TestClient
from PIL import Image

from garden_wand.config import settings
from garden_wand.main import app
from tests.conftest import BED, paint_rect, solid, to_png_base64


client = TestClient(app)


def _square_png() -> str:
    return to_png_base64(paint_rect(solid(20, 20), 5, 5, 15, 15, BED))


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["cache_entries"] >= 0


def test_extract_square():
    response = client.post("/api/extract", json={"image": _square_png(), "seed": [9, 9], "tolerance": 0})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["failure"] is None
    assert data["region"]["outer"] == [[5.0, 5.0], [14.0, 5.0], [14.0, 14.0], [5.0, 14.0]]
    assert data["region"]["pixel_count"] == 100
    assert data["region"]["budget_exceeded"] is False
    assert data["processing_time_ms"] >= 0


def test_extract_ring(png_ring):
    response = client.post("/api/extract", json={"image": png_ring, "seed": [59, 39], "tolerance": 0})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert len(data["region"]["outer"]) >= 3


def test_extract_accepts_data_url():
    image = "data:image/png;base64," + _square_png()
    response = client.post("/api/extract", json={"image": image, "seed": [9, 9], "tolerance": 0})
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_extract_out_of_bounds_is_a_failed_result():
    response = client.post("/api/extract", json={"image": _square_png(), "seed": [50, 3]})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "failed"
    assert data["region"] is None
    assert data["failure"]["kind"] == "out_of_bounds"


def test_extract_respects_existing_areas():
    response = client.post(
        "/api/extract",
        json={
            "image": _square_png(),
            "seed": [6, 9],
            "tolerance": 0,
            "existing_areas": [[[9.5, -1], [20, -1], [20, 21], [9.5, 21]]],
            "respect_existing": True,
        },
    )
    assert response.status_code == 200
    assert response.json()["region"]["pixel_count"] == 50


def test_extract_bad_base64():
    response = client.post("/api/extract", json={"image": "not base64!!", "seed": [0, 0]})
    assert response.status_code == 400


def test_extract_not_an_image():
    response = client.post("/api/extract", json={"image": "aGVsbG8gd29ybGQ=", "seed": [0, 0]})
    assert response.status_code == 400


def test_extract_tolerance_out_of_range():
    response = client.post("/api/extract", json={"image": _square_png(), "seed": [9, 9], "tolerance": 300})
    assert response.status_code == 422


def test_extract_missing_seed():
    response = client.post("/api/extract", json={"image": _square_png()})
    assert response.status_code == 422


def test_extract_oversized_image(monkeypatch):
    monkeypatch.setattr(settings, "max_image_pixels", 100)
    response = client.post("/api/extract", json={"image": _square_png(), "seed": [9, 9]})
    assert response.status_code == 413


def _blank_png(width: int, height: int) -> str:
    # 1-bit and all zero: compresses to a few KB whatever the dimensions
    buf = io.BytesIO()
    Image.new("1", (width, height)).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


def test_extract_decompression_bomb():
    response = client.post("/api/extract", json={"image": _blank_png(20_000, 10_000), "seed": [0, 0]})
    assert response.status_code == 413


def test_extract_rejects_large_image_before_decoding():
    response = client.post("/api/extract", json={"image": _blank_png(10_000, 6_000), "seed": [0, 0]})
    assert response.status_code == 413
    assert "10000x6000" in response.json()["detail"]


def test_extract_non_finite_seed():
    # The stdlib encoder writes NaN literals, which the server's JSON parser accepts
    body = json.dumps({"image": _square_png(), "seed": [float("nan"), 3]})
    response = client.post("/api/extract", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
