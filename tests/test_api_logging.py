from __future__ import annotations

import logging

import httpx
import pytest

from apps.api.main import app


@pytest.mark.anyio
async def test_api_logs_request_id_for_success(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="edocs.api")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post(
            "/v1/preview",
            json={"document_type": "nda", "language": "en", "values": {}},
        )

    assert response.status_code == 200
    request_id = response.headers["X-Edocs-Request-Id"]
    messages = [record.message for record in caplog.records if record.name == "edocs.api"]
    assert any('"event":"start"' in message and request_id in message for message in messages)
    assert any('"event":"done"' in message and request_id in message for message in messages)


@pytest.mark.anyio
async def test_api_logs_request_id_and_error_code_for_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="edocs.api")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post(
            "/v1/export/pdf",
            json={"document_type": "nda", "values": {}},
        )

    assert response.status_code == 422
    request_id = response.headers["X-Edocs-Request-Id"]
    messages = [record.message for record in caplog.records if record.name == "edocs.api"]
    assert any(
        '"event":"error"' in message
        and '"error_code":"MISSING_REQUIRED_FIELDS"' in message
        and request_id in message
        for message in messages
    )


@pytest.mark.anyio
async def test_api_log_lines_keep_tamil_readable(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="edocs.api")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        await client.post("/v1/preview", json={"document_type": "கோப்பு"})

    messages = [record.message for record in caplog.records if record.name == "edocs.api"]
    assert any('"document_type":"கோப்பு"' in message for message in messages)
