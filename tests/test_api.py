"""Tests for the HTTP API."""

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.exceptions import ExhaustionError
from app.dependencies import get_coordinator
from app.main import create_app
from app.services.engines.monoalphabetic.caesar import CaesarStrategy

ENDPOINT = "/api/v1/break-cipher"


@asynccontextmanager
async def running(app):
    """Run the app lifespan around an httpx client."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app):
    async with running(app) as client:
        yield client


class TestBreakCipher:
    """Test suite for POST /break-cipher."""

    @pytest.mark.asyncio
    async def test_caesar_response_envelope(self, client, pangram):
        ciphertext = CaesarStrategy().encrypt(pangram, 7)

        response = await client.post(ENDPOINT, json={"ciphertext": ciphertext})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        result = body["result"]
        assert result["method"] == "Caesar"
        assert result["key"] == "Shift 7"
        assert result["rawKey"] == 7
        assert result["decrypted"] == pangram
        assert result["confidence"] == 1.0
        assert 0.0 <= result["normalizedScore"] <= 1.0
        assert result["params"] == {"shift": 7}
        assert result["additionalInfo"] == {
            "validWords": 9,
            "totalWords": 9,
            "invalidWords": [],
            "validWordPercentage": 100.0,
        }

        analysis = body["finalAnalysis"]
        assert analysis["title"] == "Final Analysis Results"
        assert analysis["subtitle"] == "Decryption successful with high confidence"
        assert analysis["candidates"] == [
            {
                "rank": 1,
                "method": "Caesar Cipher",
                "key": "Shift 7",
                "confidence": "100.0%",
                "validWords": "9/9",
                "validWordPercentage": "100.0%",
                "decryptedText": pangram,
            }
        ]

    @pytest.mark.asyncio
    async def test_below_threshold(self, client):
        response = await client.post(ENDPOINT, json={"ciphertext": "QXZVJKWPFGMYBCLRTNHD"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["finalAnalysis"]["subtitle"] == (
            "Best possible decryption (below confidence threshold)"
        )

    @pytest.mark.parametrize(
        "payload",
        [{}, {"ciphertext": ""}, {"ciphertext": 123}, {"ciphertext": None}, {"text": "ABC"}],
    )
    @pytest.mark.asyncio
    async def test_invalid_ciphertext(self, client, payload):
        response = await client.post(ENDPOINT, json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Missing or invalid ciphertext in request body",
        }

    @pytest.mark.asyncio
    async def test_ciphertext_too_long(self, dictionary_file):
        settings = Settings(dictionary_path=dictionary_file, max_ciphertext_length=10)

        async with running(create_app(settings)) as client:
            response = await client.post(ENDPOINT, json={"ciphertext": "A" * 11})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "exceeds maximum 10" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_exhaustion_is_server_error(self, app):
        class Exhausted:
            async def resolve(self, ciphertext):
                raise ExhaustionError(["Caesar", "RailFence", "Vigenere"])

        app.dependency_overrides[get_coordinator] = lambda: Exhausted()

        async with running(app) as client:
            response = await client.post(ENDPOINT, json={"ciphertext": "ABC"})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "No valid decryption results found",
        }


class TestStartup:
    @pytest.mark.asyncio
    async def test_dictionary_loaded_once(self, app, client, words):
        coordinator = app.state.coordinator

        assert len(coordinator.dictionary) == len(set(words))

    @pytest.mark.asyncio
    async def test_missing_dictionary_falls_back(self, tmp_path):
        app = create_app(Settings(dictionary_path=tmp_path / "missing.json"))

        async with running(app):
            coordinator = app.state.coordinator

            assert len(coordinator.dictionary) > 0
            assert "THE" in coordinator.dictionary
