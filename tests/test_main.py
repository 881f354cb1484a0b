"""Tests for the command-line entry point."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from src.main import EXIT_INVALID_ADDRESS, EXIT_UPSTREAM, main
from src.models.scan import ScanResult
from src.scanner.exceptions import InvalidAddressError, UpstreamUnavailableError
from tests.addresses import OWNER


class TestMain:
    @pytest.mark.asyncio
    async def test_prints_camel_case_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = ScanResult(owner=OWNER, risk_score=12, risk_label="Low Risk")
        with (
            patch("src.main.setup_logger"),
            patch("src.main.scan_wallet", new=AsyncMock(return_value=result)),
        ):
            code = await main([OWNER])

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["owner"] == OWNER
        assert out["riskScore"] == 12
        assert out["totalNFTs"] == 0

    @pytest.mark.asyncio
    async def test_invalid_address_exit_code(self) -> None:
        with (
            patch("src.main.setup_logger"),
            patch("src.main.scan_wallet", new=AsyncMock(side_effect=InvalidAddressError("bad"))),
        ):
            assert await main(["bad"]) == EXIT_INVALID_ADDRESS

    @pytest.mark.asyncio
    async def test_upstream_exit_code(self) -> None:
        with (
            patch("src.main.setup_logger"),
            patch("src.main.scan_wallet", new=AsyncMock(side_effect=UpstreamUnavailableError("down"))),
        ):
            assert await main([OWNER]) == EXIT_UPSTREAM
