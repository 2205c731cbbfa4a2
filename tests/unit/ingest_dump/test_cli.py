"""Tests for ingest_dump.cli entry point."""

import json
from unittest.mock import AsyncMock, patch

from common.errors import NetworkError
from ingest_dump.cli import main
from ingest_dump.models import IngestStats, RunOutcome


class TestMain:
    def test_success_returns_zero(self, tmp_path) -> None:
        outcome = RunOutcome.success(IngestStats(processed=3, written=2, skipped=1))
        with patch("ingest_dump.cli.run_pipeline", new=AsyncMock(return_value=outcome)) as run:
            assert main(["-i", "enwiki.xml", "-o", str(tmp_path / "out"), "-m", "3"]) == 0

        config = run.await_args.args[0]
        assert config.max_articles == 3

    def test_failure_returns_one(self, tmp_path) -> None:
        outcome = RunOutcome.failed(NetworkError("HTTP 503"))
        with patch("ingest_dump.cli.run_pipeline", new=AsyncMock(return_value=outcome)):
            assert main(["-i", "https://dumps.example.org/a.xml", "-o", str(tmp_path)]) == 1

    def test_bad_config_file_returns_one(self, tmp_path) -> None:
        with patch("ingest_dump.cli.run_pipeline", new=AsyncMock()) as run:
            code = main(["-i", "a.xml", "-o", str(tmp_path), "--config", str(tmp_path / "missing.yaml")])

        assert code == 1
        run.assert_not_called()

    def test_local_dump_end_to_end(self, history_dump_file, tmp_path) -> None:
        out = tmp_path / "out"
        assert main(["-i", str(history_dump_file), "-o", str(out), "--exact-matches"]) == 0

        manifest = json.loads((out / "mcp.json").read_text())
        assert manifest["stats"]["articles"] == 2
        assert "exact_match" in [tool["name"] for tool in manifest["capabilities"]["tools"]]

    def test_missing_local_dump_returns_one(self, tmp_path) -> None:
        assert main(["-i", str(tmp_path / "missing.xml"), "-o", str(tmp_path / "out")]) == 1
