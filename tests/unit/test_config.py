"""Tests for configuration loading and body reading."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from postbench._internal.config import BenchConfig, load_body, load_defaults, normalize_url
from postbench._internal.errors import ConfigError, SetupError

if TYPE_CHECKING:
    from pathlib import Path


class TestBenchConfig:
    """Tests for the BenchConfig dataclass."""

    def test_defaults(self):
        """BenchConfig has the documented defaults."""
        config = BenchConfig(url="http://localhost/x")
        assert config.body == b""
        assert config.concurrency == 100
        assert config.requests_per_worker == 1000
        assert config.pool_size == 100
        assert config.request_timeout is None

    def test_url_is_normalized(self):
        """The URL is trimmed and lower-cased on construction."""
        config = BenchConfig(url="  HTTP://LocalHost:8080/Ingest \n")
        assert config.url == "http://localhost:8080/ingest"

    def test_frozen(self):
        """BenchConfig is immutable."""
        config = BenchConfig(url="http://localhost")
        with pytest.raises(AttributeError):
            config.concurrency = 5  # type: ignore[misc]

    def test_body_coerced_to_bytes(self):
        """A bytearray body is stored as immutable bytes."""
        config = BenchConfig(url="http://localhost", body=bytearray(b"abc"))  # type: ignore[arg-type]
        assert isinstance(config.body, bytes)
        assert config.body == b"abc"

    def test_total_requests(self):
        config = BenchConfig(url="http://localhost", concurrency=4, requests_per_worker=10)
        assert config.total_requests == 40

    def test_zero_requests_allowed(self):
        config = BenchConfig(url="http://localhost", requests_per_worker=0)
        assert config.total_requests == 0

    def test_empty_url_raises(self):
        with pytest.raises(ConfigError, match="url"):
            BenchConfig(url="   ")

    @pytest.mark.parametrize(
        ("field", "value", "match"),
        [
            ("concurrency", 0, "concurrency must be >= 1"),
            ("requests_per_worker", -1, "requests_per_worker must be >= 0"),
            ("pool_size", 0, "pool_size must be >= 1"),
            ("request_timeout", 0.0, "request_timeout must be positive"),
        ],
    )
    def test_invalid_values_raise(self, field: str, value: float, match: str):
        with pytest.raises(ConfigError, match=match):
            BenchConfig(url="http://localhost", **{field: value})


def test_normalize_url():
    assert normalize_url(" HTTP://EXAMPLE.com/A ") == "http://example.com/a"


class TestLoadDefaults:
    """Tests for environment-driven defaults."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "POSTBENCH_CONCURRENCY",
            "POSTBENCH_REQUESTS_PER_WORKER",
            "POSTBENCH_POOL_SIZE",
            "POSTBENCH_TIMEOUT",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults_without_env(self):
        defaults = load_defaults()
        assert defaults.concurrency == 100
        assert defaults.requests_per_worker == 1000
        assert defaults.pool_size == 100
        assert defaults.request_timeout is None

    def test_values_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTBENCH_CONCURRENCY", "8")
        monkeypatch.setenv("POSTBENCH_REQUESTS_PER_WORKER", "0")
        monkeypatch.setenv("POSTBENCH_POOL_SIZE", "16")
        monkeypatch.setenv("POSTBENCH_TIMEOUT", "2.5")
        defaults = load_defaults()
        assert defaults.concurrency == 8
        assert defaults.requests_per_worker == 0
        assert defaults.pool_size == 16
        assert defaults.request_timeout == 2.5

    def test_non_integer_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTBENCH_CONCURRENCY", "lots")
        with pytest.raises(ConfigError, match="must be an integer"):
            load_defaults()

    def test_out_of_range_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTBENCH_POOL_SIZE", "0")
        with pytest.raises(ConfigError, match="must be >= 1"):
            load_defaults()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTBENCH_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="must be a number"):
            load_defaults()

    def test_negative_timeout_raises(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTBENCH_TIMEOUT", "-1")
        with pytest.raises(ConfigError, match="must be positive"):
            load_defaults()


class TestLoadBody:
    def test_reads_bytes(self, tmp_path: Path):
        path = tmp_path / "payload.bin"
        path.write_bytes(b"\x00\x01payload")
        assert load_body(path) == b"\x00\x01payload"

    def test_missing_file_raises_setup_error(self, tmp_path: Path):
        with pytest.raises(SetupError, match="Failed to read body file"):
            load_body(tmp_path / "missing.json")

    def test_directory_raises_setup_error(self, tmp_path: Path):
        with pytest.raises(SetupError):
            load_body(tmp_path)
