#!/usr/bin/env python3
"""Test suite for the cross-cutting utils modules.

This combined test suite includes:
- Atomic file writes and YAML round trips (fs)
- Polyline, string and dict hashing (hashing)
- Logging idempotency, JSON output and context fields (logging_config)
- Wall-clock timer sink (profiler)

Run with: pytest tests/test_utils_comprehensive.py -v
"""

import hashlib
import json
import logging
import logging.handlers

import numpy as np
import pytest
import yaml

from adaptive_bezier.flattener import adaptive_bezier_curve
from adaptive_bezier.utils import fs, hashing, logging_config, profiler
from adaptive_bezier.utils.geometry import Point


# ============================================================================
# BASIC IMPORT TESTS
# ============================================================================

def test_imports():
    """All utils modules import."""
    assert fs is not None
    assert hashing is not None
    assert logging_config is not None
    assert profiler is not None


# ============================================================================
# FS TESTS
# ============================================================================

def test_ensure_dir_creates_directory(tmp_path):
    target = tmp_path / "a" / "b"
    assert fs.ensure_dir(target) == target
    assert target.is_dir()


def test_ensure_dir_idempotent(tmp_path):
    fs.ensure_dir(tmp_path / "x")
    fs.ensure_dir(tmp_path / "x")
    assert (tmp_path / "x").is_dir()


def test_atomic_write_bytes_no_tmp_left(tmp_path):
    target = tmp_path / "out" / "data.bin"
    fs.atomic_write_bytes(target, b"\x00\x01")

    assert target.read_bytes() == b"\x00\x01"
    assert not (tmp_path / "out" / "data.bin.tmp").exists()


def test_atomic_write_bytes_failure_wrapped(tmp_path):
    """Writing over a directory surfaces a RuntimeError with the cause chained."""
    target = tmp_path / "dir_target"
    target.mkdir()
    (target / "child").write_text("x")

    with pytest.raises(RuntimeError, match="atomically") as excinfo:
        fs.atomic_write_bytes(target, b"data")
    assert excinfo.value.__cause__ is not None
    assert not (tmp_path / "dir_target.tmp").exists()


def test_atomic_yaml(tmp_path):
    """Atomic YAML write and load."""
    fs.atomic_yaml_dump({'test': 'data', 'value': 42}, tmp_path / 'test.yaml')
    loaded = fs.load_yaml(tmp_path / 'test.yaml')
    assert loaded == {'test': 'data', 'value': 42}


def test_atomic_yaml_preserves_float_bits(tmp_path):
    """Flattened coordinates reload bit-for-bit."""
    pts = adaptive_bezier_curve((20, 20), (100, 159), (50, 200), (200, 20), 2.0)
    fs.atomic_yaml_dump({'points': [list(p.as_tuple()) for p in pts]}, tmp_path / 'p.yaml')

    loaded = [Point.of(p) for p in fs.load_yaml(tmp_path / 'p.yaml')['points']]
    assert loaded == pts


def test_atomic_yaml_keeps_key_order(tmp_path):
    fs.atomic_yaml_dump({'b': 1, 'a': 2}, tmp_path / 'o.yaml')
    content = (tmp_path / 'o.yaml').read_text()
    assert content.index('b:') < content.index('a:')


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / "missing.yaml")


def test_load_yaml_invalid(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("key: [unclosed\n")
    with pytest.raises(yaml.YAMLError, match="bad.yaml"):
        fs.load_yaml(bad)


def test_atomic_write_text(tmp_path):
    target = tmp_path / "note.txt"
    fs.atomic_write_text(target, "héllo")
    assert target.read_text(encoding="utf-8") == "héllo"


# ============================================================================
# HASHING TESTS
# ============================================================================

def test_sha256_points_deterministic():
    pts = [Point(0.0, 0.0), Point(1.5, -2.25)]
    h = hashing.sha256_points(pts)
    assert len(h) == 64
    assert h == hashing.sha256_points(list(pts))


def test_sha256_points_sensitive_to_order_and_value():
    a = [Point(0.0, 0.0), Point(1.0, 1.0)]
    assert hashing.sha256_points(a) != hashing.sha256_points(a[::-1])
    assert hashing.sha256_points(a) != hashing.sha256_points([Point(0.0, 0.0), Point(1.0, 1.0 + 1e-12)])


def test_sha256_points_hashes_float64_bytes():
    """Polyline hash is the digest of the row-major float64 array."""
    pts = [Point(0.1, 0.2), Point(0.3, 0.4)]
    arr = np.array([[0.1, 0.2], [0.3, 0.4]], dtype=np.float64)
    assert hashing.sha256_points(pts) == hashlib.sha256(arr.tobytes()).hexdigest()


def test_hash_dict_order_independence():
    assert hashing.hash_dict({'a': 1, 'b': 2}) == hashing.hash_dict({'b': 2, 'a': 1})
    assert hashing.hash_dict({'a': 1}) != hashing.hash_dict({'a': 2})


def test_sha256_string():
    assert hashing.sha256_string("abc") == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


# ============================================================================
# LOGGING TESTS
# ============================================================================

def test_logging_idempotency(tmp_path):
    """Repeated setup doesn't duplicate handlers; JSON lines carry context."""
    log_path = tmp_path / "test.log"

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger = logging_config.get_logger("utils_test")
    logger.info("hello")

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger.info("world")
    logging_config.reset_logging()

    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 2

    rec = json.loads(lines[0])
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec.get("app") == "test"


def test_human_format_includes_context():
    formatter = logging_config.ContextFormatter("human", use_color=False)
    logging_config.push_context(app="flatten", curve="c-001")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "Flattened %d points", (21,), None)

    line = formatter.format(record)
    assert line.endswith("app=flatten curve=c-001 | Flattened 21 points")
    assert "| INFO" in line


def test_push_pop_context():
    logging_config.push_context(app="flatten", curve="c-001")
    logging_config.pop_context(keys=["curve"])
    assert logging_config.get_context() == {"app": "flatten"}

    logging_config.pop_context()
    assert logging_config.get_context() == {}


def test_formatter_rejects_unknown_mode():
    with pytest.raises(ValueError, match="format mode"):
        logging_config.ContextFormatter("xml")


def test_rotating_file_handler(tmp_path):
    info = logging_config.setup_logging(
        log_level="DEBUG",
        log_file=str(tmp_path / "logs" / "rot.log"),
        to_stderr=False,
        rotate={"mode": "size", "max_bytes": 1024, "backup_count": 1}
    )
    assert isinstance(info["handlers"][0], logging.handlers.RotatingFileHandler)
    logging_config.reset_logging()


@pytest.mark.parametrize("mode", ["time", "weekly"])
def test_unknown_rotation_mode(tmp_path, mode):
    """Only size-based rotation is supported."""
    with pytest.raises(ValueError, match="rotation mode"):
        logging_config._create_file_handler(str(tmp_path / "x.log"), {"mode": mode}, False, "UTC")


def test_reset_logging_detaches_installed_handlers(tmp_path):
    info = logging_config.setup_logging(
        log_file=str(tmp_path / "r.log"), to_stderr=False, context={"app": "flatten"}
    )
    root = logging.getLogger()
    assert info["handlers"][0] in root.handlers

    logging_config.reset_logging()
    assert info["handlers"][0] not in root.handlers
    assert logging_config.get_context() == {}


# ============================================================================
# PROFILER TESTS
# ============================================================================

def test_profiler_timer():
    """Timer reports elapsed seconds to the sink."""
    times = []
    with profiler.timer('flatten', sink=lambda n, t: times.append((n, t))):
        adaptive_bezier_curve((0, 0), (10, 40), (30, -40), (40, 0), 4.0)

    assert len(times) == 1
    assert times[0][0] == 'flatten' and times[0][1] >= 0.0


def test_profiler_timer_prints_without_sink(capsys):
    with profiler.timer('noop'):
        pass
    assert capsys.readouterr().out.startswith("noop: ")
