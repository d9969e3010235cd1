"""Tests for primitive conditions and their negation rules."""

import os
from datetime import timedelta
from unittest.mock import patch

import pytest

from waitfor.conditions import (
    Custom,
    Elapsed,
    Exists,
    FileSize,
    HttpGet,
    TcpHost,
    Update,
    UpdateSince,
)


class TestNegate:
    def test_negate_returns_same_instance(self, data_file):
        cond = Exists(data_file)
        assert cond.negate() is cond
        assert cond.negated is True

    def test_double_negation_restores_flag(self, data_file):
        cond = Update(data_file)
        assert cond.negate().negate().negated is False

    def test_invert_operator(self, data_file):
        cond = ~Exists(data_file)
        assert cond.negated is True

    def test_negate_keeps_memory(self, data_file):
        cond = FileSize(data_file)
        cond.evaluate()
        before = cond.last_size
        cond.negate()
        assert cond.last_size == before

    def test_double_negated_update_behaves_like_plain(self, data_file, shift_mtime):
        plain = Update(data_file)
        twice = Update(data_file).negate().negate()
        outputs = []
        for step in range(4):
            if step == 2:
                shift_mtime(data_file, -30)
            outputs.append((plain.evaluate(), twice.evaluate()))
        assert all(a == b for a, b in outputs)

    def test_describe(self, data_file):
        assert Exists(data_file).describe() == f"exists({data_file})"
        assert Exists(data_file).negate().describe() == f"not exists({data_file})"


class TestElapsed:
    def test_future_target_not_met(self):
        assert Elapsed.after(10).evaluate() is False

    def test_negated_future_target_met(self):
        assert Elapsed.after(timedelta(seconds=10)).negate().evaluate() is True

    def test_past_target_met(self):
        assert Elapsed.after(-1).evaluate() is True
        assert Elapsed.after(-1).negate().evaluate() is False

    def test_equal_instant_counts_as_not_elapsed(self):
        with patch("waitfor.conditions.primitives.time") as mock_time:
            mock_time.monotonic.return_value = 100.0
            assert Elapsed(100.0).evaluate() is False
            assert Elapsed(100.0).negate().evaluate() is True

    def test_complement_at_each_instant(self):
        with patch("waitfor.conditions.primitives.time") as mock_time:
            for now in (99.0, 100.5, 101.0):
                mock_time.monotonic.return_value = now
                plain = Elapsed(100.0)
                negated = Elapsed(100.0).negate()
                assert plain.evaluate() != negated.evaluate()


class TestExists:
    def test_existing(self, data_file):
        assert Exists(data_file).evaluate() is True
        assert Exists(data_file).negate().evaluate() is False

    def test_missing(self, tmp_path):
        missing = tmp_path / "nope"
        assert Exists(missing).evaluate() is False
        assert Exists(missing).negate().evaluate() is True


class TestUpdate:
    def test_first_call_records_baseline(self, data_file):
        cond = Update(data_file)
        assert cond.evaluate() is False
        assert cond.last_modified == os.stat(data_file).st_mtime_ns

    def test_first_call_false_when_negated(self, data_file):
        cond = Update(data_file).negate()
        assert cond.evaluate() is False
        assert cond.last_modified is not None

    def test_unchanged_file(self, data_file):
        plain = Update(data_file)
        negated = Update(data_file).negate()
        plain.evaluate()
        negated.evaluate()
        assert plain.evaluate() is False
        assert negated.evaluate() is True

    def test_changed_file_fires(self, data_file, shift_mtime):
        cond = Update(data_file)
        cond.evaluate()
        shift_mtime(data_file, -60)
        assert cond.evaluate() is True

    def test_fire_does_not_advance_baseline(self, data_file, shift_mtime):
        cond = Update(data_file)
        cond.evaluate()
        baseline = cond.last_modified
        shift_mtime(data_file, -60)
        assert cond.evaluate() is True
        assert cond.evaluate() is True
        assert cond.last_modified == baseline

    def test_negated_still_changing_advances_baseline(self, data_file, shift_mtime):
        cond = Update(data_file).negate()
        cond.evaluate()
        shift_mtime(data_file, -60)
        assert cond.evaluate() is False
        assert cond.last_modified == os.stat(data_file).st_mtime_ns
        # two consecutive equal reads: stopped changing
        assert cond.evaluate() is True

    def test_missing_file_is_met(self, tmp_path):
        assert Update(tmp_path / "gone").evaluate() is True
        assert Update(tmp_path / "gone").negate().evaluate() is True

    def test_unstatable_path_is_met(self):
        assert Update("bad\0path").evaluate() is True
        assert Update("bad\0path").negate().evaluate() is True


class TestUpdateSince:
    def test_fresh_file(self, data_file):
        assert UpdateSince(data_file, 10).evaluate() is True
        assert UpdateSince(data_file, 10).negate().evaluate() is False

    def test_quiet_file(self, data_file, shift_mtime):
        shift_mtime(data_file, -11)
        assert UpdateSince(data_file, timedelta(seconds=10)).evaluate() is False
        assert UpdateSince(data_file, timedelta(seconds=10)).negate().evaluate() is True

    def test_future_mtime_is_met(self, data_file, shift_mtime):
        shift_mtime(data_file, 3600)
        assert UpdateSince(data_file, 10).evaluate() is True
        assert UpdateSince(data_file, 10).negate().evaluate() is True

    def test_missing_file_is_met(self, tmp_path):
        assert UpdateSince(tmp_path / "gone", 10).evaluate() is True
        assert UpdateSince(tmp_path / "gone", 10).negate().evaluate() is True

    def test_unstatable_path_is_met(self):
        assert UpdateSince("bad\0path", 10).evaluate() is True
        assert UpdateSince("bad\0path", 10).negate().evaluate() is True


class TestFileSize:
    def test_first_call_records_size(self, data_file):
        cond = FileSize(data_file)
        assert cond.evaluate() is False
        assert cond.last_size == 2

    def test_growth(self, data_file):
        plain = FileSize(data_file)
        negated = FileSize(data_file).negate()
        plain.evaluate()
        negated.evaluate()
        with open(data_file, "a") as f:
            f.write("more bytes")
        assert plain.evaluate() is True
        assert negated.evaluate() is False

    def test_stable_size(self, data_file):
        plain = FileSize(data_file)
        negated = FileSize(data_file).negate()
        plain.evaluate()
        negated.evaluate()
        assert plain.evaluate() is False
        assert negated.evaluate() is True

    def test_shrink_counts_as_change(self, data_file):
        cond = FileSize(data_file)
        cond.evaluate()
        data_file.write_text("")
        assert cond.evaluate() is True

    def test_negated_change_stores_new_size(self, data_file):
        cond = FileSize(data_file).negate()
        cond.evaluate()
        data_file.write_text("0123456789")
        assert cond.evaluate() is False
        assert cond.last_size == 10

    def test_missing_file_is_met(self, tmp_path):
        assert FileSize(tmp_path / "gone").evaluate() is True

    def test_unstatable_path_is_met(self):
        assert FileSize("bad\0path").evaluate() is True
        assert FileSize("bad\0path").negate().evaluate() is True


class TestTcpHost:
    def test_listening(self, listening_port):
        host = f"127.0.0.1:{listening_port}"
        assert TcpHost(host).evaluate() is True
        assert TcpHost(host).negate().evaluate() is False

    def test_refused(self, closed_port):
        host = f"127.0.0.1:{closed_port}"
        assert TcpHost(host).evaluate() is False
        assert TcpHost(host).negate().evaluate() is True

    def test_unencodable_hostname_is_unreachable(self):
        host = "a" * 64 + ".example:80"
        assert TcpHost(host, timeout=2).evaluate() is False
        assert TcpHost(host, timeout=2).negate().evaluate() is True


class TestHttpGet:
    def test_matching_status(self):
        with patch("waitfor.conditions.probes.http_status", return_value=200):
            assert HttpGet("http://svc/health").evaluate() is True
            assert HttpGet("http://svc/health").negate().evaluate() is False

    def test_other_status(self):
        with patch("waitfor.conditions.probes.http_status", return_value=503):
            assert HttpGet("http://svc/health").evaluate() is False
            assert HttpGet("http://svc/health").negate().evaluate() is True

    def test_no_response_never_matches(self):
        with patch("waitfor.conditions.probes.http_status", return_value=None):
            assert HttpGet("http://svc/health").evaluate() is False
            assert HttpGet("http://svc/health").negate().evaluate() is True

    def test_passes_timeout(self):
        with patch("waitfor.conditions.probes.http_status", return_value=200) as probe:
            HttpGet("http://svc/", timeout=2.5).evaluate()
        probe.assert_called_once_with("http://svc/", 2.5)


class TestCustom:
    def test_probe_result(self, counter):
        assert Custom(counter).evaluate() is True
        assert Custom(counter).negate().evaluate() is False
        assert counter.calls == 2

    def test_truthy_values_coerced(self):
        assert Custom(lambda: [1]).evaluate() is True

    def test_probe_errors_propagate(self):
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            Custom(broken).evaluate()
