"""Tests for the Ok/Err result envelope."""

import pytest

from flow2docker.core.errors import IoFailureError
from flow2docker.core.result import Err, Ok, ok, try_result


class TestOk:
    def test_basics(self):
        r = Ok(5)
        assert r.is_ok()
        assert not r.is_err()
        assert r.unwrap() == 5

    def test_map_and_flat_map(self):
        assert Ok(2).map(lambda v: v * 3) == Ok(6)
        assert Ok(2).flat_map(lambda v: Ok(v + 1)) == Ok(3)
        assert Ok(2).flat_map(lambda v: Err(ValueError("no"))).is_err()

    def test_map_err_untouched(self):
        r = Ok(1)
        assert r.map_err(lambda e: RuntimeError()) is r

    def test_ok_helper(self):
        assert ok() == Ok(None)


class TestErr:
    def test_basics(self):
        r = Err(IoFailureError("disk full"))
        assert r.is_err()
        assert not r.is_ok()
        with pytest.raises(IoFailureError):
            r.unwrap()

    def test_short_circuits(self):
        r = Err(ValueError("x"))
        called = []
        assert r.map(called.append).is_err()
        assert r.flat_map(called.append).is_err()
        assert called == []

    def test_map_err(self):
        r = Err(ValueError("x")).map_err(lambda e: IoFailureError(str(e)))
        assert isinstance(r.error, IoFailureError)

    def test_message(self):
        assert Err(IoFailureError("copy failed")).message == "copy failed"
        assert Err(KeyError("k")).message == "'k'"

    def test_pattern_matching(self):
        match Err(ValueError("bad")):
            case Ok(_):
                pytest.fail("expected Err")
            case Err(error):
                assert str(error) == "bad"


class TestTryResult:
    def test_value(self):
        assert try_result(lambda: 42) == Ok(42)

    def test_exception_captured(self):
        r = try_result(lambda: int("x"))
        assert isinstance(r, Err)
        assert isinstance(r.error, ValueError)
