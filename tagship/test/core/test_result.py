"""Tests for tagship.core.result module."""

import pytest

from tagship.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    """Tests for Ok type."""

    def test_unwrap(self) -> None:
        assert Ok(42).unwrap() == 42

    def test_unwrap_or_ignores_default(self) -> None:
        assert Ok(42).unwrap_or(0) == 42

    def test_map(self) -> None:
        assert Ok(21).map(lambda x: x * 2) == Ok(42)

    def test_map_err_is_noop(self) -> None:
        assert Ok(42).map_err(lambda e: f"wrapped: {e}") == Ok(42)

    def test_flat_map_chains(self) -> None:
        def half(x: int) -> Result[int, str]:
            if x % 2:
                return Err("odd")
            return Ok(x // 2)

        assert Ok(8).flat_map(half) == Ok(4)
        assert Ok(3).flat_map(half) == Err("odd")

    def test_repr(self) -> None:
        assert repr(Ok("1.0.0")) == "Ok('1.0.0')"


class TestErr:
    """Tests for Err type."""

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err"):
            Err("boom").unwrap()

    def test_unwrap_or_returns_default(self) -> None:
        assert Err("boom").unwrap_or(7) == 7

    def test_map_is_noop(self) -> None:
        assert Err("boom").map(lambda x: x * 2) == Err("boom")

    def test_map_err(self) -> None:
        assert Err("boom").map_err(str.upper) == Err("BOOM")

    def test_flat_map_short_circuits(self) -> None:
        called: list[int] = []

        def record(x: int) -> Result[int, str]:
            called.append(x)
            return Ok(x)

        assert Err("boom").flat_map(record) == Err("boom")
        assert called == []


class TestTypeGuards:
    def test_is_ok(self) -> None:
        assert is_ok(Ok(1)) is True
        assert is_ok(Err("e")) is False

    def test_is_err(self) -> None:
        assert is_err(Err("e")) is True
        assert is_err(Ok(1)) is False

    def test_pattern_matching(self) -> None:
        result: Result[str, str] = Ok("2.3.4")
        match result:
            case Ok(value):
                assert value == "2.3.4"
            case Err(_):
                pytest.fail("expected Ok")
