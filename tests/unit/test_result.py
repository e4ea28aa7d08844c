import pytest

from jobtracker.core.result import Err, Ok, collect


def test_ok_combinators_apply_to_value() -> None:
    result = Ok(2).map(lambda value: value * 10).and_then(lambda value: Ok(value + 1))
    assert result == Ok(21)
    assert result.map_err(str) == Ok(21)
    assert result.unwrap_or(0) == 21


def test_err_short_circuits_and_maps_error() -> None:
    result = Err("boom").map(lambda value: value * 10).and_then(lambda value: Ok(value))
    assert result == Err("boom")
    assert result.map_err(str.upper) == Err("BOOM")
    assert result.unwrap_or("fallback") == "fallback"
    with pytest.raises(RuntimeError):
        result.unwrap()
    with pytest.raises(RuntimeError):
        Ok(1).unwrap_err()


def test_collect_stops_at_first_error() -> None:
    assert collect([Ok(1), Ok(2)]) == Ok([1, 2])
    assert collect([Ok(1), Err("first"), Err("second")]) == Err("first")
