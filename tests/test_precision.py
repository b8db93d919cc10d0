import mpmath
import pytest

from mandelzoom.precision import escaped, iterate, parse_real, precision_for


def test_default_precision_for_wide_views():
    assert precision_for(1) == 64
    assert precision_for(4.4) == 64
    assert precision_for(0.5) == 64


def test_precision_steps_up_for_deep_views():
    assert precision_for(2.0 ** -32) == 96


def test_precision_is_monotonic_and_word_aligned():
    spans = [2.0 ** -k for k in range(0, 400, 7)]
    bits = [precision_for(span) for span in spans]
    assert bits == sorted(bits)
    assert all(value % 32 == 0 for value in bits)


def test_precision_accepts_strings_and_mpf():
    assert precision_for("1e-100") == precision_for(mpmath.mpf("1e-100"))


@pytest.mark.parametrize("span", [0, -1.0, float("inf")])
def test_precision_rejects_bad_span(span):
    with pytest.raises(ValueError):
        precision_for(span)


def test_escape_boundary_is_exclusive():
    assert escaped(complex(2, 0)) is False
    assert escaped(complex(2, 0.1)) is True


def test_escape_with_mpc():
    assert escaped(mpmath.mpc(0, 3)) is True
    assert escaped(mpmath.mpc(1, 1)) is False


def test_iterate_bounded_orbit():
    z, steps, has_escaped = iterate(0j, 0j, 10)
    assert (z, steps, has_escaped) == (0j, 10, False)


def test_iterate_escaping_orbit():
    z, steps, has_escaped = iterate(0j, 1 + 0j, 50)
    assert has_escaped is True
    assert steps == 3
    assert z == 5 + 0j


def test_iterate_zero_limit_returns_input():
    assert iterate(0.25j, 1 + 0j, 0) == (0.25j, 0, False)


def test_iterate_mpc_matches_complex():
    fast = iterate(0j, -0.75 + 0.2j, 200)
    exact = iterate(mpmath.mpc(0), mpmath.mpc(-0.75, 0.2), 200)
    assert fast[1:] == exact[1:]


def test_iterate_negative_limit():
    with pytest.raises(ValueError):
        iterate(0j, 0j, -1)


def test_parse_real_strips_newline():
    assert parse_real("0.5\n", 64) == mpmath.mpf(0.5)


def test_parse_real_keeps_requested_precision():
    fine = parse_real("0.1", 200)
    coarse = parse_real("0.1", 53)
    difference = abs(fine - coarse)
    assert difference != 0
    assert difference < 1e-16


@pytest.mark.parametrize("text,bits", [("abc", 64), ("  ", 64), ("1.0", 0)])
def test_parse_real_errors(text, bits):
    with pytest.raises(ValueError):
        parse_real(text, bits)