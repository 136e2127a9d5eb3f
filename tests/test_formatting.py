"""Formatting tests: decimal output and half-up rounding shared by all calculators.

Tests cover:
    - fmt: fixed decimals, half-up on the shortest decimal representation
    - round_half_up / round_to_step: ties away from zero, syringe-step rounding
    - plain, bullet_list, lines: template helpers
"""

from clinicalc.formatting import bullet_list, fmt, lines, plain, round_half_up, round_to_step


# -- fmt ----------------------------------------------------------------------

def test_fmt_pads_to_requested_decimals():
    assert fmt(6.0, 2) == "6.00"
    assert fmt(1200.0, 0) == "1200"
    assert fmt(24.2214, 1) == "24.2"


def test_fmt_rounds_ties_up():
    """0.125 and 2.675 are stored slightly off in binary but still round up."""
    assert fmt(0.125, 2) == "0.13"
    assert fmt(2.675, 2) == "2.68"
    assert fmt(0.05, 1) == "0.1"


def test_fmt_negative_values():
    assert fmt(-650.0, 0) == "-650"
    assert fmt(-2.25, 1) == "-2.3"


# -- rounding -----------------------------------------------------------------

def test_round_half_up_ties_go_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -3
    assert round_half_up(1049.4) == 1049


def test_round_to_step_snaps_to_nearest_multiple():
    assert round_to_step(52.5, 2.5) == 52.5
    assert round_to_step(71.0, 2.5) == 70.0
    assert round_to_step(53.75, 2.5) == 55.0


# -- text helpers -------------------------------------------------------------

def test_plain_keeps_trailing_decimal():
    assert plain(200) == "200.0"
    assert plain(74.5) == "74.5"


def test_bullet_list_and_lines():
    assert bullet_list(["a", "b"]) == "• a\n• b"
    assert lines(["a", "", "b"]) == "a\n\nb"
