import pytest

from sidemenu.exceptions import MalformedColorError
from sidemenu.utils.color_filter import (
    BLACK_FILTER,
    HSL,
    RGB,
    WHITE_FILTER,
    color_to_filter,
    hsl_to_filter,
    parse_color,
    rgb_to_hsl,
)
from sidemenu.utils.numbers import coerce_number, format_number, round_half_up


def test_reference_color_matches_known_chain():
    assert color_to_filter("rgba(26,26,24,1)") == (
        "brightness(0) saturate(100%) invert(10%) sepia(100%) "
        "saturate(80%) hue-rotate(30deg) brightness(0.5)"
    )


def test_near_white_and_near_black_short_circuit():
    assert color_to_filter("#ffffff") == WHITE_FILTER
    assert color_to_filter("#FBFCFD") == WHITE_FILTER
    assert color_to_filter("#ffffffe6") == WHITE_FILTER
    assert color_to_filter("#000") == BLACK_FILTER
    assert color_to_filter("#00000026") == BLACK_FILTER
    assert color_to_filter("rgb(9, 9, 9)") == BLACK_FILTER


def test_grayscale_uses_invert_and_brightness_only():
    assert color_to_filter("#808080") == "brightness(0) saturate(100%) invert(50%) brightness(0.5)"


def test_saturated_red():
    expected = (
        "brightness(0) saturate(100%) invert(50%) sepia(100%) "
        "saturate(2000%) hue-rotate(330deg) brightness(1)"
    )
    assert color_to_filter("#ff0000") == expected
    assert color_to_filter("#f00") == expected
    assert color_to_filter("rgb(255, 0, 0)") == expected


def test_light_color_inverts_from_top():
    assert color_to_filter("#80c0ff") == (
        "brightness(0) saturate(100%) invert(25%) sepia(100%) "
        "saturate(2000%) hue-rotate(180deg) brightness(0.875)"
    )


@pytest.mark.parametrize("value", ["transparent", "", "#12", "#zzzzzz", "hsl(0, 100%, 50%)", None])
def test_unparseable_colors_fall_back_to_white(value):
    assert color_to_filter(value) == WHITE_FILTER


def test_parse_color_raises_for_garbage():
    with pytest.raises(MalformedColorError):
        parse_color("not-a-color")


def test_parse_color_drops_alpha_and_clamps_channels():
    assert parse_color("#11223344") == RGB(0x11, 0x22, 0x33)
    assert parse_color("rgba(300, 10, 20, 0.5)") == RGB(255, 10, 20)


def test_hue_prefers_red_branch_on_ties():
    assert rgb_to_hsl(RGB(26, 26, 24)) == HSL(60, 4, 10)


def test_hsl_to_filter_clamps_brightness():
    result = hsl_to_filter(HSL(200, 50, 95))
    assert result.endswith("brightness(0.975)")
    assert "invert(5%)" in result


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(-2.5) == -3
    assert round(2.5) == 2


def test_format_number_drops_trailing_zero():
    assert format_number(1.0) == "1"
    assert format_number(0.5) == "0.5"
    assert format_number(12) == "12"
    assert format_number("14") == "14"
    assert format_number("wide") == "0"


def test_coerce_number_handles_strings_and_junk():
    assert coerce_number("1.5") == 1.5
    assert coerce_number(" 7 ") == 7
    assert coerce_number(None) == 0
    assert coerce_number(float("nan")) == 0
