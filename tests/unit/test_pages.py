from __future__ import annotations

import pytest

from docshop.exceptions import ValidationError
from docshop.pages import PAPER_SIZES, fit_box, parse_page_spec, resolve_paper_size


def test_parse_page_spec_expands_inclusive_range_to_zero_based_indices() -> None:
    assert parse_page_spec("1-3", page_count=10) == [0, 1, 2]


def test_parse_page_spec_keeps_single_pages_in_given_order() -> None:
    assert parse_page_spec("5,2", page_count=10) == [4, 1]


def test_parse_page_spec_mixes_ranges_singles_and_repeats() -> None:
    assert parse_page_spec(" 1 , 3-5,1 ", page_count=5) == [0, 2, 3, 4, 0]


def test_parse_page_spec_single_page_range() -> None:
    assert parse_page_spec("4-4", page_count=4) == [3]


def test_parse_page_spec_accepts_last_page() -> None:
    assert parse_page_spec("10", page_count=10) == [9]


@pytest.mark.parametrize("spec", ["11", "9-11", "1,20"])
def test_parse_page_spec_rejects_out_of_range_pages(spec: str) -> None:
    with pytest.raises(ValidationError, match="out of range"):
        parse_page_spec(spec, page_count=10)


@pytest.mark.parametrize("spec", ["", "   "])
def test_parse_page_spec_rejects_empty_spec(spec: str) -> None:
    with pytest.raises(ValidationError, match="Please provide page numbers"):
        parse_page_spec(spec, page_count=3)


@pytest.mark.parametrize("spec", ["a", "1,,2", "1-", "-2", "1-2-3", "1.5", "0", "0-2"])
def test_parse_page_spec_rejects_malformed_parts(spec: str) -> None:
    with pytest.raises(ValidationError, match="Invalid page spec"):
        parse_page_spec(spec, page_count=10)


def test_parse_page_spec_rejects_reversed_range() -> None:
    with pytest.raises(ValidationError, match="start is after end"):
        parse_page_spec("3-1", page_count=10)


def test_resolve_paper_size_portrait_and_landscape() -> None:
    assert resolve_paper_size("A4", "portrait") == PAPER_SIZES["A4"]
    assert resolve_paper_size("A4", "landscape") == (841.89, 595.28)
    assert resolve_paper_size("Letter", "portrait") == (612.0, 792.0)


def test_resolve_paper_size_is_case_insensitive() -> None:
    assert resolve_paper_size("letter", "LANDSCAPE") == (792.0, 612.0)


@pytest.mark.parametrize(("name", "orientation"), [("B5", "portrait"), ("A4", "sideways"), ("", "portrait")])
def test_resolve_paper_size_rejects_unknown_combinations(name: str, orientation: str) -> None:
    with pytest.raises(ValidationError, match="Invalid paper size or orientation"):
        resolve_paper_size(name, orientation)


def test_fit_box_scales_tall_content_by_height_and_centers_horizontally() -> None:
    placement = fit_box(100, 200, 400, 200)

    assert placement.scale == pytest.approx(1.0)
    assert (placement.width, placement.height) == pytest.approx((100, 200))
    assert placement.x == pytest.approx(150)
    assert placement.y == pytest.approx(0)


def test_fit_box_scales_wide_content_by_width_and_centers_vertically() -> None:
    placement = fit_box(300, 100, 600, 800)

    assert placement.scale == pytest.approx(2.0)
    assert placement.x == pytest.approx(0)
    assert placement.y == pytest.approx((800 - 200) / 2)


def test_fit_box_preserves_aspect_ratio() -> None:
    placement = fit_box(640, 480, *PAPER_SIZES["A4"])

    assert placement.width / placement.height == pytest.approx(640 / 480)
    assert placement.width <= PAPER_SIZES["A4"][0] + 1e-9
    assert placement.height <= PAPER_SIZES["A4"][1] + 1e-9


def test_fit_box_rejects_degenerate_content() -> None:
    with pytest.raises(ValueError):
        fit_box(0, 10, 100, 100)


def test_parse_page_spec_rejects_huge_range_without_expanding_it() -> None:
    with pytest.raises(ValidationError, match="Page 999999999 is out of range; the document has 3 page"):
        parse_page_spec("1-999999999", page_count=3)


def test_parse_page_spec_reports_out_of_range_range_end() -> None:
    with pytest.raises(ValidationError, match="Page 11 is out of range"):
        parse_page_spec("9-11", page_count=10)


@pytest.mark.parametrize("spec", ["²", "1-²", "١"])
def test_parse_page_spec_rejects_non_ascii_digits(spec: str) -> None:
    with pytest.raises(ValidationError, match="is not a page number"):
        parse_page_spec(spec, page_count=10)
