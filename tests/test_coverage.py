import pytest
from helpers import BASIC_LATIN_PRINTABLE, FakeRepository, make_store

from fontcover.coverage import analyze_block_coverage, load_fonts
from fontcover.errors import InvalidBlockRange
from fontcover.glyph_repository import GlyphRepository
from fontcover.models import Block, CoveredBy, Missing, Unassigned
from fontcover.unicode_data import is_assigned

BASIC_LATIN = Block("Basic Latin", 0x0020, 0x007E)
GREEK_HEAD = Block("Greek and Coptic", 0x0370, 0x037F)


def classifications(result):
    return [item.classification for item in result.coverage]


def test_single_font_full_coverage():
    repo = FakeRepository({"FontA": BASIC_LATIN_PRINTABLE})

    result = analyze_block_coverage(BASIC_LATIN, ["FontA"], repo)

    assert result.block_name == "Basic Latin"
    assert result.stats.to_dict() == {"total": 95, "available": 95, "missing": 0}
    assert all(c == CoveredBy("FontA") for c in classifications(result))


def test_coverage_sequence_is_ordered_and_complete():
    repo = FakeRepository({"FontA": BASIC_LATIN_PRINTABLE})

    result = analyze_block_coverage(BASIC_LATIN, ["FontA"], repo)

    assert [item.code_point for item in result.coverage] == list(range(0x20, 0x7F))


def test_fallback_uses_second_font_for_gaps():
    repo = FakeRepository({"FontA": range(0x20, 0x41), "FontB": range(0x41, 0x7F)})

    result = analyze_block_coverage(BASIC_LATIN, ["FontA", "FontB"], repo)

    by_cp = {item.code_point: item.classification for item in result.coverage}
    assert by_cp[0x40] == CoveredBy("FontA")
    assert by_cp[0x41] == CoveredBy("FontB")
    assert result.stats.available == 95


def test_priority_order_first_match_wins():
    repo = FakeRepository({"FontA": BASIC_LATIN_PRINTABLE, "FontB": BASIC_LATIN_PRINTABLE})

    ab = analyze_block_coverage(BASIC_LATIN, ["FontA", "FontB"], repo)
    ba = analyze_block_coverage(BASIC_LATIN, ["FontB", "FontA"], repo)

    assert set(classifications(ab)) == {CoveredBy("FontA")}
    assert set(classifications(ba)) == {CoveredBy("FontB")}


def test_later_fonts_not_consulted_after_match():
    repo = FakeRepository({"FontA": BASIC_LATIN_PRINTABLE, "FontB": BASIC_LATIN_PRINTABLE})

    analyze_block_coverage(BASIC_LATIN, ["FontA", "FontB"], repo)

    assert {font for font, _ in repo.glyph_calls} == {"FontA"}


def test_unassigned_code_points_ignore_fonts():
    repo = FakeRepository({"FontA": range(0x0370, 0x0380)})

    result = analyze_block_coverage(GREEK_HEAD, ["FontA"], repo)

    by_cp = {item.code_point: item.classification for item in result.coverage}
    assert by_cp[0x0378] == Unassigned()
    assert by_cp[0x0379] == Unassigned()
    assert by_cp[0x0377] == CoveredBy("FontA")
    assert (0x0378, "FontA") not in [(cp, f) for f, cp in repo.glyph_calls]
    assert result.stats.to_dict() == {"total": 16, "available": 14, "missing": 0}
    assert result.stats.unassigned == 2


def test_unassigned_dominates_any_font_list():
    everything = range(0x0370, 0x0380)
    for fonts in ([], ["FontA"], ["Broken", "FontA"]):
        repo = FakeRepository({"FontA": everything}, broken=["Broken"])
        result = analyze_block_coverage(GREEK_HEAD, fonts, repo)
        for item in result.coverage:
            if not is_assigned(item.code_point):
                assert item.classification == Unassigned()


def test_empty_font_list_reports_missing():
    result = analyze_block_coverage(BASIC_LATIN, [], FakeRepository({}))

    assert set(classifications(result)) == {Missing()}
    assert result.stats.to_dict() == {"total": 95, "available": 0, "missing": 95}


def test_all_fonts_failing_reports_missing():
    repo = FakeRepository({"FontA": BASIC_LATIN_PRINTABLE}, broken=["FontA"])

    result = analyze_block_coverage(BASIC_LATIN, ["FontA", "Nowhere"], repo)

    assert set(classifications(result)) == {Missing()}
    assert set(result.font_errors) == {"FontA", "Nowhere"}


def test_broken_font_does_not_block_fallback():
    repo = FakeRepository({"FontB": BASIC_LATIN_PRINTABLE}, broken=["FontA"])

    result = analyze_block_coverage(BASIC_LATIN, ["FontA", "FontB"], repo)

    assert set(classifications(result)) == {CoveredBy("FontB")}
    assert list(result.font_errors) == ["FontA"]


def test_fonts_loaded_once_per_call():
    repo = FakeRepository({"FontA": [0x41], "FontB": [0x42]})

    analyze_block_coverage(BASIC_LATIN, ["FontA", "FontB"], repo)

    assert repo.load_calls == ["FontA", "FontB"]


def test_single_code_point_block():
    repo = FakeRepository({"FontA": [0x41]})

    result = analyze_block_coverage(Block("A", 0x41, 0x41), ["FontA"], repo)

    assert len(result.coverage) == 1
    assert result.stats.total == 1


def test_invalid_block_range_raises():
    with pytest.raises(InvalidBlockRange) as excinfo:
        analyze_block_coverage(Block("Backwards", 0x7E, 0x20), ["FontA"], FakeRepository({}))

    assert excinfo.value.block_name == "Backwards"


@pytest.mark.parametrize("start, end", [(-1, 0x41), (0x10FFFE, 0x110000)])
def test_out_of_range_block_raises_before_loading_fonts(start, end):
    repo = FakeRepository({"FontA": [0x41]})

    with pytest.raises(InvalidBlockRange) as excinfo:
        analyze_block_coverage(Block("Outside", start, end), ["FontA"], repo)

    assert "U+0000..U+10FFFF" in excinfo.value.reason
    assert repo.load_calls == []


def test_aggregate_counts_law():
    repo = FakeRepository({"FontA": range(0x0370, 0x0375)})

    result = analyze_block_coverage(GREEK_HEAD, ["FontA"], repo)

    unassigned = sum(isinstance(c, Unassigned) for c in classifications(result))
    stats = result.stats
    assert stats.available + stats.missing + unassigned == stats.total
    assert stats.total == GREEK_HEAD.end_code - GREEK_HEAD.start_code + 1


def test_load_fonts_keeps_order_and_drops_failures():
    repo = FakeRepository({"A": [1], "C": [3]})

    loaded, errors = load_fonts(repo, ["C", "B", "A"])

    assert [font_id for font_id, _ in loaded] == ["C", "A"]
    assert list(errors) == ["B"]


def test_analyze_with_real_fonts(tmp_path):
    store = make_store(
        tmp_path,
        {"Primary.ttf": range(0x20, 0x41), "Fallback.ttf": range(0x20, 0x7F)},
    )
    repo = GlyphRepository(store)

    result = analyze_block_coverage(BASIC_LATIN, ["Primary.ttf", "Fallback.ttf"], repo)

    by_cp = {item.code_point: item.classification for item in result.coverage}
    assert by_cp[0x20] == CoveredBy("Primary.ttf")
    assert by_cp[0x41] == CoveredBy("Fallback.ttf")
    assert result.stats.missing == 0


def test_to_dict_shape():
    repo = FakeRepository({"FontA": [0x0370]})

    data = analyze_block_coverage(Block("G", 0x0370, 0x0378), ["FontA"], repo).to_dict()

    assert data["blockName"] == "G"
    assert data["coverage"][0] == {"codePoint": 0x0370, "status": "Available", "fontUsed": "FontA"}
    assert data["coverage"][1]["status"] == "Missing font"
    assert data["coverage"][-1] == {
        "codePoint": 0x0378,
        "status": "Unassigned code point",
        "fontUsed": None,
    }
    assert data["stats"] == {"total": 9, "available": 1, "missing": 7}
    assert data["fontErrors"] == {}
