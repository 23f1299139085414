"""Tests for sections.patterns (heading classifier)."""
import pytest

from data_model.documents import HeadingMatch
from sections.patterns import (
    ALIASES,
    CanonicalTitle,
    classify,
    find_headings,
    normalize_key,
    numbering_depth,
)


class TestNumberedHeadings:
    def test_numbered_related_work(self) -> None:
        assert classify("2. Related Work") == HeadingMatch(title="Related Work", level=1)

    def test_parenthesis_terminator(self) -> None:
        assert classify("3) Methods") == HeadingMatch(title="Method", level=1)

    def test_multi_level_number_flattened_to_level_one(self) -> None:
        match = classify("4.1.2. Experiments")
        assert match is not None
        assert match.title == "Experiment"
        assert match.level == 1

    def test_numbered_unknown_title_dropped(self) -> None:
        assert classify("5. Ablation Study") is None

    def test_numbered_prose_rejected(self) -> None:
        assert classify("3.5 million users took part") is None

    @pytest.mark.parametrize("line", ["2 Experiments", "2023 Discussion", "4.1 Experiments"])
    def test_number_without_terminator_is_not_heading(self, line: str) -> None:
        assert classify(line) is None

    def test_surrounding_whitespace(self) -> None:
        assert classify("   1.  Introduction   ") == HeadingMatch("Introduction", 1)

    def test_results_and_discussion_alias(self) -> None:
        match = classify("6. Results and Discussion")
        assert match is not None
        assert match.title == "Discussion"


class TestBareHeadings:
    def test_bare_related_work(self) -> None:
        assert classify("Related Work") == HeadingMatch(title="Related Work", level=1)

    @pytest.mark.parametrize(
        "line, title",
        [
            ("Abstract", "Abstract"),
            ("ABSTRACT", "Abstract"),
            ("introduction", "Introduction"),
            ("Methodology", "Method"),
            ("Methods:", "Method"),
            ("Experiments", "Experiment"),
            ("Conclusions", "Conclusion"),
            ("RelatedWork", "Related Work"),
        ],
    )
    def test_keyword_variants(self, line: str, title: str) -> None:
        match = classify(line)
        assert match is not None
        assert match.title == title

    def test_partial_containment_rejected(self) -> None:
        assert classify("Relatedworkish discussion") is None

    def test_keyword_inside_prose_rejected(self) -> None:
        assert classify("In this introduction we describe the setup.") is None

    def test_non_keyword_bare_title_rejected(self) -> None:
        assert classify("Results") is None


class TestNoise:
    def test_empty_and_blank_lines(self) -> None:
        assert classify("") is None
        assert classify("   \t ") is None

    @pytest.mark.parametrize("line", ["Contents", "TABLE OF CONTENTS", "  table of contents "])
    def test_contents_lines(self, line: str) -> None:
        assert classify(line) is None


class TestHelpers:
    def test_alias_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ALIASES["results"] = CanonicalTitle.DISCUSSION  # type: ignore[index]

    def test_alias_values_are_canonical(self) -> None:
        assert {str(v) for v in ALIASES.values()} == {t.value for t in CanonicalTitle}

    def test_normalize_key(self) -> None:
        assert normalize_key("Related-Work ") == "relatedwork"

    def test_numbering_depth(self) -> None:
        assert numbering_depth("3.1.2. Methods") == 3
        assert numbering_depth("3.1.2 Methods") == 0
        assert numbering_depth("2. Related Work") == 1
        assert numbering_depth("Abstract") == 0

    def test_find_headings_keeps_duplicates_and_positions(self) -> None:
        text = "Abstract\nfoo\nIntroduction\nbar\nIntroduction\nbaz"
        found = find_headings(text)
        assert [(h.line_index, h.title) for h in found] == [
            (0, "Abstract"),
            (2, "Introduction"),
            (4, "Introduction"),
        ]
        assert found[1].id == "heading-2"
