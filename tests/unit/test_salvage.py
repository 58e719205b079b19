"""Tests for deterministic salvage transforms."""

from __future__ import annotations

import pytest

from concierge_ai import contract
from concierge_ai.core.config import GenerationConfig
from concierge_ai.markdown import find_section, find_table, list_entry, split_lines
from concierge_ai.salvage import (
    ensure_terminator,
    harvest_recommended_names,
    normalize_recommended_table,
    rebuild_blueprint,
    salvage_draft,
)
from concierge_ai.validation import run_validators
from concierge_ai.validation.checks.tables import (
    check_blueprint_narrative,
    check_blueprint_table,
    check_recommended_table,
)
from tests.fakes.drafts import SUPPLEMENTS, blueprint_table, build_draft


def _recommended_rows(markdown: str) -> list[list[str]]:
    section = find_section(split_lines(markdown), contract.RECOMMENDED_HEADING)
    assert section is not None
    table = find_table(section.body)
    assert table is not None
    return table.rows


def _mixed_list() -> list[str]:
    bullets = [f"- **{name}**: 1 serving daily" for name in SUPPLEMENTS[:6]]
    numbered = [f"{i}. {name} — with breakfast" for i, name in enumerate(SUPPLEMENTS[6:10], start=1)]
    return bullets + numbered


# Messy but valid list shapes: (entries, expected names, expected notes).
ENTRY_SHAPES = [
    pytest.param(
        ["- Magnesium — 200 mg", "- (Optional) Creatine", "- Zinc"],
        ["Magnesium", "Creatine", "Zinc"],
        ["", "", ""],
        id="leading-parenthetical",
    ),
    pytest.param(
        ["- **Vitamin D3:** 2000 IU with breakfast", "- **Omega-3** — 1 g", "- *Zinc*: 15 mg"],
        ["Vitamin D3", "Omega-3", "Zinc"],
        ["", "", ""],
        id="bold-name-with-colon",
    ),
    pytest.param(
        ["- Magnesium", "  - 200 mg at night", "  - With food", "- Zinc", "    * 15 mg"],
        ["Magnesium", "Zinc"],
        ["200 mg at night; With food", "15 mg"],
        id="nested-sub-bullets",
    ),
    pytest.param(
        ["1. CoQ10 (100 mg)", "", "2) Probiotic – morning", "", "3. L-Theanine"],
        ["CoQ10", "Probiotic", "L-Theanine"],
        ["", "", ""],
        id="numbered-with-blank-lines",
    ),
    pytest.param(
        ["- (Optional)", "- — with meals"],
        ["Optional", "with meals"],
        ["", ""],
        id="no-name-before-separator",
    ),
]


class TestHarvest:
    def test_table_names(self) -> None:
        assert harvest_recommended_names(build_draft()) == SUPPLEMENTS[:10]

    def test_list_names_strip_decoration_and_detail(self) -> None:
        names = harvest_recommended_names(build_draft(recommended=_mixed_list()))
        assert names == SUPPLEMENTS[:10]

    def test_exact_duplicates_dropped(self) -> None:
        recommended = ["- Zinc", "- Zinc", "- zinc"]
        assert harvest_recommended_names(build_draft(recommended=recommended)) == ["Zinc", "zinc"]

    def test_missing_section(self) -> None:
        assert harvest_recommended_names("## Intro Summary\n\nHi.") == []

    def test_linked_names(self) -> None:
        recommended = ["- [Vitamin D3](https://example.com/d3) 2000 IU"]
        assert harvest_recommended_names(build_draft(recommended=recommended)) == ["Vitamin D3 2000 IU"]

    @pytest.mark.parametrize(("entries", "names", "notes"), ENTRY_SHAPES)
    def test_one_name_per_top_level_entry(self, entries: list[str], names: list[str], notes: list[str]) -> None:
        assert harvest_recommended_names(build_draft(recommended=entries)) == names


class TestEnsureTerminator:
    def test_appends_marker(self) -> None:
        repaired = ensure_terminator("## Intro Summary\n\nText")
        assert repaired.endswith("\n\n## END")

    def test_idempotent(self) -> None:
        once = ensure_terminator(build_draft(terminator=False))
        assert ensure_terminator(once) == once
        assert once.count(contract.TERMINATOR) == 1

    def test_noop_when_present(self) -> None:
        draft = build_draft()
        assert ensure_terminator(draft) == draft


class TestNormalizeRecommendedTable:
    def test_list_becomes_table_with_one_row_per_entry(self) -> None:
        repaired = normalize_recommended_table(build_draft(recommended=_mixed_list()))
        assert check_recommended_table(repaired)
        rows = _recommended_rows(repaired)
        assert [row[0] for row in rows] == SUPPLEMENTS[:10]
        assert all(row[1] == contract.DOSE_SENTINEL for row in rows)
        assert contract.SYNERGY_NARRATIVE in repaired

    @pytest.mark.parametrize(("entries", "names", "notes"), ENTRY_SHAPES)
    def test_row_per_top_level_entry(self, entries: list[str], names: list[str], notes: list[str]) -> None:
        repaired = normalize_recommended_table(build_draft(recommended=entries))

        assert check_recommended_table(repaired)
        rows = _recommended_rows(repaired)
        assert [row[0] for row in rows] == names
        assert [row[2] for row in rows] == notes
        section = find_section(split_lines(repaired), contract.RECOMMENDED_HEADING)
        assert section is not None
        assert [line for line in section.body if list_entry(line) is not None] == []

    def test_leading_parenthetical_entry_kept_through_salvage(self) -> None:
        entries = ["- Magnesium — 200 mg", "- (Optional) Creatine", "- Zinc"]
        repaired = salvage_draft(build_draft(recommended=entries))
        assert [row[0] for row in _recommended_rows(repaired)] == ["Magnesium", "Creatine", "Zinc"]
        assert salvage_draft(repaired) == repaired

    def test_list_lines_removed(self) -> None:
        repaired = normalize_recommended_table(build_draft(recommended=_mixed_list()))
        assert "- **Magnesium Glycinate**" not in repaired
        assert "1. CoQ10" not in repaired

    def test_sentinel_only_in_empty_dose_cells(self) -> None:
        recommended = [
            "| Supplement | Dose | Timing | Notes |",
            "|---|---|---|---|",
            "| Zinc | | Evening | |",
            "| Magnesium | 200 mg | | With food |",
        ]
        repaired = normalize_recommended_table(build_draft(recommended=recommended))
        assert _recommended_rows(repaired) == [
            ["Zinc", contract.DOSE_SENTINEL, "Evening", ""],
            ["Magnesium", "200 mg", contract.DOSE_SENTINEL, "With food"],
        ]

    def test_custom_sentinel(self) -> None:
        repaired = normalize_recommended_table(build_draft(recommended=["- Zinc"]), sentinel="Ask your clinician")
        assert _recommended_rows(repaired) == [["Zinc", "Ask your clinician", ""]]

    def test_missing_separator_added(self) -> None:
        recommended = ["| Supplement | Dose | Notes |", "| Zinc | 15 mg | |"]
        repaired = normalize_recommended_table(build_draft(recommended=recommended))
        assert check_recommended_table(repaired)

    def test_short_and_long_rows_fixed(self) -> None:
        recommended = [
            "| Supplement | Dose | Notes |",
            "|---|---|---|",
            "| Zinc |",
            "| Magnesium | 200 mg | Evening | With food |",
        ]
        repaired = normalize_recommended_table(build_draft(recommended=recommended))
        assert _recommended_rows(repaired) == [
            ["Zinc", contract.DOSE_SENTINEL, ""],
            ["Magnesium", "200 mg", "Evening; With food"],
        ]

    def test_noop_when_valid(self) -> None:
        draft = build_draft()
        assert normalize_recommended_table(draft) == draft

    def test_noop_without_entries(self) -> None:
        draft = build_draft(recommended=["Talk to us about your stack."])
        assert normalize_recommended_table(draft) == draft


class TestRebuildBlueprint:
    def test_rebuilds_from_list(self) -> None:
        draft = build_draft(blueprint=[], recommended=_mixed_list())
        repaired = rebuild_blueprint(draft)
        assert check_blueprint_table(repaired)
        assert check_blueprint_narrative(repaired)

    def test_names_come_from_draft(self) -> None:
        draft = build_draft(blueprint=[], recommended=_mixed_list())
        section = find_section(split_lines(rebuild_blueprint(draft)), contract.BLUEPRINT_HEADING)
        assert section is not None
        table = find_table(section.body)
        assert table is not None
        assert [row[1] for row in table.rows] == SUPPLEMENTS[:10]
        assert [row[0] for row in table.rows] == [str(i) for i in range(1, 11)]

    def test_too_few_names_is_noop(self) -> None:
        draft = build_draft(blueprint=[], recommended=["- Zinc", "- Magnesium", "- Vitamin D3"])
        assert rebuild_blueprint(draft) == draft

    def test_narrative_only_inserted_after_table(self) -> None:
        draft = build_draft(blueprint_narrative=False)
        repaired = rebuild_blueprint(draft)
        assert check_blueprint_narrative(repaired)
        assert contract.BLUEPRINT_RATIONALE not in repaired
        assert repaired.count(contract.BLUEPRINT_NARRATIVE) == 1

    def test_short_table_replaced(self) -> None:
        draft = build_draft(blueprint=blueprint_table(4))
        repaired = rebuild_blueprint(draft)
        assert check_blueprint_table(repaired)
        assert repaired.count(contract.BLUEPRINT_HEADING) == 1

    def test_missing_section_inserted_before_recommended(self) -> None:
        draft = build_draft(blueprint=[]).replace(contract.BLUEPRINT_HEADING + "\n", "")
        repaired = rebuild_blueprint(draft)
        lines = split_lines(repaired)
        blueprint = find_section(lines, contract.BLUEPRINT_HEADING)
        recommended = find_section(lines, contract.RECOMMENDED_HEADING)
        assert blueprint is not None and recommended is not None
        assert blueprint.start < recommended.start

    def test_custom_min_rows(self) -> None:
        draft = build_draft(blueprint=[], recommended=["- Zinc", "- Magnesium", "- Vitamin D3"])
        repaired = rebuild_blueprint(draft, min_rows=3)
        assert check_blueprint_table(repaired, min_rows=3)


class TestSalvageDraft:
    def test_repairs_list_only_draft(self) -> None:
        draft = build_draft(blueprint=[], recommended=_mixed_list(), terminator=False)
        result = run_validators(salvage_draft(draft))
        assert result.passed

    def test_idempotent(self) -> None:
        draft = build_draft(blueprint=[], recommended=_mixed_list(), terminator=False)
        once = salvage_draft(draft)
        assert salvage_draft(once) == once

    def test_valid_draft_untouched(self) -> None:
        draft = build_draft()
        assert salvage_draft(draft) == draft

    def test_does_not_invent_names(self) -> None:
        draft = build_draft(blueprint=[], recommended=["- Zinc", "- Magnesium"])
        repaired = salvage_draft(draft)
        assert run_validators(repaired).failure_names == ["blueprint-table", "blueprint-narrative"]
        for name in SUPPLEMENTS[2:]:
            assert name not in repaired

    def test_uses_config(self) -> None:
        config = GenerationConfig(min_blueprint_rows=2, dose_sentinel="Per label")
        draft = build_draft(blueprint=[], recommended=["- Zinc", "- Magnesium"])
        repaired = salvage_draft(draft, config=config)
        assert check_blueprint_table(repaired, min_rows=2)
        assert "| Zinc | Per label | |" in repaired
