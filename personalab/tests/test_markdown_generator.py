"""
Tests for the Markdown persona generator.
"""

import dataclasses

from personalab.services.export.labels import DEFAULT_LABELS
from personalab.services.export.markdown_generator import persona_to_markdown

SECTION_ORDER = [
    "## Summary",
    "## Demographics",
    "## Context",
    "## Goals",
    "## Frustrations",
    "## Motivations",
    "## Behaviors",
    "## Journey",
    "## Personality",
    "## Accessibility",
    "## Decision & Impact",
]


def test_structural_contract(minimal_data):
    md = persona_to_markdown("T", minimal_data)

    assert md.startswith("# T\n_Persona: Ana_\n\n> \"I need to trust it first.\"")
    assert "## Goals" in md
    for goal in minimal_data.goals.primary:
        assert f"- {goal}" in md
    # frustrations.barriers is empty in the minimal fixture
    assert "### Barriers\n- _not informed_" in md


def test_sections_in_fixed_order(full_data):
    md = persona_to_markdown("Full", full_data)
    positions = [md.index(f"{section}\n") for section in SECTION_ORDER]
    assert positions == sorted(positions)


def test_scalar_fields_use_bold_labels(full_data):
    md = persona_to_markdown("Full", full_data)
    assert "- **Archetype:** Pragmatic small-business owner" in md
    assert "- **Location:** São Paulo, Brazil" in md
    assert "- **Digital proficiency:** Medium" in md
    assert "- **Decision style:** Tries free plans before paying" in md


def test_every_list_item_is_a_bullet(full_data):
    md = persona_to_markdown("Full", full_data)
    assert "### Decision criteria\n- Price\n- Accountant access\n- Support in Portuguese" in md
    assert "### Assistive technologies\n- _not informed_" in md


def test_scores_render_out_of_five(minimal_data):
    md = persona_to_markdown("T", minimal_data)
    assert "- **Openness:** 2/5" in md
    assert "- **Neuroticism:** 1/5" in md


def test_empty_notes_fallback(minimal_data):
    md = persona_to_markdown("T", minimal_data)
    assert md.endswith("- **Notes:** not informed")


def test_notes_when_present(full_data):
    md = persona_to_markdown("Full", full_data)
    assert md.endswith("- **Notes:** Interviewed in March.")


def test_output_is_trimmed(minimal_data):
    md = persona_to_markdown("T", minimal_data)
    assert md == md.strip()


def test_deterministic(full_data):
    assert persona_to_markdown("Full", full_data) == persona_to_markdown("Full", full_data)


def test_accepts_wire_document(minimal_payload, minimal_data):
    assert persona_to_markdown("T", minimal_payload["data"]) == persona_to_markdown(
        "T", minimal_data
    )


def test_injected_labels(minimal_data):
    sections = dict(DEFAULT_LABELS.sections, goals="Objectives")
    labels = dataclasses.replace(DEFAULT_LABELS, not_informed="n/a", sections=sections)

    md = persona_to_markdown("T", minimal_data, labels=labels)

    assert "## Objectives" in md
    assert "## Goals" not in md
    assert "- _n/a_" in md
    assert "not informed" not in md
