"""Tests for prompt rendering."""

import json

from chronos.core.prompts import polish_prompt, report_prompt


def test_polish_prompt_quotes_note():
    p = polish_prompt("kids were loud but ok")
    assert '"kids were loud but ok"' in p
    assert p.rstrip().endswith("Professional record:")


def test_report_prompt_embeds_session_json(sample_snapshot):
    p = report_prompt(sample_snapshot)
    assert "# Chronos AI Observation Report: Mathematics" in p

    start = p.index("```json") + len("```json")
    end = p.index("```", start)
    assert json.loads(p[start:end]) == sample_snapshot.to_dict()
