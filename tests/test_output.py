"""Tests for brief_council/output.py."""

from pathlib import Path

import pytest

from brief_council.models import Brief, DebateResult, Scores, TranscriptEntry
from brief_council.output import _slug, save_to_file, scores_table


def test_slug_basic():
    assert _slug("Vender GPS online") == "vender-gps-online"


def test_slug_max_len():
    assert len(_slug("a" * 100)) <= 40


def test_slug_special_chars():
    result = _slug("P2P (beta) v2.0!")
    assert "." not in result
    assert "(" not in result
    assert "!" not in result


@pytest.fixture
def sample_debate_result(full_brief: Brief) -> DebateResult:
    return DebateResult(
        reply="## Decisión\nLanzar tienda con GPS.",
        transcript=[
            TranscriptEntry("coach", 1, "marco"),
            TranscriptEntry("tech", 1, "POST /orders"),
            TranscriptEntry("tech", 2, "deltas técnicos"),
            TranscriptEntry("coach", 3, "fusión"),
        ],
        scores=Scores(viabilidad=0.9, roi=0.6, ttv=0.75, riesgo=0.4, total=0.7, rationale="Señales presentes: API"),
        agents_called=["coach", "tech", "guard"],
        brief=full_brief,
        round2_ran=True,
        total_duration_sec=12.5,
    )


def test_save_to_file_creates_file(tmp_path: Path, sample_debate_result):
    saved = save_to_file(sample_debate_result, tmp_path / "output")
    assert saved.exists()
    assert saved.suffix == ".md"


def test_save_to_file_creates_output_dir(tmp_path: Path, sample_debate_result):
    output_dir = tmp_path / "nested" / "output"
    assert not output_dir.exists()
    save_to_file(sample_debate_result, output_dir)
    assert output_dir.exists()


def test_save_to_file_content(tmp_path: Path, sample_debate_result):
    content = save_to_file(sample_debate_result, tmp_path).read_text(encoding="utf-8")
    assert "# Brief Council: Vender GPS online" in content
    assert "**Agents:** coach, tech, guard" in content
    assert "**Round 2:** yes" in content
    assert "## Ronda 1" in content
    assert "## Ronda 2 (réplica)" in content
    assert "## Fusión" in content
    assert "| 0.90 | 0.60 | 0.75 | 0.40 | 0.70 |" in content
    assert "## Recommendation" in content
    assert "Lanzar tienda con GPS." in content


def test_save_to_file_includes_brief(tmp_path: Path, sample_debate_result):
    content = save_to_file(sample_debate_result, tmp_path).read_text(encoding="utf-8")
    assert "## Brief" in content
    assert "presupuesto $500" in content


def test_save_to_file_filename_has_slug(tmp_path: Path, sample_debate_result):
    saved = save_to_file(sample_debate_result, tmp_path)
    assert saved.name.endswith("_vender-gps-online.md")


def test_save_to_file_without_brief(tmp_path: Path, sample_debate_result):
    sample_debate_result.brief = None
    content = save_to_file(sample_debate_result, tmp_path).read_text(encoding="utf-8")
    assert "# Brief Council: debate" in content
    assert "## Brief" not in content


def test_scores_table_rows(sample_debate_result):
    table = scores_table(sample_debate_result.scores)
    assert table.row_count == 5
    assert table.caption == "Señales presentes: API"
