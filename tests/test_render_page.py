"""Test render_page_main() callable API and the render_page CLI.

Validates that scripts.render_page works end to end:
    - Returns dict with expected keys
    - PNG and manifest written next to each other
    - Same seed → identical page
    - CLI overrides are validated
    - Page jobs resolve text/output paths relative to the job file

Synthetic pages are small (e.g. 200×150) to keep runs fast.

Run:
    pytest tests/test_render_page.py -v
"""

import sys

import numpy as np
import pytest
from PIL import Image
from pydantic import ValidationError

from scripts.render_page import main, parse_args, render_page_main, run_job
from src.utils import fs, logging_config
from src.utils.validators import RenderConfig


@pytest.fixture(autouse=True)
def isolate_logging(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    logging_config.setup_logging(to_stderr=False, capture_warnings=False)
    logging_config.pop_context()


def load_png(path):
    return np.asarray(Image.open(path))


# ============================================================================
# CALLABLE API
# ============================================================================

def test_render_page_main_return_dict(tmp_path):
    result = render_page_main(
        "Hello there",
        str(tmp_path / "page"),
        config=RenderConfig(paper_type="LINED", font_size=20, margins=20),
        canvas_px=(200, 150),
        seed=3,
    )
    assert set(result) == {'output_path', 'manifest_path', 'glyph_count', 'line_count', 'truncated'}
    assert result['output_path'].endswith("page.png")
    assert result['glyph_count'] == 10
    assert result['line_count'] >= 1
    assert result['truncated'] is False
    assert load_png(result['output_path']).shape == (150, 200, 3)


def test_manifest_contents(tmp_path):
    result = render_page_main("Hi", str(tmp_path / "hi.png"), canvas_px=(120, 80), seed=7)
    manifest = fs.load_yaml(result['manifest_path'])
    assert result['manifest_path'].endswith("hi_manifest.yaml")
    assert manifest['schema'] == "page_manifest.v1"
    assert manifest['image'] == "hi.png"
    assert manifest['canvas_px'] == {'w': 120, 'h': 80}
    assert manifest['seed'] == 7
    assert manifest['render']['paper_type'] == "LINED"
    assert manifest['glyph_count'] == 2


def test_no_manifest(tmp_path):
    result = render_page_main("Hi", str(tmp_path / "hi.png"), canvas_px=(120, 80), write_manifest=False)
    assert result['manifest_path'] is None
    assert sorted(p.name for p in tmp_path.iterdir()) == ["hi.png"]


def test_same_seed_same_page(tmp_path):
    cfg = RenderConfig(paper_type="VINTAGE", messiness=0.7)
    a = render_page_main("wobbly", str(tmp_path / "a.png"), config=cfg, canvas_px=(200, 120), seed=5)
    b = render_page_main("wobbly", str(tmp_path / "b.png"), config=cfg, canvas_px=(200, 120), seed=5)
    assert np.array_equal(load_png(a['output_path']), load_png(b['output_path']))


def test_overflow_reported(tmp_path):
    result = render_page_main("many words " * 300, str(tmp_path / "long.png"), canvas_px=(160, 120), seed=0)
    assert result['truncated'] is True


# ============================================================================
# CLI
# ============================================================================

def test_cli_inline_text_with_overrides(tmp_path):
    out = tmp_path / "cli.png"
    result = main([
        "--text", "Grid notes",
        "--output", str(out),
        "--paper", "grid",
        "--messiness", "0",
        "--font-size", "18",
        "--size", "240", "120",
        "--seed", "1",
        "--no-manifest",
        "--log-level", "WARNING",
    ])
    assert result['output_path'] == str(out)
    assert result['manifest_path'] is None
    assert result['glyph_count'] == 9
    assert load_png(out).shape == (120, 240, 3)


def test_cli_text_file_and_config(tmp_path):
    text_file = tmp_path / "letter.txt"
    text_file.write_text("Dear Ada,\n你好", encoding="utf-8")
    cfg_file = tmp_path / "render.yaml"
    fs.atomic_yaml_dump({'render': {'paper_type': 'BLUEPRINT', 'font_size': 20}}, cfg_file)

    out = tmp_path / "letter.png"
    result = main([
        "--text-file", str(text_file),
        "--config", str(cfg_file),
        "--output", str(out),
        "--size", "300", "200",
        "--log-level", "WARNING",
    ])
    manifest = fs.load_yaml(result['manifest_path'])
    assert manifest['render']['paper_type'] == "BLUEPRINT"
    assert manifest['render']['font_size'] == 20
    assert result['line_count'] == 2


def test_cli_help_describes_real_newlines(capsys):
    with pytest.raises(SystemExit):
        parse_args(["--help"])
    out = " ".join(capsys.readouterr().out.split())
    assert "real newlines" in out
    assert "'\\n' for line breaks" not in out


def test_cli_real_newline_starts_new_line(tmp_path):
    result = main([
        "--text", "Hi\nthere",
        "--output", str(tmp_path / "nl.png"),
        "--font-size", "20",
        "--size", "300", "200",
        "--no-manifest",
        "--log-level", "WARNING",
    ])
    assert result['line_count'] == 2


def test_cli_rejects_invalid_override(tmp_path):
    with pytest.raises(ValidationError):
        main(["--text", "x", "--messiness", "2", "--output", str(tmp_path / "x.png"), "--log-level", "WARNING"])


def test_cli_requires_text_source():
    with pytest.raises(SystemExit):
        main([])


# ============================================================================
# PAGE JOBS
# ============================================================================

def test_run_job_relative_paths(tmp_path):
    (tmp_path / "texts").mkdir()
    (tmp_path / "texts" / "note.txt").write_text("Back at six", encoding="utf-8")
    job_path = tmp_path / "job.yaml"
    fs.atomic_yaml_dump({
        'schema': 'page_job.v1',
        'text_file': 'texts/note.txt',
        'canvas_px': {'w': 220, 'h': 240},
        'render': {'paper_type': 'PLAIN', 'messiness': 0.2},
        'seed': 9,
        'output': 'out/note.png',
    }, job_path)

    result = run_job(str(job_path))
    assert result['output_path'] == str(tmp_path / "out" / "note.png")
    assert result['glyph_count'] == 9
    assert load_png(result['output_path']).shape == (240, 220, 3)


def test_cli_job_with_output_override(tmp_path):
    job_path = tmp_path / "job.yaml"
    fs.atomic_yaml_dump({'schema': 'page_job.v1', 'text': 'ok', 'canvas_px': {'w': 100, 'h': 80}}, job_path)
    out = tmp_path / "elsewhere.png"
    result = main(["--job", str(job_path), "--output", str(out), "--log-level", "WARNING"])
    assert result['output_path'] == str(out)
    assert out.is_file()
