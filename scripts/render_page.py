"""Render script: text → handwritten page PNG (+ YAML manifest).

Runs the full page pipeline:
    1. Resolve page text (inline, text file, or page job YAML)
    2. Load/override the render config
    3. Allocate the target canvas (default 800×1000 px)
    4. Render background + handwriting
    5. Save PNG atomically
    6. Write <stem>_manifest.yaml with config, canvas, glyph/line counts

Refactored architecture:
    - render_page_main(text, output_path, ...) → dict
        * Callable function (used by batch jobs and tests)
    - CLI entry point: if __name__ == "__main__"

CLI:
    python scripts/render_page.py --text "Hello, world" --output out/hello.png
    python scripts/render_page.py --text-file letter.txt --paper VINTAGE \\
                                  --messiness 0.6 --seed 7 --output out/letter.png
    python scripts/render_page.py --job configs/page_job.example.yaml

Output structure:
    <output_dir>/
        <stem>.png
        <stem>_manifest.yaml
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from src import __version__
from src.handwriting_engine import HandwritingRenderer, RasterTarget, export_image
from src.handwriting_engine import randomness
from src.handwriting_engine.fonts import FontResolver
from src.handwriting_engine.presets import DEFAULT_CONFIG, REFERENCE_CANVAS_PX
from src.utils import fs, logging_config, validators
from src.utils.validators import RenderConfig

logger = logging.getLogger(__name__)


def render_page_main(
    text: str,
    output_path: str,
    config: Optional[RenderConfig] = None,
    canvas_px: Tuple[int, int] = REFERENCE_CANVAS_PX,
    seed: Optional[int] = None,
    font_dirs: Sequence[str] = (),
    fonts: Optional[Dict[str, str]] = None,
    write_manifest: bool = True,
) -> Dict[str, Any]:
    """Render one page and save it.

    Parameters
    ----------
    text : str
        Page text
    output_path : str
        PNG path ('.png' appended if missing)
    config : RenderConfig, optional
        Render config, DEFAULT_CONFIG if None
    canvas_px : tuple of int
        (W, H) of the page raster
    seed : int, optional
        Seed for jitter and stains; None renders differently every run
    font_dirs : sequence of str
        Extra font directories
    fonts : dict, optional
        Font name → font file registry
    write_manifest : bool
        Write <stem>_manifest.yaml next to the PNG, default True

    Returns
    -------
    Dict[str, Any]
        Results dict with:
            - output_path: str
            - manifest_path: Optional[str]
            - glyph_count: int
            - line_count: int
            - truncated: bool
    """
    config = config or DEFAULT_CONFIG
    width, height = (int(v) for v in canvas_px)

    logging_config.push_context(paper=config.paper_type.value)
    try:
        logger.info(f"Rendering page: {len(text)} chars on {width}×{height}px")

        resolver = FontResolver(search_paths=font_dirs, registry=fonts)
        renderer = HandwritingRenderer(
            config,
            rng=randomness.seeded(seed),
            font_resolver=resolver,
        )
        target = RasterTarget(width, height)
        summary = renderer.render(target, text)

        out_path = export_image(target, output_path)
        logger.info(f"Saved page: {out_path} ({summary.glyph_count} glyphs, {summary.line_count} lines)")

        manifest_path = None
        if write_manifest:
            manifest_path = out_path.with_name(f"{out_path.stem}_manifest.yaml")
            fs.atomic_yaml_dump({
                'schema': 'page_manifest.v1',
                'generator': f"handwriting-renderer {__version__}",
                'image': out_path.name,
                'canvas_px': {'w': width, 'h': height},
                'seed': seed,
                'render': validators.config_to_dict(config),
                'text_chars': len(text),
                'glyph_count': summary.glyph_count,
                'line_count': summary.line_count,
                'truncated': summary.truncated,
            }, manifest_path)
    finally:
        logging_config.pop_context(keys=['paper'])

    return {
        'output_path': str(out_path),
        'manifest_path': str(manifest_path) if manifest_path else None,
        'glyph_count': summary.glyph_count,
        'line_count': summary.line_count,
        'truncated': summary.truncated,
    }


def run_job(job_path: str, output_override: Optional[str] = None) -> Dict[str, Any]:
    """Render a page_job.v1 YAML file; relative paths resolve against the job file."""
    job_path = Path(job_path)
    job = validators.load_page_job(job_path)
    base_dir = job_path.parent

    output = Path(output_override or job.output)
    if not output.is_absolute() and output_override is None:
        output = base_dir / output

    fonts = {
        name: str(path if Path(path).is_absolute() else base_dir / path)
        for name, path in job.fonts.items()
    }
    font_dirs = [str(d if Path(d).is_absolute() else base_dir / d) for d in job.font_dirs]

    return render_page_main(
        text=job.resolve_text(base_dir),
        output_path=str(output),
        config=job.render,
        canvas_px=(job.canvas_px.w, job.canvas_px.h),
        seed=job.seed,
        font_dirs=font_dirs,
        fonts=fonts,
    )


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Base config (file or default) with CLI overrides applied and re-validated."""
    base = validators.load_render_config(args.config) if args.config else DEFAULT_CONFIG
    overrides = {
        'font_family': args.font,
        'font_size': args.font_size,
        'paper_type': args.paper,
        'ink_color': args.ink,
        'line_height': args.line_height,
        'messiness': args.messiness,
        'margins': args.margins,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return base
    return RenderConfig(**{**base.model_dump(), **overrides})


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render text as handwriting on simulated paper"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="Inline page text; line breaks must be real newlines (e.g. $'Dear Ada,\\nHello' in bash)")
    source.add_argument("--text-file", type=str, help="UTF-8 text file")
    source.add_argument("--job", type=str, help="Page job YAML (page_job.v1)")

    parser.add_argument("--output", type=str, default=None, help="Output PNG path (default handwriting.png)")
    parser.add_argument("--config", type=str, default=None, help="Render config YAML")
    parser.add_argument("--font", type=str, default=None, help="Font family, e.g. '\"Caveat\", cursive'")
    parser.add_argument("--font-size", type=float, default=None, help="Font size (px)")
    parser.add_argument("--paper", type=str, default=None, help="PLAIN, LINED, GRID, VINTAGE or BLUEPRINT")
    parser.add_argument("--ink", type=str, default=None, help="Ink colour (hex, rgb() or name)")
    parser.add_argument("--line-height", type=float, default=None, help="Line height multiplier (>= 1)")
    parser.add_argument("--messiness", type=float, default=None, help="Jitter amount in [0, 1]")
    parser.add_argument("--margins", type=float, default=None, help="Page margin (px)")
    parser.add_argument(
        "--size",
        type=int,
        nargs=2,
        metavar=("W", "H"),
        default=list(REFERENCE_CANVAS_PX),
        help="Canvas size in px (default 800 1000)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    parser.add_argument("--font-dir", action="append", default=[], help="Extra font directory (repeatable)")
    parser.add_argument("--no-manifest", action="store_true", help="Skip the YAML manifest")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=str, default=None, help="Optional log file")
    parser.add_argument("--json-logs", action="store_true", help="JSON lines in the log file")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """CLI entry point."""
    args = parse_args(argv)

    logging_config.setup_logging(
        log_level=args.log_level,
        log_file=args.log_file,
        json=args.json_logs,
        quiet_libs=["PIL"],
        context={"app": "render_page"},
    )
    logging_config.install_excepthook()

    if args.job:
        result = run_job(args.job, output_override=args.output)
    else:
        text = args.text if args.text is not None else fs.read_text(args.text_file)
        result = render_page_main(
            text=text,
            output_path=args.output or "handwriting.png",
            config=build_config(args),
            canvas_px=tuple(args.size),
            seed=args.seed,
            font_dirs=args.font_dir,
            write_manifest=not args.no_manifest,
        )

    print("\n=== Render Complete ===")
    print(f"Page: {result['output_path']}")
    if result['manifest_path']:
        print(f"Manifest: {result['manifest_path']}")
    if result['truncated']:
        print("Note: text did not fit and was truncated at the bottom of the page")
    return result


if __name__ == "__main__":
    main()
