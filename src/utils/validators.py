"""YAML schema validation and config loading.

Provides centralized validation for all configuration using pydantic:
    - Render config (RenderConfig): font, paper, ink, spacing, messiness, margins
    - Page job schema (page_job.v1.yaml): text source, canvas size, render
      config, seed, output path and font registry

All modules must use these validators to load configs for fail-fast error
detection with actionable messages (offending keys, expected ranges).

Units:
    - Geometry: pixels of the target canvas
    - Angles: radians
    - Colour: CSS-style strings ('#1e3a8a', 'rgb(30, 58, 138)', 'navy')

Usage:
    from src.utils import validators

    cfg = validators.load_render_config("configs/render_default.v1.yaml")
    job = validators.load_page_job("configs/page_job.example.yaml")
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from . import color


# ============================================================================
# RENDER CONFIG
# ============================================================================

class PaperType(str, Enum):
    """Fixed enumeration of paper presets."""
    PLAIN = "PLAIN"
    LINED = "LINED"
    GRID = "GRID"
    VINTAGE = "VINTAGE"
    BLUEPRINT = "BLUEPRINT"


class RenderConfig(BaseModel):
    """Immutable per-call render configuration.

    Field names are snake_case; the camelCase names used by UI state
    (``fontFamily``, ``lineHeight``, ...) are accepted as aliases.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra='forbid',
    )

    font_family: str = Field('"Caveat", cursive', min_length=1, description="Logical font family (CSS-style list)")
    font_size: float = Field(24.0, gt=0.0, description="Font size (px)")
    paper_type: PaperType = Field(PaperType.LINED, description="Paper preset")
    ink_color: str = Field("#1e3a8a", description="Ink colour (hex, rgb() or CSS name)")
    line_height: float = Field(1.5, ge=1.0, description="Line spacing multiplier applied to font_size")
    letter_spacing: float = Field(0.0, description="Reserved; not consumed by layout")
    messiness: float = Field(0.3, ge=0.0, le=1.0, description="Jitter magnitude, 0 = typeset")
    margins: float = Field(40.0, ge=0.0, description="Uniform page margin (px)")

    @field_validator('paper_type', mode='before')
    @classmethod
    def normalize_paper_type(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, PaperType):
            return v.strip().upper()
        return v

    @field_validator('ink_color')
    @classmethod
    def validate_ink_color(cls, v: str) -> str:
        if not color.is_valid_color(v):
            raise ValueError(f"ink_color must be a hex, rgb() or named colour, got '{v}'")
        return v.strip()

    @property
    def line_spacing(self) -> float:
        """Vertical distance between baselines (px)."""
        return self.font_size * self.line_height


# ============================================================================
# PAGE JOB SCHEMA V1
# ============================================================================

class CanvasPx(BaseModel):
    """Target raster size (pixels)."""
    w: int = Field(800, ge=1, description="Width (px)")
    h: int = Field(1000, ge=1, description="Height (px)")


class PageJobV1(BaseModel):
    """Single page render job (page_job.v1.yaml schema)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("page_job.v1", alias="schema", description="Schema version")
    text: Optional[str] = Field(None, description="Inline page text")
    text_file: Optional[str] = Field(None, description="Path to a UTF-8 text file")
    canvas_px: CanvasPx = Field(default_factory=CanvasPx)
    render: RenderConfig = Field(default_factory=RenderConfig)
    seed: Optional[int] = Field(None, ge=0, description="Seed for jitter and stains; None = unseeded")
    output: str = Field("handwriting.png", description="Output PNG path")
    font_dirs: List[str] = Field(default_factory=list, description="Extra directories searched for font files")
    fonts: Dict[str, str] = Field(default_factory=dict, description="Font family name → font file path")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "page_job.v1":
            raise ValueError(f"Expected schema 'page_job.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_text_source(self) -> 'PageJobV1':
        """Exactly one of text / text_file must be given."""
        if (self.text is None) == (self.text_file is None):
            raise ValueError("Page job needs exactly one of 'text' or 'text_file'")
        return self

    def resolve_text(self, base_dir: Union[str, Path, None] = None) -> str:
        """Return the page text, reading ``text_file`` relative to ``base_dir``."""
        if self.text is not None:
            return self.text
        from . import fs

        path = Path(self.text_file)
        if base_dir is not None and not path.is_absolute():
            path = Path(base_dir) / path
        return fs.read_text(path)


# ============================================================================
# PUBLIC API
# ============================================================================

def load_render_config(path: Union[str, Path]) -> RenderConfig:
    """Load and validate a render config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file holding the fields at top level or under a ``render:`` key

    Returns
    -------
    RenderConfig
        Validated render configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Render config not found: {path}")

    data = fs.load_yaml(path)
    if isinstance(data, dict) and 'render' in data:
        data = data['render']
    try:
        return RenderConfig(**data)
    except Exception as e:
        raise ValueError(f"Render config validation failed at {path}: {e}") from e


def load_page_job(path: Union[str, Path]) -> PageJobV1:
    """Load and validate a page job from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to page_job.v1.yaml file

    Returns
    -------
    PageJobV1
        Validated job

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Page job not found: {path}")

    data = fs.load_yaml(path)
    try:
        return PageJobV1(**data)
    except Exception as e:
        raise ValueError(f"Page job validation failed at {path}: {e}") from e


def config_to_dict(cfg: RenderConfig) -> Dict[str, Any]:
    """Flatten a RenderConfig into plain YAML-safe values (for manifests)."""
    return cfg.model_dump(mode='json')
