# texpipe/config.py
from typing import Callable, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .latex_converter import OmmlRenderer
from .symbols import NARY_OPERATORS, SYMBOL_MAP

DEFAULT_CONFIG_FILE = 'config.yaml'


class ConverterSettings(BaseModel):
    alignment: Literal['left', 'center', 'right', 'centerGroup'] = 'center'
    show_source: bool = Field(False, description="Write the LaTeX source above each rendered formula.")
    source_font_name: str = 'Courier New'
    source_font_size: float = Field(10, gt=0, description="Font size of the LaTeX source, in points.")
    extra_symbols: Dict[str, str] = Field(default_factory=dict, description="Command -> glyph.")
    extra_nary_operators: Dict[str, str] = Field(default_factory=dict)


def load_settings(path: str = DEFAULT_CONFIG_FILE,
                  log_callback: Optional[Callable[[str], None]] = None) -> ConverterSettings:
    """
    Loads converter settings from the ``converter`` section of a YAML file.

    A missing, unreadable or invalid file never stops the conversion: a warning is logged and
    the defaults are used instead.
    """
    log = log_callback or print
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise yaml.YAMLError("top-level YAML value must be a mapping")
        settings = ConverterSettings.model_validate(data.get('converter') or {})
        log(f"✅ {path} loaded.")
        return settings
    except (FileNotFoundError, yaml.YAMLError):
        log(f"⚠️ {path} not found or malformed, using default settings.")
    except ValidationError as e:
        log(f"⚠️ {path} has invalid converter settings, using defaults. {e.error_count()} error(s): {e}")
    return ConverterSettings()


def build_renderer(settings: Optional[ConverterSettings] = None,
                   log_callback: Optional[Callable[[str], None]] = None) -> OmmlRenderer:
    settings = settings or ConverterSettings()
    return OmmlRenderer(
        symbol_map={**SYMBOL_MAP, **settings.extra_symbols},
        nary_operators={**NARY_OPERATORS, **settings.extra_nary_operators},
        log_callback=log_callback
    )
