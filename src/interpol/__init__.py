"""interpol - string interpolation with a transformer hook.

Templates contain `{code}` blocks; each block's code is evaluated against an
environment (optionally through a transformer) and the result is spliced
into the output.
"""

from interpol.config import RenderConfig, load_render_config
from interpol.engine import (
    Interpolator,
    interpolate,
    interpolate_data,
    interpolate_lines,
    trim_segments,
)
from interpol.evaluator import (
    Evaluator,
    JinjaEvaluator,
    PythonEvaluator,
    create_evaluator,
    register_evaluator,
    scope,
)
from interpol.exceptions import (
    EvaluationError,
    NestingError,
    RecycleError,
    TemplateError,
    TransformerError,
    UnmatchedDelimiterError,
)
from interpol.pipeline import Renderer, render
from interpol.scanner import Expression, Literal, Scanner, Segment, scan
from interpol.transformers import (
    Computation,
    Fallback,
    Value,
    collapse_transformer,
    decode_fallback,
    evaluate_transformer,
    safely_transformer,
)

__all__ = [
    # Engine
    "Interpolator",
    "interpolate",
    "interpolate_data",
    "interpolate_lines",
    "trim_segments",
    "RenderConfig",
    "load_render_config",
    # Scanner
    "Scanner",
    "Segment",
    "Literal",
    "Expression",
    "scan",
    # Pipeline
    "Renderer",
    "render",
    # Evaluation
    "Evaluator",
    "PythonEvaluator",
    "JinjaEvaluator",
    "create_evaluator",
    "register_evaluator",
    "scope",
    # Transformers
    "evaluate_transformer",
    "collapse_transformer",
    "safely_transformer",
    "Value",
    "Computation",
    "Fallback",
    "decode_fallback",
    # Errors
    "TemplateError",
    "UnmatchedDelimiterError",
    "NestingError",
    "EvaluationError",
    "TransformerError",
    "RecycleError",
]
