"""Input/output layer for solver solution documents.

Public API:
    load_solution_file(path)        -- read + schema-check a solution JSON file
    load_solution_text(text)        -- same, for an uploaded file body
    validate_solution_document(doc) -- presence check of the required keys
    solution_to_view(solution)      -- JSON-ready view model
    write_analysis(solution, dir)   -- write analysis.json to a directory
"""

from .reader import load_solution_file, load_solution_text, validate_solution_document
from .schemas import decode_variable_key, encode_variable_key

__all__ = [
    "decode_variable_key",
    "encode_variable_key",
    "load_solution_file",
    "load_solution_text",
    "validate_solution_document",
]

# Lazy imports: the writer depends on the analysis modules, which depend on
# this package's schemas.
def solution_to_view(*args, **kwargs):
    from .writer import solution_to_view as _fn
    return _fn(*args, **kwargs)

def groups_to_view(*args, **kwargs):
    from .writer import groups_to_view as _fn
    return _fn(*args, **kwargs)

def write_analysis(*args, **kwargs):
    from .writer import write_analysis as _fn
    return _fn(*args, **kwargs)
