"""
Requirement model building.

- column_classifier.py: detect which spreadsheet column plays which role
- requirement_builder.py: tabular rows / structured tree -> RequirementSet
- requirement_loader.py: CSV, Excel and JSON uploads -> raw requirement source
"""
from .column_classifier import classify_columns, collect_headers
from .requirement_builder import RequirementBuilder, parse_required
from .requirement_loader import RequirementFileLoader

__all__ = [
    'classify_columns',
    'collect_headers',
    'RequirementBuilder',
    'parse_required',
    'RequirementFileLoader',
]
