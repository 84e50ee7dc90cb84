"""
Shared constants for compliance validation.

This module consolidates the fixed scoring policy and the string tables
used across the engine so that every call site reads the same values.
"""

# Category weights for the overall score (must sum to 1.0)
TEXT_WEIGHT = 0.4
SYMBOL_WEIGHT = 0.4
LAYOUT_WEIGHT = 0.2

# Overall score at or above this value passes
COMPLIANCE_THRESHOLD = 0.9

# Keyword-overlap fallback
KEYWORD_MATCH_RATIO = 0.4
MIN_KEYWORD_LENGTH = 3  # words must be longer than 2 characters

# Report messages
COMPLIANT_MESSAGE = "All legal requirements are met."
NON_COMPLIANT_MESSAGE = "Some legal requirements are not met."

# Tabular requirement sources: header substrings per column role
COLUMN_KEYWORDS = {
    "item": ("item", "term", "text"),
    "symbol": ("symbol", "icon", "mark"),
    "description": ("desc", "requirement", "rule"),
    "required": ("required", "mandatory"),
    "type": ("type", "category"),
}

# Symbol cells holding one of these values count as empty
SYMBOL_PLACEHOLDER_VALUES = frozenset({
    "", "#unknown", "undefined", "null", "none", "nan", "n/a",
})

# Item text containing any of these marks the row as a text requirement
TEXT_ITEM_KEYWORDS = ("warning", "trademark", "country", "origin", "age", "grade")
TEXT_DESCRIPTION_KEYWORDS = ("text", "statement", "warning")

# Descriptions containing these phrases also produce a layout rule
LAYOUT_PHRASES = ("must be", "should be")
DEFAULT_LAYOUT_RULE = "position"

# Structured requirement properties naming the expected phrase
PHRASE_PROPERTY_KEYWORDS = ("statement", "text", "phrase")

# Requirement files
SUPPORTED_REQUIREMENT_EXTENSIONS = (".csv", ".xlsx", ".json")
