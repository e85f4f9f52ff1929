"""Section and value extraction for Hebrew appraisal decision documents."""

__version__ = "0.1.0"
