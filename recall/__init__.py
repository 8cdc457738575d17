"""Review scheduling and memory-retention engine for a spaced-repetition app."""

__version__ = "0.1.0"
