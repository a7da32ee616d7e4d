"""fit-tracker: fitness records, routines and shareable challenges."""

__version__ = "0.1.0"
