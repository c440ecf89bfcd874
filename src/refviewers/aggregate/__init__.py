"""Authorship aggregation over canonical work lists.

Each distinct author identity gets one aggregate recording the works it
appears in, and which of those it leads or closes.
"""

from .aggregator import aggregate_authors

__all__ = ["aggregate_authors"]
