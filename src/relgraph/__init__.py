"""
Relation Graph (relgraph) Package

Turns a relationship survey export into a directed, labeled graph of who
rates whom, and how.

PIPELINE:
---------
    CSV export
      -> csv_parser      (header cleaning, typed rows)
      -> graph_builder   (synonym normalization, strongest-answer resolution)
      -> filtering       (person / relation filters)
      -> layout          (deterministic circle)
      -> backends        (SVG export)

The Graph is immutable and rebuilt wholesale on a new upload or
configuration change. Views (filters, merged/raw toggle) never touch it.
"""

__version__ = "0.1.0"
