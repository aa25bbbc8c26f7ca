"""
GPA Insight: performance analytics for academic course records.

Computes overall and per-term GPA, a next-term forecast from a closed-form
linear regression over the term series, and a weak/average/strong split of
courses from one-dimensional k-means. Modular layout: analytics engine,
configuration, structured logging, and command-line tools.
"""

__version__ = "0.1.0"
