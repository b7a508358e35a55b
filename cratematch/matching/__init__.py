"""Matching engine: normalization, scoring, classification and crate lookup."""
