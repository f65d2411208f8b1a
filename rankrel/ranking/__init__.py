# Ranking package for the Ranking Reliability Engine
"""
Consensus construction.

Builds the universe-wide rank table, fuses it into a single Borda-style
ordering, and re-expresses each source in consensus positions.
"""
