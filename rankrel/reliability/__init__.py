# Reliability package for the Ranking Reliability Engine
"""
Disagreement measurement.

Counts inversions of each position sequence three independent ways and
turns the authoritative count into a reliability score in [0, 1].
"""
