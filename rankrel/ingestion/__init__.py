# Ingestion package for the Ranking Reliability Engine
"""
Source list loading.

One source per text file, one item identifier per line, best first.
"""
