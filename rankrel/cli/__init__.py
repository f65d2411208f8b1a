# CLI package for the Ranking Reliability Engine
"""
Command-line interface.

Commands:
    rankrel run        — Execute full pipeline and write outputs
    rankrel consensus  — Show the consensus ordering
    rankrel summary    — Show per-source reliability
    rankrel positions  — Show one source's position sequence
"""
