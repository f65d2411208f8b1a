# Reporting package for the Ranking Reliability Engine
"""
Output records and file writers (CSV and Markdown).
"""
