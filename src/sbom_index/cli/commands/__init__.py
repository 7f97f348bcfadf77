"""
CLI commands: build, summary, query and status.
"""
