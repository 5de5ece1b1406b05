"""Core primitives shared by the dispatch loop."""
