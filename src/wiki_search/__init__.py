"""Semantic search over wiki guides and projects."""
