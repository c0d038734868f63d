"""Workspace compliance audit: findings aggregation and multi-framework scoring."""

__version__ = "1.0.0"
