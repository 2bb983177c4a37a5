"""Command-line interface for querycache."""
