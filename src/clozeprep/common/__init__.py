"""Shared utilities for the cloze pipeline."""
