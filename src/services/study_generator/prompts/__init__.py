"""Prompt templates for every study mode."""
