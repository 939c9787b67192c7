"""
Prompt templates.
"""
