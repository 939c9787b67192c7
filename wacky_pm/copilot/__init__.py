"""
Copilot payloads, events and LLM access.
"""
