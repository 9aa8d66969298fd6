"""
CLI (Command Line Interface) for the internal link auditor.

This is a thin wrapper around the core engine. All business logic lives
in the linkaudit package so the API can reuse it.
"""
