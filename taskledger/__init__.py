"""
taskledger - Source Package

A text-command interpreter for a task list and an expense log,
both kept in plain text files.

DESIGN PRINCIPLES:
1. Validate first, mutate second
2. Fail early, fail visibly (typed error kinds, never silent fixes)
3. Memory and disk agree after every command
4. Every step is auditable
5. Storage channel is swappable
"""

__version__ = "1.0.0"
__author__ = "taskledger Team"
