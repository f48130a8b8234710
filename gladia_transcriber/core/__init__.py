"""Core request-building and dispatch modules.

WHY: The core package holds everything that decides what is sent to
Gladia: work items, option normalization, request assembly, and the
batch loop.

HOW: items.py defines the input entries, normalize.py the pure option
transforms, request.py the job-creation body, operations.py the three
HTTP call definitions, dispatcher.py the per-item loop.

RULES:
- normalize.py and request.py are pure, with no I/O
- Only dispatcher.py decides between continuing and aborting on failure
"""
