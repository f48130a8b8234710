"""Gladia Transcriber: batch client for the Gladia pre-recorded transcription API.

WHY: Gladia jobs take one required audio URL and a long list of optional
features, each configured through nested option objects. This package
turns those options into clean request bodies and runs upload, start,
and fetch calls over a batch of independent work items.

HOW: Two stages: normalize (pure transforms from raw option values to
API sub-objects) and dispatch (build one HTTP call per item, send it
through an injected transport, collect one result per item).

RULES:
- Request building is pure and testable without a network
- All HTTP goes through a Transport (GladiaClient in production)
- One result per input item, in input order
"""

__version__ = "0.1.0"
