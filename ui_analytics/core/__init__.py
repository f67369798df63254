"""Event-logging primitives (snapshots, builders, provider boundaries).

Kept free of FastAPI concerns so it can be used from UI code, request handlers, and tests.
"""
