"""
Package marker for the resource CRUD services.
It groups the HTTP boundary, the resource stores, and shared helpers under a stable import path.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""
