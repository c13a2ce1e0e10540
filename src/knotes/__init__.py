"""K-Notes backend.

Shared domain primitives, database wiring and the HTTP/CLI presentation
layers. Identity concerns (users, passwords, sessions) live in
``knotes_identity``; configuration lives in ``knotes_config``.
"""
