"""
Project root discovery and per-root language-server session management.

Modules:
    paths: filesystem primitives and upward traversal
    roots: marker-based root resolvers
    session: one session per root, evicted on exit
    install: installers for server binaries
    config: settings model and loader
"""

__version__ = "0.1.0"
