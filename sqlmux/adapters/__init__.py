"""Dialect adapters.

Each adapter pairs an :class:`~sqlmux.connection.AbstractConnection` subclass
with the DB-API driver it uses.
"""
