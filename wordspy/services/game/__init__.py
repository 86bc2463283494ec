"""Game domain services: rooms, word assignment, voting and presence.

Routes and socket handlers call into this package; nothing here knows about
HTTP or Socket.IO payloads apart from ``presence``, which drives the
disconnect grace period.
"""
