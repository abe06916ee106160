"""Attendance Engine package.

Reconstructs work sessions from an append-only check-in/check-out log and
aggregates them into daily records, policy flags and monthly presence.
Organized by feature modules (events, sessions, policy, daily, presence, ...)
with a thin Flask controller layer over service/repository layers.
"""
