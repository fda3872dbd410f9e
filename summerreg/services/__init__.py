"""Business rules behind the HTTP routes.

Services take plain values plus the resolved :class:`~summerreg.models.Student`
or ids, raise :mod:`summerreg.errors` exceptions, and commit their own work.
"""
