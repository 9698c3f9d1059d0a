"""
Response simulation module for Partial Credit Model items.

This module produces simulated item responses from known trait values, so
that trait estimates and their standard errors can be checked against the
truth in offline simulation studies.

It is NOT intended for production inference.
"""
