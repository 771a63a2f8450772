"""Routing: template compilation, ordered route table, first-match lookup.

Routes are registered during setup and the table is frozen before the
first request is dispatched.
"""
