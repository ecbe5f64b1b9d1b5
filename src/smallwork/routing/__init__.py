"""Routing: ordered route table with first-match-wins lookup.

Routes are registered during setup (optionally inside nested groups)
and the table is frozen before the first request is served.
"""
