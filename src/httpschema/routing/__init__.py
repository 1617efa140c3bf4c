"""Routing — path pattern engine and the method-keyed route table.

Patterns are parsed once and cached; the route table is compiled into
an immutable lookup structure when the router freezes.
"""
