"""Club Points package.

Tracks club members, the events they attend and the points they earn.
Organized by feature modules (members, events, standings, exchange, ...)
with a thin Flask controller layer over service/repository layers.
"""
