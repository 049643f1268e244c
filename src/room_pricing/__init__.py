"""
Package marker for source code under `src.room_pricing`.
It groups the nightly room-price engine stages with its trace model and the boundary helpers around it.
Each pipeline stage lives in its own sibling module and is imported from there directly.
"""
