"""
Package marker for source code under `src`.
It gives the pricing engine and its shared settings and logging helpers one stable import root.
Tests and the preview CLI import everything through `src.<package>.<module>`.
"""
