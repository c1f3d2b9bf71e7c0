"""Infrastructure layer — package data, templates, and file I/O.

Infrastructure may import from domain. It must never import from
services, commands, or output.
"""
