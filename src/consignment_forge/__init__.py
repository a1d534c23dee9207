"""
consignment-forge: Transcoding and mutation testing for consignment streams.

Explodes binary consignments into an inspectable directory tree, rebuilds
them byte-for-byte, and manufactures attacked variants for validator tests.
"""

__version__ = "0.1.0"
