"""Media Shelf.

A catalog for backups of physical Blu-Ray and DVD disks, stored as a plain
directory tree with optional TMDb metadata and ready-made player commands.
"""

__version__ = "0.1.0"
