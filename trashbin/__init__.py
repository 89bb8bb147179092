"""
Trashbin: freedesktop.org trash entries, their ordering, and delete/restore.
"""
