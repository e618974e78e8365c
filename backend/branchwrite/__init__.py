"""
BranchWrite / 枝写
File-backed storage core for writing projects and books.
"""

__version__ = "0.1.0"
