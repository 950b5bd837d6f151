"""
Classicrypt Parsers
====================

Input parsing for key material supplied on the command line.
"""

from classicrypt.parsers.key_parser import build_key_params, parse_matrix

__all__ = [
    "build_key_params",
    "parse_matrix",
]
