"""
Classicrypt Module Entry Point
===============================

Allows running the Classicrypt CLI via: python -m classicrypt
"""

from classicrypt.cli import main

if __name__ == "__main__":
    main()
