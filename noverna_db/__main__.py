#!/usr/bin/env python3
"""
Enable execution of the noverna_db package as a module.

This allows running the package with: python -m noverna_db
"""

from .cli.main import main

if __name__ == "__main__":
    main()
