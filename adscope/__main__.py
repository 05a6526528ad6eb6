"""
AdScope Module Entry Point
===========================

Allows running the AdScope CLI via: python -m adscope
"""

from adscope.cli import main

if __name__ == "__main__":
    main()
