"""
Entry point for running the envtestkit CLI as a module.

Usage: python -m envtestkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
