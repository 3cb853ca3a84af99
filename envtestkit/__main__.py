"""
Entry point for running the envtestkit CLI as a module.

Usage: python -m envtestkit [command] [options]
"""

from envtestkit.cli.parser import main

if __name__ == "__main__":
    main()
