#!/usr/bin/env python3
"""Main entry point for apicall CLI."""

from .commands import main

if __name__ == '__main__':
    main()
