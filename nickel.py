#!/usr/bin/env python3
"""
Nickel interpreter entry point.

Usage: python nickel.py input.nkl [--seed N] [--dump] [--verbose]
"""

from nickel.runner import main

if __name__ == '__main__':
    main()
