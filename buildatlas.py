#!/usr/bin/env python3
"""
Pack BMFont fonts into a texture atlas
licence: https://opensource.org/licenses/MIT
"""

from fontatlas.cli import main


main()
