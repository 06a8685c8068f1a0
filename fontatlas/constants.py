"""
fontatlas.constants - version and defaults

licence: https://opensource.org/licenses/MIT
"""

VERSION = '0.1.0'
