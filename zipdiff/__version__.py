"""
Package metadata, read by setup.py.
"""

__title__ = 'zipdiff'
__description__ = 'Compares the entries of two zip, jar, war, ear or rar archives.'
__version__ = '1.0.0'
__author__ = 'zipdiff contributors'
__license__ = 'MIT'
__copyright__ = 'Copyright 2026 zipdiff contributors'
