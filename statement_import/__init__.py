"""
Statement Import - Source Package

Turns bank-statement CSV exports into candidate household transactions.

PRINCIPLES:
1. Never throw on bad data, degrade and report
2. Every stage is a pure function over in-memory data
3. Validation reports defects, the caller decides what to drop
4. Every import run is auditable
"""

__version__ = "1.0.0"
__author__ = "Statement Import Team"
