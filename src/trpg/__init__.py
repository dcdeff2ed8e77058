"""TRPG account persistence.

This package contains the account records of the game management system,
their persistence layer and the runtime infrastructure (configuration,
logging, database sessions) they depend on.
"""

__version__ = "0.1.0"
