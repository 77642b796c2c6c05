"""SCON values and parsing, SS58 account ids, and registry-driven SCALE decoding."""

__version__ = "0.1.0"