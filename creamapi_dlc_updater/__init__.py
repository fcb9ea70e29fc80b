"""Fetch the DLC list of a Steam app and write it into a CreamAPI INI file."""

__version__ = "0.1.0"
