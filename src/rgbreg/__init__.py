"""Registration intake service binding EVM addresses to Taproot addresses."""

__version__ = "0.1.0"
