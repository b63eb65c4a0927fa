"""Command line wallet for the zkSync layer-2 network"""

__version__ = "0.1.0"
