"""lyrichord: guitar chord diagrams attached to words in song lyrics."""

__version__ = "0.1.0"
