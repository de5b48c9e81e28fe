"""twofa — terminal enrollment and verification of TOTP accounts."""

__version__ = "0.1.0"
