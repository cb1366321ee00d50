"""
M-Pesa Gateway - Daraja API client

An async client for the Safaricom M-Pesa Daraja API: access token caching,
request signing, retrying dispatch and webhook callback normalization.
"""

__version__ = "0.1.0"
