"""Local HTTP gateway for retrieving account passwords through the vault CLI."""

from pwv_gateway.core.constants import VERSION

__version__ = VERSION
