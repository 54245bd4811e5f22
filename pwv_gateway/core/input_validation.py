# pwv_gateway/core/input_validation.py
"""
Input validation for the fetch endpoint
Keeps argument injection away from the vault CLI
"""

import re

from pwv_gateway.core.config import VaultConfiguration
from pwv_gateway.core.constants import ACCOUNT_NAME_PATTERN, SafeSelector
from pwv_gateway.core.exceptions import ValidationError


INVALID_SAFE_MESSAGE = 'invalid safe selector: please specify a valid safe either "managed" or "unmanaged"'
INVALID_ACCOUNT_MESSAGE = "invalid account name: please specify a valid account_name"


class RequestValidator:
    """Validates path parameters before any process is spawned"""
    
    ACCOUNT_NAME = re.compile(ACCOUNT_NAME_PATTERN)
    
    def __init__(self, config: VaultConfiguration):
        self.config = config
    
    def validate(self, safe_token: str, account_name: str) -> str:
        """
        Check the safe selector and account name.
        
        Returns:
            The concrete vault safe name for the selector
        
        Raises:
            ValidationError: selector unknown or not configured, or account
                name outside [0-9a-zA-Z_-]+
        """
        safe_name = self.resolve_safe(safe_token)
        
        if not self.is_valid_account_name(account_name):
            raise ValidationError(INVALID_ACCOUNT_MESSAGE)
        
        return safe_name
    
    def resolve_safe(self, safe_token: str) -> str:
        try:
            selector = SafeSelector(safe_token)
        except ValueError:
            raise ValidationError(INVALID_SAFE_MESSAGE) from None
        
        safe_name = self.config.safe_name_for(selector)
        # An unconfigured safe is as unusable as an unknown selector
        if not safe_name:
            raise ValidationError(INVALID_SAFE_MESSAGE)
        return safe_name
    
    @classmethod
    def is_valid_account_name(cls, account_name: str) -> bool:
        return cls.ACCOUNT_NAME.fullmatch(account_name or "") is not None
