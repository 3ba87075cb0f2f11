"""rotator.credentials

Credential sources: where access keys come from and go to.
"""

from rotator.credentials.aws import IamAccessKeys, resolve_user_name
from rotator.credentials.base import CredentialPair, CredentialSource

__all__ = [
    "CredentialPair",
    "CredentialSource",
    "IamAccessKeys",
    "resolve_user_name",
]
