# Overview: Identity-store repository used by the credential verifier.

from ...responses import ErrorCode
from ...schemas import CredentialRecord, RegisteredUserDto


class AccountRepository:
    def __init__(self, gateway):
        self.gateway = gateway

    def get_login_by_username(self, username: str):
        return self.gateway.call(
            "sp_get_login_by_username",
            {"p_username": username},
            decoder=CredentialRecord.from_payload,
            on_empty=ErrorCode.NOT_FOUND,
        )

    def create_user(self, username: str, email: str, password_hash: str):
        return self.gateway.call(
            "sp_create_user",
            {"p_username": username, "p_email": email, "p_password_hash": password_hash},
            decoder=RegisteredUserDto.from_payload,
        )
