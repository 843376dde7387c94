from .service import Authenticator, LoginResult, hash_password, verify_password

__all__ = ["Authenticator", "LoginResult", "hash_password", "verify_password"]
