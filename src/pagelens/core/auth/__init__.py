"""Authentication helpers built on element resolution."""

from pagelens.core.auth.login import FormLoginHandler, LoginResult

__all__ = [
    "FormLoginHandler",
    "LoginResult",
]
