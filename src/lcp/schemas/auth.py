"""Authentication-related schemas."""

from typing import Optional, Union

from pydantic import BaseModel


class CookieSignIn(BaseModel):
    """Pasted browser cookie and the domain it was copied from."""
    cookie: Optional[str] = None
    domain: Optional[str] = None


class UserProfile(BaseModel):
    """Upstream user status normalized across domain variants.

    ``id``/``session_id`` only carry values on the primary domain and
    ``slug``/``real_name`` only exist on the secondary one. Fields that a
    variant does not have are left unset so they are omitted on output.
    """
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    is_signed_in: bool = False
    is_premium: bool = False
    is_verified: Optional[bool] = None
    session_id: Optional[Union[int, str]] = None
    slug: Optional[str] = None
    real_name: Optional[str] = None


class SignInResponse(BaseModel):
    """Successful cookie sign-in."""
    user: UserProfile
    emailNotVerified: bool = False


class MeResponse(BaseModel):
    """Refreshed profile of the current session."""
    user: Optional[UserProfile] = None


class OkResponse(BaseModel):
    ok: bool = True
