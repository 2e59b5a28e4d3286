"""Google sign-in using authlib's Starlette integration."""

from authlib.integrations.starlette_client import OAuth

from app.config import settings

oauth = OAuth()

# OpenID Connect, endpoints auto-discovered
oauth.register(
    name="google",
    client_id=settings.google_client_id,
    client_secret=settings.google_client_secret,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)


def get_google_user_info(token: dict) -> dict:
    """Profile fields from the ID token's ``userinfo`` claim.

    Returns:
        dict with keys: email, name, avatar_url, provider_id
    """
    userinfo = token.get("userinfo") or {}
    email = userinfo.get("email", "")
    return {
        "email": email,
        "name": userinfo.get("name") or email.split("@")[0],
        "avatar_url": userinfo.get("picture"),
        "provider_id": userinfo.get("sub", ""),
    }
