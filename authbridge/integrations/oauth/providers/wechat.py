"""WeChat Open Platform provider definition.

WeChat deviates from OAuth2 in every step: the client id is sent as
``appid``, the QR-code login page requires a ``#wechat_redirect`` fragment,
the token endpoint takes a GET with ``secret`` instead of ``client_secret``
and the userinfo endpoint expects the token and ``openid`` as query
parameters. Errors are reported in 200 responses through ``errcode``.

See https://developers.weixin.qq.com/doc/oplatform/en/Website_App/WeChat_Login/Wechat_Login.html
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from authbridge.integrations.oauth.base import (
    AuthorizationRequest,
    ProviderDefinition,
    TokenRequest,
    UserinfoRequest,
)
from authbridge.integrations.oauth.definition import resolve_provider_definition
from authbridge.integrations.oauth.exceptions import ConfigurationError, ProviderRequestError

WECHAT_AUTHORIZATION_URL = "https://open.weixin.qq.com/connect/qrconnect"
WECHAT_TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/access_token"
WECHAT_USERINFO_URL = "https://api.weixin.qq.com/sns/userinfo"

# Login page language -> userinfo language
_USERINFO_LANG = {"cn": "zh_CN", "en": "en"}


def _check_errcode(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ProviderRequestError(f"WeChat {what} response is not a JSON object")
    if data.get("errcode"):
        raise ProviderRequestError(
            f"WeChat {what} error {data['errcode']}: {data.get('errmsg', 'unknown error')}"
        )
    return data


def authorization_request(request: AuthorizationRequest) -> str:
    """Append the fragment the QR-code login page requires."""
    base, _, _ = request.url.partition("#")
    return f"{base}#wechat_redirect"


async def token_request(request: TokenRequest) -> Dict[str, Any]:
    """Exchange the code with a GET carrying ``appid`` and ``secret``."""
    response = await request.client.get(
        request.url,
        params={
            "appid": request.provider.client_id,
            "secret": request.provider.client_secret,
            "code": request.code,
            "grant_type": "authorization_code",
        },
    )
    response.raise_for_status()
    return _check_errcode(response.json(), "token")


async def userinfo_request(request: UserinfoRequest) -> Dict[str, Any]:
    """Fetch the profile with the token and ``openid`` as query parameters."""
    tokens = request.tokens
    if not isinstance(tokens, Mapping) or not tokens.get("access_token") or not tokens.get("openid"):
        raise ProviderRequestError("WeChat token payload must carry access_token and openid")

    lang = request.provider.option("lang", "cn")
    response = await request.client.get(
        request.url,
        params={
            "access_token": tokens["access_token"],
            "openid": tokens["openid"],
            "lang": _USERINFO_LANG.get(lang, "zh_CN"),
        },
    )
    response.raise_for_status()
    return _check_errcode(response.json(), "userinfo")


def map_profile(profile: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a WeChat userinfo body; WeChat never shares an email address."""
    return {
        "id": profile.get("openid"),
        "name": profile.get("nickname"),
        "email": None,
        "image": profile.get("headimgurl"),
    }


def wechat(**options: Any) -> ProviderDefinition:
    """Build the WeChat provider.

    Args:
        client_id: WeChat AppID.
        client_secret: WeChat AppSecret.
        redirect_uri: Callback URL registered with the WeChat application.
        lang: Login page language, ``"cn"`` (default) or ``"en"``.

    Any other keyword is kept in ``extra_options``.
    """
    lang = options.get("lang", "cn")
    if lang not in _USERINFO_LANG:
        raise ConfigurationError(f"Provider 'wechat' lang must be 'cn' or 'en', got {lang!r}")

    defaults = {
        "id": "wechat",
        "name": "WeChat",
        "type": "oauth",
        "authorization": {
            "url": WECHAT_AUTHORIZATION_URL,
            "params": {
                "appid": options.get("client_id"),
                # WeChat identifies the application by appid only.
                "client_id": None,
                "redirect_uri": options.get("redirect_uri"),
                "scope": "snsapi_login",
                "lang": lang,
            },
            "request": authorization_request,
        },
        "token": {"url": WECHAT_TOKEN_URL, "request": token_request},
        "userinfo": {"url": WECHAT_USERINFO_URL, "request": userinfo_request},
        "profile": map_profile,
        "required_options": ("redirect_uri",),
        "lang": lang,
        "display": {
            "logo": "/wechat.svg",
            "logo_dark": "/wechat.svg",
            "bg": "#fff",
            "bg_dark": "#24292f",
            "text": "#000",
            "text_dark": "#fff",
        },
    }
    return resolve_provider_definition(options, defaults)


__all__ = [
    "WECHAT_AUTHORIZATION_URL",
    "WECHAT_TOKEN_URL",
    "WECHAT_USERINFO_URL",
    "wechat",
]
