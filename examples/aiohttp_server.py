"""
OAuth callback and passkey endpoints on an aiohttp server.

Run with PASSLESS_* variables set, then open http://localhost:3000/login/google.
"""

import json
import secrets

from aiohttp import web

from passless import Passless, PasslessError
from passless.passkey import options_to_json

STATES = set()


async def login(request: web.Request) -> web.Response:
    state = secrets.token_urlsafe(16)
    STATES.add(state)
    url = request.app["passless"].get_auth_url(request.match_info["provider"], state)
    raise web.HTTPFound(url)


async def callback(request: web.Request) -> web.Response:
    state = request.query.get("state", "")
    if state not in STATES:
        raise web.HTTPBadRequest(text="invalid state")
    STATES.discard(state)

    result = await request.app["passless"].exchange_code(
        request.match_info["provider"], request.query.get("code", "")
    )
    return web.json_response({"success": True, "user": result.profile})


async def passkey_register_options(request: web.Request) -> web.Response:
    body = await request.json()
    options = await request.app["passless"].create_passkey_registration_options(
        body["userId"], body["username"], body["displayName"]
    )
    return web.Response(text=options_to_json(options), content_type="application/json")


async def passkey_register_verify(request: web.Request) -> web.Response:
    result = await request.app["passless"].verify_passkey_registration_response(await request.json())
    return web.json_response({"verified": result.verified})


async def passkey_login_options(request: web.Request) -> web.Response:
    body = await request.json() if request.can_read_body else {}
    options = await request.app["passless"].create_passkey_authentication_options(body.get("userId"))
    return web.Response(text=options_to_json(options), content_type="application/json")


async def passkey_login_verify(request: web.Request) -> web.Response:
    result = await request.app["passless"].verify_passkey_authentication_response(await request.json())
    if not result.verified:
        return web.json_response({"verified": False}, status=401)
    return web.json_response({"verified": True, "userId": result.user_id})


@web.middleware
async def errors(request: web.Request, handler):
    try:
        return await handler(request)
    except PasslessError as e:
        return web.Response(status=400, text=json.dumps(e.to_dict()), content_type="application/json")


async def close_passless(app: web.Application) -> None:
    await app["passless"].close()


def create_app() -> web.Application:
    app = web.Application(middlewares=[errors])
    app["passless"] = Passless()
    app.on_cleanup.append(close_passless)
    app.router.add_get("/login/{provider}", login)
    app.router.add_get("/callback/{provider}", callback)
    app.router.add_post("/passkey/register/options", passkey_register_options)
    app.router.add_post("/passkey/register/verify", passkey_register_verify)
    app.router.add_post("/passkey/login/options", passkey_login_options)
    app.router.add_post("/passkey/login/verify", passkey_login_verify)
    return app


if __name__ == "__main__":
    web.run_app(create_app(), port=3000)
