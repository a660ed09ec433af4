from fastapi import Request

from services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def ok(data=None, **extra) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
