from fastapi import APIRouter, Depends

from routers.deps import get_services, ok
from schemas import LoginRequest, RegisterRequest
from security import get_current_user
from services import Services

router = APIRouter()


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, services: Services = Depends(get_services)):
    return ok(**services.auth.register(payload))


@router.post("/login")
def login(payload: LoginRequest, services: Services = Depends(get_services)):
    return ok(**services.auth.login(payload))


@router.get("/profile")
def profile(current: dict = Depends(get_current_user), services: Services = Depends(get_services)):
    return ok(services.auth.get_profile(current["_id"]))


@router.get("/me")
def me(current: dict = Depends(get_current_user), services: Services = Depends(get_services)):
    return ok(message="تم جلب بيانات المستخدم بنجاح", user=services.auth.get_profile(current["_id"]))
