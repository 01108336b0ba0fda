# survey_api/endpoints/auth.py
from fastapi import APIRouter

from survey_api.models.schemas import LoginRequest, SessionInfo
from survey_api.services import auth

router = APIRouter()

@router.post("/login", response_model=SessionInfo)
async def login(request: LoginRequest):
    return auth.login(request.name, request.password)
