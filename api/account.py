# internal imports
from fastapi import APIRouter, HTTPException, Form, Depends
from pydantic import ValidationError

# external imports
from api.dependencies import get_storage_service
from db.schemas import Session, UserProfile
from services.errors import StorageFailureError
from services.storage_service import StorageService


router = APIRouter(prefix="/api/account", tags=["account"])


def _validation_detail(error: ValidationError) -> list:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


@router.post("/signup")
async def signup(
    username: str = Form(...),
    password: str = Form(...),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Create the local user and log them in.

    Args:
        username: at least 3 characters
        password: at least 6 characters, kept in the encrypted store
    """
    try:
        user = await storage.save_user(username.strip(), password)
        await storage.save_session(Session(is_logged_in=True, username=user.username))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_detail(e))
    except StorageFailureError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": f"User '{user.username}' created", "data": {"username": user.username}}


@router.post("/login")
async def login(
    username: str = Form(...),
    password: str = Form(...),
    storage: StorageService = Depends(get_storage_service),
):
    if not await storage.validate_credentials(username.strip(), password):
        raise HTTPException(status_code=401, detail="Invalid username or password.")

    try:
        await storage.save_session(Session(is_logged_in=True, username=username.strip()))
    except StorageFailureError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Logged in", "data": {"username": username.strip()}}


@router.post("/logout")
async def logout(storage: StorageService = Depends(get_storage_service)):
    await storage.clear_session()
    return {"status": "success", "message": "Logged out"}


@router.get("/session", response_model=Session | None)
async def get_session(storage: StorageService = Depends(get_storage_service)):
    return await storage.get_session()


@router.get("/profile", response_model=UserProfile | None)
async def get_profile(storage: StorageService = Depends(get_storage_service)):
    return await storage.get_profile()


@router.put("/profile", response_model=UserProfile)
async def save_profile(profile: UserProfile, storage: StorageService = Depends(get_storage_service)):
    try:
        return await storage.save_profile(profile)
    except StorageFailureError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/first-launch")
async def check_first_launch(storage: StorageService = Depends(get_storage_service)):
    return {"first_launch": await storage.check_first_launch()}


@router.post("/first-launch")
async def set_launched(storage: StorageService = Depends(get_storage_service)):
    await storage.set_launched()
    return {"first_launch": False}


@router.delete("/")
async def clear_all_data(storage: StorageService = Depends(get_storage_service)):
    """Remove every locally stored value: user, profile, session, onboarding flag and history."""
    try:
        await storage.clear_all()
    except StorageFailureError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "success", "message": "All data cleared"}
