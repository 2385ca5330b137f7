from dataclasses import dataclass

from fastapi import HTTPException, Request


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str


# Authentication happens upstream; the gateway forwards identity headers.
def get_current_user(request: Request) -> CurrentUser:
    user_id = request.headers.get("x-user-id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    role = (request.headers.get("x-user-role") or "user").strip().lower()
    return CurrentUser(id=user_id, role=role)
