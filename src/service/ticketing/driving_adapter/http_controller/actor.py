"""
Caller identity

Authentication happens upstream (gateway / BFF); the authenticated account id is
forwarded in the X-User-Id header. Requests without it are anonymous.
"""

from typing import Optional

from fastapi import Header, HTTPException, status


ACTOR_HEADER = 'X-User-Id'


def get_optional_actor(
    x_user_id: Optional[str] = Header(default=None, alias=ACTOR_HEADER),
) -> Optional[str]:
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


def require_actor(
    x_user_id: Optional[str] = Header(default=None, alias=ACTOR_HEADER),
) -> str:
    actor_id = get_optional_actor(x_user_id)
    if actor_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f'{ACTOR_HEADER} header is required',
        )
    return actor_id
