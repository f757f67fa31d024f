# backend/utils/user_scope.py
from typing import Optional
from fastapi import Query

from config import settings

# No authentication: the user id only partitions cart rows
def get_query_user_id(user_id: Optional[int] = Query(None, alias="userId")) -> Optional[int]:
    return user_id

def resolve_user_id(query_user_id: Optional[int], body_user_id: Optional[int] = None) -> int:
    # Query string wins over body, then the configured default
    if query_user_id is not None:
        return query_user_id
    if body_user_id is not None:
        return body_user_id
    return settings.DEFAULT_USER_ID
