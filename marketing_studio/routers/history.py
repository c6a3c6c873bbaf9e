from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from marketing_studio.auth import get_current_user
from marketing_studio.db import GenerationHistory, HistoryRepository, User
from marketing_studio.dependencies import get_history_repo
from marketing_studio.schemas.records import HistoryRecord, HistoryUpdateRequest, SuccessResponse

router = APIRouter(prefix="/api/history", tags=["history"])


def _get_history_or_404(repo: HistoryRepository, user: User, history_id: int) -> GenerationHistory:
    row = repo.get_owned(user.id, history_id)
    if row is None:
        raise HTTPException(status_code=404, detail="History not found")
    return row


@router.get("", response_model=List[HistoryRecord], response_model_by_alias=True)
def list_history(
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    repo: HistoryRepository = Depends(get_history_repo),
) -> List[HistoryRecord]:
    return [HistoryRecord.model_validate(row) for row in repo.list_for_user(user.id, limit)]


@router.get("/{history_id}", response_model=HistoryRecord, response_model_by_alias=True)
def get_history(
    history_id: int,
    user: User = Depends(get_current_user),
    repo: HistoryRepository = Depends(get_history_repo),
) -> HistoryRecord:
    return HistoryRecord.model_validate(_get_history_or_404(repo, user, history_id))


@router.patch("/{history_id}", response_model=SuccessResponse)
def update_history(
    history_id: int,
    payload: HistoryUpdateRequest,
    user: User = Depends(get_current_user),
    repo: HistoryRepository = Depends(get_history_repo),
) -> SuccessResponse:
    row = _get_history_or_404(repo, user, history_id)
    repo.update(row, payload.changes())
    return SuccessResponse()


@router.delete("/{history_id}", response_model=SuccessResponse)
def delete_history(
    history_id: int,
    user: User = Depends(get_current_user),
    repo: HistoryRepository = Depends(get_history_repo),
) -> SuccessResponse:
    repo.delete(_get_history_or_404(repo, user, history_id))
    return SuccessResponse()
