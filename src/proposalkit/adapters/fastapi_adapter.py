"""FastAPI router exposing composer sessions over HTTP.

Each session is one :class:`~proposalkit.composer.ProposalComposer`.  A
client creates a session, edits slots and form fields, and submits.  Editors
are server-side: the client reports results, the registered editors turn
them into instructions.

Usage::

    from fastapi import FastAPI
    from proposalkit.adapters.fastapi_adapter import create_composer_router

    def new_composer() -> ProposalComposer:
        return ProposalComposer(
            fetch_governance=rpc.fetch_governance,
            create_proposal=client.create_proposal,
        )

    app = FastAPI()
    app.include_router(create_composer_router(new_composer))
"""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any, Callable, Optional

try:
    from fastapi import APIRouter, Body, HTTPException
    from pydantic import BaseModel
except ImportError as exc:
    raise ImportError(
        "FastAPI is required for the FastAPI adapter. "
        "Install it with: pip install 'proposalkit[fastapi]'"
    ) from exc

from proposalkit.composer import ProposalComposer
from proposalkit.errors import (
    AlreadyInProgress,
    DownstreamError,
    IneligibleInstruction,
    InvalidIndex,
    NoAuthoritySelected,
    ProposalKitError,
    UserInputError,
    ValidationFailed,
)
from proposalkit.types import Governance

__all__ = ["ComposerSessions", "create_composer_router"]


class TypeSelection(BaseModel):
    type: Optional[str] = None


class FormUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    vote_by_council: Optional[bool] = None


class ComposerSessions:
    """In-memory composer sessions keyed by id."""

    def __init__(self, factory: Callable[[], ProposalComposer]) -> None:
        self._factory = factory
        self._sessions: dict[str, ProposalComposer] = {}
        # One Governance object per pubkey and session, so re-sending the
        # same governance does not count as a change of authority.
        self._governances: dict[str, dict[str, Governance]] = {}

    def create(self) -> tuple[str, ProposalComposer]:
        sid = uuid.uuid4().hex[:12]
        self._sessions[sid] = self._factory()
        self._governances[sid] = {}
        return sid, self._sessions[sid]

    def get(self, sid: str) -> ProposalComposer:
        composer = self._sessions.get(sid)
        if composer is None:
            raise HTTPException(status_code=404, detail=f"Unknown session {sid}")
        return composer

    def intern_governance(self, sid: str, data: dict[str, Any]) -> Governance:
        """Return the session's object for this pubkey, updated to *data*."""
        governance = Governance.from_dict(data)
        known = self._governances[sid].get(governance.pubkey)
        if known is not None:
            for name in ("account_type", "config", "governed_account", "realm", "proposal_count"):
                setattr(known, name, getattr(governance, name))
            return known
        self._governances[sid][governance.pubkey] = governance
        return governance

    def close(self, sid: str) -> None:
        self._sessions.pop(sid, None)
        self._governances.pop(sid, None)


def session_state(sid: str, composer: ProposalComposer) -> dict[str, Any]:
    governance = composer.governance
    return {
        "id": sid,
        "form": composer.form.as_dict(),
        "form_errors": dict(composer.form_errors),
        "governance": governance.to_dict() if governance is not None else None,
        "is_loading": composer.is_loading,
        "slots": [
            {
                "index": i,
                "type": slot.type.id if slot.type is not None else None,
                "governed_account": (
                    slot.governed_account.pubkey if slot.governed_account is not None else None
                ),
                "result": asdict(slot.result) if slot.result is not None else None,
            }
            for i, slot in enumerate(composer.slots)
        ],
        "ineligible_slots": composer.ineligible_slots(),
    }


def _http_error(exc: ProposalKitError) -> HTTPException:
    if isinstance(exc, InvalidIndex):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationFailed):
        return HTTPException(status_code=422, detail={
            "message": str(exc),
            "errors": exc.errors,
            "invalid_slots": exc.invalid_slots,
        })
    if isinstance(exc, (NoAuthoritySelected, AlreadyInProgress, IneligibleInstruction)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, DownstreamError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, UserInputError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def create_composer_router(
    factory: Callable[[], ProposalComposer],
    *,
    prefix: str = "/proposals",
    sessions: ComposerSessions | None = None,
) -> APIRouter:
    """Build a router serving composer sessions made by *factory*."""
    sessions = sessions or ComposerSessions(factory)
    router = APIRouter(prefix=prefix, tags=["proposals"])

    @router.post("", status_code=201)
    def create_session() -> dict[str, Any]:
        sid, composer = sessions.create()
        return session_state(sid, composer)

    @router.get("/{sid}")
    def get_session(sid: str) -> dict[str, Any]:
        return session_state(sid, sessions.get(sid))

    @router.delete("/{sid}", status_code=204)
    def delete_session(sid: str) -> None:
        sessions.get(sid)
        sessions.close(sid)

    @router.patch("/{sid}/form")
    def update_form(sid: str, update: FormUpdate) -> dict[str, Any]:
        composer = sessions.get(sid)
        for name, value in update.model_dump(exclude_none=True).items():
            composer.set_form_field(name, value)
        return session_state(sid, composer)

    @router.post("/{sid}/slots", status_code=201)
    def add_slot(sid: str) -> dict[str, Any]:
        composer = sessions.get(sid)
        composer.add_instruction()
        return session_state(sid, composer)

    @router.delete("/{sid}/slots/{index}")
    def remove_slot(sid: str, index: int) -> dict[str, Any]:
        composer = sessions.get(sid)
        composer.remove_instruction(index)
        return session_state(sid, composer)

    @router.get("/{sid}/slots/{index}/allowed-types")
    def list_allowed_types(sid: str, index: int) -> list[dict[str, Any]]:
        composer = sessions.get(sid)
        return [
            {
                "id": t.id,
                "name": t.name,
                "available_after_program_governance": t.available_after_program_governance,
            }
            for t in composer.allowed_types(index)
        ]

    @router.put("/{sid}/slots/{index}/type")
    def set_type(sid: str, index: int, selection: TypeSelection) -> dict[str, Any]:
        composer = sessions.get(sid)
        try:
            composer.set_instruction_type(index, selection.type)
        except ProposalKitError as exc:
            raise _http_error(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return session_state(sid, composer)

    @router.put("/{sid}/slots/{index}/governance")
    def set_governance(
        sid: str,
        index: int,
        governance: Optional[dict[str, Any]] = Body(None),
    ) -> dict[str, Any]:
        composer = sessions.get(sid)
        try:
            value = sessions.intern_governance(sid, governance) if governance else None
            composer.set_governed_account(index, value)
        except ProposalKitError as exc:
            raise _http_error(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return session_state(sid, composer)

    @router.patch("/{sid}/slots/{index}/result")
    def report_result(
        sid: str,
        index: int,
        result: dict[str, Any] = Body(...),
    ) -> dict[str, Any]:
        composer = sessions.get(sid)
        try:
            composer.update_instruction(index, **result)
        except ProposalKitError as exc:
            raise _http_error(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return session_state(sid, composer)

    @router.post("/{sid}/submit")
    async def submit(sid: str, draft: bool = False) -> dict[str, Any]:
        composer = sessions.get(sid)
        try:
            address = await composer.submit(is_draft=draft)
        except ProposalKitError as exc:
            raise _http_error(exc) from exc
        return {
            "address": address,
            "url": composer.proposal_url(address),
            "is_draft": draft,
        }

    return router
