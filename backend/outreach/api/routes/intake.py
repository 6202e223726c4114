# outreach/api/routes/intake.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from outreach.api.errors import to_http
from outreach.core.errors import OutreachError
from outreach.db.session import get_db
from outreach.schemas.clients import ClientIntakeCreate, SDRMIntakeCreate
from outreach.schemas.interactions import IntakeResponse
from outreach.services.intake import IntakeResult, intake_client

router = APIRouter(prefix="/intake", tags=["intake"])


def _response(res: IntakeResult) -> dict:
    return {
        "created": True,
        "client": res.client,
        "interaction": res.interaction,
        "location_warning": res.location_warning,
    }


# POST /api/intake (generic form)
@router.post("", response_model=IntakeResponse, status_code=status.HTTP_201_CREATED)
def generic_intake(payload: ClientIntakeCreate, db: Session = Depends(get_db)):
    try:
        return _response(intake_client(db, payload, variant="generic"))
    except OutreachError as exc:
        raise to_http(exc) from exc


# POST /api/intake/sdrm
@router.post("/sdrm", response_model=IntakeResponse, status_code=status.HTTP_201_CREATED)
def sdrm_intake(payload: SDRMIntakeCreate, db: Session = Depends(get_db)):
    try:
        return _response(intake_client(db, payload, variant="sdrm"))
    except OutreachError as exc:
        raise to_http(exc) from exc
