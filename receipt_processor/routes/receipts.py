from fastapi import APIRouter, Depends, HTTPException
from ..schemas import ReceiptIn, IdResponse, PointsResponse, EvidenceResponse, ErrorResponse
from ..services.receipts import ReceiptService, get_receipt_service

router = APIRouter(prefix="/receipts", tags=["receipts"])

NOT_FOUND = "No receipt found for that ID."

@router.post("/process", response_model=IdResponse, responses={400: {"model": ErrorResponse}})
def process_receipt(payload: ReceiptIn, service: ReceiptService = Depends(get_receipt_service)):
    return IdResponse(id=service.ingest(payload))

@router.get("/{receipt_id}/points", response_model=PointsResponse, responses={404: {"model": ErrorResponse}})
@router.get("/{receipt_id}/points/", response_model=PointsResponse, include_in_schema=False)
def receipt_points(receipt_id: str, service: ReceiptService = Depends(get_receipt_service)):
    points = service.get_points(receipt_id)
    if points is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return PointsResponse(points=str(points))

@router.get("/{receipt_id}/evidence", response_model=EvidenceResponse, responses={404: {"model": ErrorResponse}})
def receipt_evidence(receipt_id: str, service: ReceiptService = Depends(get_receipt_service)):
    """Per-rule points and the rules that hit an unparsable field."""
    receipt = service.get_receipt(receipt_id)
    if receipt is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return receipt.evidence()
