"""XID generate, decode and validate routes."""

from fastapi import APIRouter, HTTPException, Query

from identifier import XID, is_valid
from internal.logging import get_logger
from utils.timestamp import format_seconds, format_timestamp

router = APIRouter(prefix="/api/v1/xids", tags=["xids"])

# These will be set by app.py
_generator = None
_max_batch = 1000


def init(generator, max_batch):
    """Initialize with the generator and the batch limit."""
    global _generator, _max_batch
    _generator = generator
    _max_batch = max_batch


@router.post("")
async def generate(count: int = Query(1, ge=1)):
    """Generate `count` XIDs."""
    if count > _max_batch:
        raise HTTPException(status_code=422, detail=f"count must be <= {_max_batch}")
    ids = [str(_generator.generate()) for _ in range(count)]
    get_logger().debug("Generated xids", count=count)
    return {"timestamp": format_timestamp(), "xids": ids}


@router.get("/{value}")
async def decode(value: str):
    """Decode an XID into its fields. Malformed input is handled by the app."""
    xid = XID.from_string(value)
    fields = xid.to_dict()
    fields["timestamp"] = format_seconds(xid.timestamp)
    return fields


@router.get("/{value}/validity")
async def validity(value: str):
    return {"id": value, "valid": is_valid(value)}
