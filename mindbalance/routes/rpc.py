# mindbalance/routes/rpc.py
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..server import ToolServer, get_tool_server

router = APIRouter(tags=["rpc"])


@router.post("/rpc")
async def rpc(request: Request, server: ToolServer = Depends(get_tool_server)):
    """
    JSON-RPC 2.0 endpoint. Accepts a single request or a batch; protocol
    errors are returned in the JSON-RPC envelope with HTTP 200.
    """
    body = await request.body()
    result = server.handle_text(body)
    if result is None:
        # notifications only
        return Response(status_code=204)
    return JSONResponse(result)
