from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response
from app.api.endpoints import pages, payment

api_router = APIRouter()
api_router.include_router(payment.router, tags=["payment"])
api_router.include_router(pages.router, tags=["pages"])

@api_router.get("/health", response_class=PlainTextResponse, tags=["health"])
async def health_check():
    return PlainTextResponse("OK")

@api_router.options("/{path:path}", include_in_schema=False)
async def options_handler(path: str):
    # Preflight requests are answered by CORSMiddleware before reaching here
    return Response(status_code=200)
