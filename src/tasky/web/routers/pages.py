from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from tasky.web.deps import PageSessionDep

router = APIRouter(tags=["pages"])

ENTRY_PAGE = "<!doctype html><html><head><title>tasky</title></head><body><h1>tasky</h1></body></html>"
TODO_PAGE = "<!doctype html><html><head><title>tasky - todo</title></head><body><div id=\"todo\"></div></body></html>"


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> str:
    return ENTRY_PAGE


@router.get("/todo", response_class=HTMLResponse, include_in_schema=False)
async def todo(_: PageSessionDep) -> str:
    return TODO_PAGE
