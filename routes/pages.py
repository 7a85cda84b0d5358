from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

import content
from state.shell import ROUTES

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["pages"])


def serve_app_shell():
    """Every client-visible route serves the same single page"""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


for route_path in ROUTES:
    router.add_api_route(route_path, serve_app_shell, methods=["GET"], include_in_schema=False)


@router.get("/content/members")
def get_members():
    return content.members_page()


@router.get("/content/education")
def get_education():
    return content.education_page()
