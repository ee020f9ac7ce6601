"""Read-only MCP server over the public project path."""
import logging

from textwrap import dedent
from typing import Annotated, Any, Dict

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from blockdocs.errors import NotFoundError
from blockdocs.payload import Payload
from blockdocs.render.document import export_filename, generate_html
from blockdocs.repository import DocsRepository


logger = logging.getLogger(__name__)

repository = DocsRepository()


# =====================================================
# MCP Setup
# =====================================================
mcp = FastMCP(name="blockdocs", instructions=dedent("""
    # blockdocs

    Public, read-only access to published documentation projects.

        - get_public_project    | A project with its ordered headers and navbar items
        - export_project_html   | The project rendered as one standalone HTML file
"""))


# =====================================================
# Tools
# =====================================================

async def get_public_project(
    project_id: Annotated[int, Field(description="ID of the project to read")],
) -> Dict[str, Any]:
    """Get a project with its headers (persisted order) and navbar items."""
    try:
        snapshot = await repository.get_public_project(project_id)
    except NotFoundError as e:
        return Payload.failure(e).model_dump()

    return Payload.create(snapshot, message="Project retrieved successfully").model_dump()


async def export_project_html(
    project_id: Annotated[int, Field(description="ID of the project to export")],
) -> Dict[str, Any]:
    """Render a project as a single self-contained HTML document."""
    try:
        snapshot = await repository.get_public_project(project_id)
    except NotFoundError as e:
        return Payload.failure(e).model_dump()

    html = generate_html(snapshot.project.name, snapshot.headers, snapshot.navbar_items)
    logger.info("exported project %s (%d bytes)", project_id, len(html))
    return Payload.create(
        {"filename": export_filename(snapshot.project.name), "html": html},
        message="Project exported successfully",
    ).model_dump()


mcp.tool(tags={"project", "read"}, annotations=ToolAnnotations(readOnlyHint=True, idempotentHint=True))(get_public_project)
mcp.tool(tags={"project", "export"}, annotations=ToolAnnotations(readOnlyHint=True, idempotentHint=True))(export_project_html)
