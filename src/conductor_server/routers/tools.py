"""Tool invocation endpoints.

This module exposes the tool registry over HTTP: listing the enabled tools,
calling a tool and receiving the complete response, or calling a
model-backed tool and receiving its reply via SSE as it is generated.
"""

import logging
from contextlib import aclosing
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from conductor_server.dependencies import get_tool_registry
from conductor_server.models.events import ContentDeltaEvent, DoneEvent, ErrorEvent
from conductor_server.models.tools import ToolListResponse, ToolResponse
from conductor_server.ollama import OllamaBackendError
from conductor_server.tools import BaseTool, ToolRegistry, UnknownToolError
from conductor_server.tools.base import format_validation_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


def _lookup(registry: ToolRegistry, tool_name: str) -> BaseTool:
    try:
        return registry.get(tool_name)
    except UnknownToolError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "tool_not_found",
                    "message": str(e),
                    "details": {"tool_name": tool_name},
                }
            },
        )


@router.get("", response_model=ToolListResponse)
async def list_tools(
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolListResponse:
    """List the enabled tools with their input schemas."""
    return ToolListResponse(tools=registry.list_tools())


@router.post("/{tool_name}", response_model=ToolResponse)
async def call_tool(
    tool_name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolResponse:
    """Call a tool and return its complete response.

    Tool failures (invalid arguments, backend errors) are reported inside the
    response envelope with isError set, as on the stdio transport.

    Raises:
        HTTPException: 404 if no enabled tool has this name
    """
    tool = _lookup(registry, tool_name)
    return await tool.run(arguments)


@router.post("/{tool_name}/stream")
async def call_tool_streaming(
    tool_name: str,
    request: Request,
    arguments: dict[str, Any] | None = Body(default=None),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> EventSourceResponse:
    """Call a model-backed tool and stream its reply via Server-Sent Events.

    Emits content_delta events while the model generates, then a done event
    carrying the conversation id and the full tool response (trailer
    included). If the backend fails an error event is emitted instead and
    nothing is recorded in the conversation.

    Raises:
        HTTPException: 404 if no enabled tool has this name, 400 if the tool
            is not model-backed or the arguments are invalid
    """
    tool = _lookup(registry, tool_name)
    conversational = registry.get_conversational(tool_name)
    if conversational is None:
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "streaming_not_supported",
                    "message": f"Tool {tool_name} does not stream model output",
                    "details": {"tool_name": tool_name},
                }
            },
        )

    try:
        params = tool.input_model.model_validate(arguments or {})
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "invalid_arguments",
                    "message": f"Invalid arguments for tool {tool_name}: "
                    f"{format_validation_error(e)}",
                    "details": {"tool_name": tool_name},
                }
            },
        )

    call = conversational.prepare(params)
    ollama_client = conversational.ollama_client
    logger.info(
        f"Streaming tool {tool_name} in conversation {call.conversation_id}"
    )

    async def event_generator():
        """Generate SSE events from the Ollama streaming response."""
        content_parts = []

        stream = ollama_client.chat_stream(
            model=call.model,
            messages=call.ollama_messages(),
            options=call.options,
        )
        try:
            async with aclosing(stream):
                async for chunk in stream:
                    # Check if client disconnected
                    if await request.is_disconnected():
                        logger.warning(
                            f"Client disconnected during streaming of tool {tool_name}"
                        )
                        if call.conversation.is_new:
                            conversational.store.delete(call.conversation_id)
                        return

                    content = chunk["message"].get("content")
                    if content:
                        content_parts.append(content)
                        yield {
                            "event": "content_delta",
                            "data": ContentDeltaEvent(content=content).model_dump_json(),
                        }

        except OllamaBackendError as e:
            logger.error(f"Error during streaming of tool {tool_name}: {e}")
            error_event = ErrorEvent(
                code="ollama_error",
                message=f"Error executing tool {tool_name}: {e}",
                details={"conversation_id": call.conversation_id},
            )
            yield {
                "event": "error",
                "data": error_event.model_dump_json(),
            }
            return

        text = conversational.finalize(params, call, "".join(content_parts))
        done_event = DoneEvent(conversation_id=call.conversation_id, text=text)
        yield {
            "event": "done",
            "data": done_event.model_dump_json(),
        }

    return EventSourceResponse(event_generator())
