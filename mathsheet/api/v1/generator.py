"""
Generator endpoint - server side of ``RemoteGenerator``.

Keeps the OpenAI key on the server. Errors are answered as
``{"message": ...}`` so the remote adapter can surface them verbatim.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaValidationError

from mathsheet.api.deps import ServiceGenerator
from mathsheet.errors import MathSheetError
from mathsheet.logging_config import get_logger
from mathsheet.schemas.generator import GeneratorMessage, GeneratorRequest, ReplacePayload
from mathsheet.worksheet.models import GenerationSpec, Problem

router = APIRouter()
logger = get_logger(__name__)

INVALID_ACTION = "Invalid action specified."
INVALID_PAYLOAD = "Invalid payload for action."


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post(
    "/generator",
    responses={
        400: {"model": GeneratorMessage},
        500: {"model": GeneratorMessage},
        502: {"model": GeneratorMessage},
    },
)
async def run_generator(body: GeneratorRequest, generator: ServiceGenerator):
    """Dispatch ``generate`` or ``replace`` to the configured generator."""
    try:
        if body.action == "generate":
            spec = GenerationSpec.model_validate(body.payload)
            problems = await generator.generate_set(spec)
            return [p.to_payload() for p in problems]

        if body.action == "replace":
            payload = ReplacePayload.model_validate(body.payload)
            problem = await generator.replace_one(
                Problem.from_draft(payload.problem),
                payload.new_difficulty,
            )
            return problem.to_payload()
    except SchemaValidationError as exc:
        logger.warning("Rejected generator payload: %s", exc.errors(include_url=False))
        return _message(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)
    except MathSheetError as exc:
        return _message(exc.status_code, exc.message)

    return _message(status.HTTP_400_BAD_REQUEST, INVALID_ACTION)
