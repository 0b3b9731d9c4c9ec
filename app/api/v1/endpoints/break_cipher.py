from fastapi import APIRouter

from app.core.exceptions import CiphertextTooLongError
from app.dependencies import CoordinatorDep, SettingsDep
from app.models.schemas import BreakCipherRequest, BreakCipherResponse, ErrorResponse
from app.services.explanation.generator import ResultFormatter

router = APIRouter()


@router.post(
    "",
    response_model=BreakCipherResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "No strategy produced a result"},
    },
    summary="Break a cipher",
    description=(
        "Identify whether the ciphertext is Caesar, Rail Fence or Vigenère "
        "encrypted and recover the most plausible plaintext."
    ),
)
async def break_cipher(
    request: BreakCipherRequest,
    settings: SettingsDep,
    coordinator: CoordinatorDep,
) -> BreakCipherResponse:
    """
    Run the cipher cascade on the ciphertext.

    The cascade:
    1. Caesar (all 26 shifts)
    2. Rail Fence (2 to max_rails rails)
    3. Vigenère (key-length estimation plus dictionary attack)

    Stops at the first candidate whose words are at least 90% valid;
    otherwise returns the best candidate with success=false.
    """
    if len(request.ciphertext) > settings.max_ciphertext_length:
        raise CiphertextTooLongError(
            len(request.ciphertext),
            settings.max_ciphertext_length,
        )

    outcome = await coordinator.resolve(request.ciphertext)

    return ResultFormatter().build_response(outcome)
