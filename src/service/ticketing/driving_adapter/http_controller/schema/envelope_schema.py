from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, PlainSerializer


T = TypeVar('T')

# Money stays Decimal in Python and is rendered as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'success': False,
                'error': 'InsufficientCapacity',
                'message': 'Not enough tickets available.',
            }
        },
    }

    success: bool = False
    error: str
    message: str


class MessageResponse(BaseModel):
    message: str
