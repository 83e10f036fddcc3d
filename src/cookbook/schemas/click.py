# src/cookbook/schemas/click.py
"""Click-related Pydantic schemas."""

from pydantic import BaseModel


class ClickRecorded(BaseModel):
    """Counter value after a click was recorded."""

    message: str = "click recorded"
    recipe_id: str
    clicks: int
