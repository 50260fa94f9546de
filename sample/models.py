"""Data models of the sample server"""

from typing import Optional

from pydantic import BaseModel, Field


class Person(BaseModel):
    """A person working for a company"""
    id: Optional[str] = Field(default=None, description="Identifier; generated when empty")
    first_name: str
    last_name: str
    company: str = ""


class Company(BaseModel):
    id: Optional[str] = None
    name: str
