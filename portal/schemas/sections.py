"""
Schemas for read-only application detail sections.
"""
from typing import List, Optional, Union
from pydantic import BaseModel, Field


class SectionField(BaseModel):
    label: str
    value: Union[int, str]
    required: Optional[bool] = None
    answered: Optional[bool] = None


class Section(BaseModel):
    key: str
    title: str
    fields: List[SectionField] = Field(default_factory=list)


class ApplicationSections(BaseModel):
    application_id: str
    sections: List[Section]
