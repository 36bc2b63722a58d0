"""Recursive report classes declared with quoted element types."""

from dataclasses import dataclass
from typing import Annotated, List, Optional

from pydantic import BaseModel

from keyreport import KeyType, ReportKey, report_key


@dataclass
class Chapter:
    title: Optional[str] = report_key("chapter_title")
    sections: List["Section"] = report_key("sections", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class Section:
    heading: Optional[str] = report_key("section_heading")
    chapters: Optional[List["Chapter"]] = report_key("subchapters", key_type=KeyType.COMPLEX)


@dataclass
class Book:
    chapters: List[Chapter] = report_key("chapters", key_type=KeyType.COMPLEX, default_factory=list)


class Folder(BaseModel):
    name: Annotated[Optional[str], ReportKey("folder_name")] = None
    children: Annotated[List["Folder"], ReportKey("folders", key_type=KeyType.COMPLEX)] = []


@dataclass
class Dangling:
    items: List["Missing"] = report_key("dangling", key_type=KeyType.COMPLEX, default_factory=list)  # noqa: F821
