"""portfolio_assistant/records.py

Typed rows returned by the portfolio database.
"""

from __future__ import annotations

# Standard Library
from datetime import datetime

# Third-Party Libraries
from pydantic import BaseModel, Field


class KnowledgeRecord(BaseModel):
    """One curated fact injected into the assistant's system prompt."""

    model_config = {"frozen": True}

    id: int
    category: str
    topic: str
    content: str
    priority: int = 0
    created_at: datetime | None = None


class Service(BaseModel):
    id: int
    title: str
    description: str = ""
    icon_name: str = ""
    bg_icon: str = ""
    skills: list[str] = Field(default_factory=list)


class Technology(BaseModel):
    id: int
    name: str
    icon_name: str = ""
    category: str = ""
    level: int = 0
    color: str = ""
    experience: str = ""
    projects: int = 0
    description: str = ""


class Project(BaseModel):
    id: int
    title: str
    description: str = ""
    long_description: str = ""
    image_url: str = ""
    category: str = ""
    github_url: str = ""
    demo_url: str = ""
    color: str = ""
    year: int | None = None
    icon_name: str = ""
    tags: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    technologies: dict[str, list[str]] = Field(default_factory=dict)


class Experience(BaseModel):
    id: int
    title: str
    company: str = ""
    location: str = ""
    period: str = ""
    description: str = ""
    achievements: list[str] = Field(default_factory=list)


class Education(BaseModel):
    id: int
    degree: str
    institution: str = ""
    location: str = ""
    period: str = ""
    description: str = ""
    achievements: list[str] = Field(default_factory=list)


class ContactInfo(BaseModel):
    id: int
    title: str
    value: str = ""
    icon_name: str = ""
    link: str = ""
    description: str = ""


class SocialLink(BaseModel):
    id: int
    name: str
    icon_name: str = ""
    link: str = ""


class FAQ(BaseModel):
    id: int
    question: str
    answer: str = ""
    value: str = ""


class PersonalInfo(BaseModel):
    id: int
    full_name: str
    job_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    availability_status: bool = False
    availability_text: str = ""
    bio_short: str = ""
    bio_long: str = ""
    resume_url: str = ""


class ContactSubmission(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    subject: str = ""
    message: str = Field(..., min_length=1)


class ContactResult(BaseModel):
    success: bool
    message: str
