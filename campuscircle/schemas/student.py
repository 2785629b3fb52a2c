"""
Pydantic schemas for the administrator student roster APIs.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field

from campuscircle.schemas.common import CamelModel


class StudentCreate(CamelModel):
    """
    A single roster record.

    Fields are optional at the schema level so that a batch containing a
    malformed record still reaches the service, which rejects it per index.
    """

    roll_number: Optional[str] = Field(None, max_length=50, description="Institution roll number, stored upper-case")
    dob: Optional[str] = Field(None, max_length=10, description="Date of birth (YYYY-MM-DD)")
    name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    batch: Optional[str] = Field(None, max_length=50, description="Cohort label (e.g., 2021)")
    profile_image: Optional[str] = Field(None, max_length=1000)


class StudentUpdate(CamelModel):
    """Partial update. Roll number is immutable."""

    dob: Optional[str] = Field(None, max_length=10)
    name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    batch: Optional[str] = Field(None, max_length=50)
    profile_image: Optional[str] = Field(None, max_length=1000)


class StudentResponse(CamelModel):
    id: UUID
    roll_number: str
    dob: str
    name: str
    department: str
    batch: str
    profile_image: str = ""
    has_logged_in: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class StudentListResponse(CamelModel):
    students: List[StudentResponse]
    current_page: int
    total_pages: int
    total_students: int


class BulkStudentCreate(CamelModel):
    """Entries are validated one by one in the service and rejected per index."""

    students: List[Any] = Field(..., min_length=1)


class BulkStudentCsv(CamelModel):
    """Line-oriented roster: rollNumber,dob,name,department,batch[,profileImage]"""

    data: str = Field(..., min_length=1)


class BulkUploadError(CamelModel):
    index: int
    data: Dict[str, Any]
    error: str


class BulkUploadResults(CamelModel):
    success: List[StudentResponse]
    errors: List[BulkUploadError]


class BulkUploadResponse(CamelModel):
    message: str
    success_count: int
    error_count: int
    results: BulkUploadResults
