import re
import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional
import httpx
from pydantic import BaseModel, Field, ValidationError

from course_storage import CourseStorage
from exceptions import GenerationInProgress
from file_upload import UploadedFile
from models import Course

logger = logging.getLogger(__name__)

# Produces {"lessons": [...], "quizzes": [...]} for a request; lives outside this app
CourseGenerator = Callable[["CourseRequest", Optional[UploadedFile]], Awaitable[Dict[str, Any]]]


class CourseRequest(BaseModel):
    title: str = Field(min_length=2)
    description: Optional[str] = None
    input_type: Literal["text", "document"] = "text"
    topic: Optional[str] = None
    content_structure: Literal["modular", "flexible", "difficulty", "practice", "paths"] = "modular"
    output_format: List[str] = Field(default_factory=lambda: ["text"], min_length=1)
    features: List[str] = Field(default_factory=list)


class CreationResult(BaseModel):
    success: bool
    course_id: Optional[str] = None
    error: Optional[str] = None


def make_course_id(title: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    slug = re.sub(r'[^a-z0-9]+', '_', title.lower()).strip('_') or 'course'
    return f"{slug}_{now.strftime('%Y%m%d_%H%M%S')}"


def build_course(request: CourseRequest, content: Dict[str, Any], now: Optional[datetime] = None) -> Course:
    """Turn generated content into a course record"""
    now = now or datetime.now()
    quizzes = content.get('quizzes', []) if 'quizzes' in request.features else []
    return Course.model_validate({
        'id': make_course_id(request.title, now),
        'title': request.title,
        'description': request.description or '',
        'topic': request.topic,
        'structure': request.content_structure,
        'output_format': request.output_format,
        'features': request.features,
        'lessons': content.get('lessons', []),
        'quizzes': quizzes,
        'created_at': now.date().isoformat(),
        'last_accessed': now.isoformat(),
    })


class CourseCreator:
    """Sends one course request at a time to the generator and stores the result"""

    def __init__(self, storage: CourseStorage, generator: CourseGenerator):
        self.storage = storage
        self.generator = generator
        self.is_generating = False

    async def create_course(self, request: CourseRequest,
                            upload: Optional[UploadedFile] = None) -> CreationResult:
        if self.is_generating:
            raise GenerationInProgress("A course is already being generated")

        self.is_generating = True
        try:
            logger.info(f"Generating course: {request.title}")
            content = await self.generator(request, upload)
            course = build_course(request, content)
            course_id = self.storage.save_course(course)
            return CreationResult(success=True, course_id=course_id)

        except ValidationError as e:
            logger.error(f"Generated content is not a valid course: {str(e)}")
            return CreationResult(success=False, error="The generated course content was invalid.")
        except Exception as e:
            logger.error(f"Error generating course: {str(e)}", exc_info=True)
            return CreationResult(success=False, error=str(e) or "Course generation failed.")
        finally:
            self.is_generating = False


def _read_document(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


class HttpCourseGenerator:
    """Posts a course request to the external generation endpoint.

    The endpoint answers {"success": true, "content": {...}} or
    {"success": false, "error": "..."}. One request is made, never retried.
    """

    def __init__(self, url: str, timeout: float = 120, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def __call__(self, request: CourseRequest, upload: Optional[UploadedFile] = None) -> Dict[str, Any]:
        data = {'data': request.model_dump_json()}
        files = None
        if upload is not None and upload.path:
            document = await asyncio.to_thread(_read_document, upload.path)
            files = {'file': (upload.name, document, upload.content_type or 'application/octet-stream')}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.url, data=data, files=files)

        response.raise_for_status()
        result = response.json()
        if not result.get('success'):
            raise RuntimeError(result.get('error') or "Course generation failed.")
        return result.get('content') or {}
