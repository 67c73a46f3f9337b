from pydantic import BaseModel, Field, RootModel, field_validator, ConfigDict
from typing import Annotated, Optional, List, Dict, Any, Literal, Union, Type
import uuid
from datetime import datetime

from app.domains.testimonies.entities import FrameworkType


# Содержимое по шаблонам
class BeforeEncounterAfterContent(BaseModel):
    """Жизнь до, встреча, жизнь после"""
    before: str = Field(..., min_length=1)
    encounter: str = Field(..., min_length=1)
    after: str = Field(..., min_length=1)


class LifeTimelineMilestone(BaseModel):
    age: str = ""
    event: str = ""
    impact: str = ""


class LifeTimelineContent(BaseModel):
    milestones: List[LifeTimelineMilestone]


class Season(BaseModel):
    season: str = ""
    challenges: str = ""
    growth: str = ""
    lessons: str = ""


class SeasonsOfGrowthContent(BaseModel):
    seasons: List[Season]


class FreeFormContent(BaseModel):
    narrative: str


CONTENT_MODELS: Dict[FrameworkType, Type[BaseModel]] = {
    FrameworkType.BEFORE_ENCOUNTER_AFTER: BeforeEncounterAfterContent,
    FrameworkType.LIFE_TIMELINE: LifeTimelineContent,
    FrameworkType.SEASONS_OF_GROWTH: SeasonsOfGrowthContent,
    FrameworkType.FREE_FORM: FreeFormContent,
}


class TestimonyCreateBase(BaseModel):
    """Общие поля при создании свидетельства"""
    title: str = Field(..., min_length=1, max_length=200)
    is_public: bool = False

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class BeforeEncounterAfterCreate(TestimonyCreateBase):
    framework_type: Literal["before_encounter_after"]
    content: BeforeEncounterAfterContent


class LifeTimelineCreate(TestimonyCreateBase):
    framework_type: Literal["life_timeline"]
    content: LifeTimelineContent


class SeasonsOfGrowthCreate(TestimonyCreateBase):
    framework_type: Literal["seasons_of_growth"]
    content: SeasonsOfGrowthContent


class FreeFormCreate(TestimonyCreateBase):
    framework_type: Literal["free_form"]
    content: FreeFormContent


TestimonyCreateVariant = Annotated[
    Union[BeforeEncounterAfterCreate, LifeTimelineCreate, SeasonsOfGrowthCreate, FreeFormCreate],
    Field(discriminator="framework_type")
]


class TestimonyCreate(RootModel[TestimonyCreateVariant]):
    """Схема для создания свидетельства: тип шаблона определяет форму content"""
    pass


class TestimonyUpdate(BaseModel):
    """Схема для обновления свидетельства"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[Dict[str, Any]] = None
    is_public: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v


class TestimonyPublicResponse(BaseModel):
    """Свидетельство без сведений о владельце"""
    id: uuid.UUID
    title: str
    framework_type: FrameworkType
    content: Dict[str, Any]
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TestimonyResponse(TestimonyPublicResponse):
    """Схема для ответа владельцу"""
    user_id: uuid.UUID
    share_token: Optional[str] = None
    is_claimed: bool = False
    claimed_at: Optional[datetime] = None


class SharedTestimonyResponse(BaseModel):
    """Ответ на открытие свидетельства по публичной ссылке"""
    testimony: TestimonyPublicResponse
    is_owner: bool
    is_anonymous: bool
    excerpt: str
    share_urls: Dict[str, str]


class GalleryPublishRequest(BaseModel):
    """Запрос на публикацию в галерее"""
    testimony_id: uuid.UUID
    display_name: Optional[str] = Field(None, max_length=100)


class GalleryEntryResponse(BaseModel):
    id: uuid.UUID
    testimony_id: uuid.UUID
    user_id: uuid.UUID
    display_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GalleryItemResponse(BaseModel):
    """Элемент публичной галереи"""
    id: uuid.UUID
    display_name: Optional[str] = None
    created_at: datetime
    testimony: Optional[TestimonyPublicResponse] = None
    excerpt: str = ""


class VisualStructure(BaseModel):
    type: str
    elements: List[str]


class FrameworkResponse(BaseModel):
    """Описание шаблона свидетельства"""
    id: FrameworkType
    name: str
    brief_description: str
    full_description: str
    use_cases: List[str]
    sample_questions: List[str]
    visual_structure: VisualStructure
    icon: str
