from typing import Dict, List, Optional

from app.domains.testimonies.entities import FrameworkType
from app.domains.testimonies.schemas import FrameworkResponse, VisualStructure


FRAMEWORKS: List[FrameworkResponse] = [
    FrameworkResponse(
        id=FrameworkType.BEFORE_ENCOUNTER_AFTER,
        name="Before → Encounter → After",
        brief_description=(
            "Tell your story through three transformative phases: life before, "
            "the moment of encounter, and life after."
        ),
        full_description=(
            "This framework helps you structure your testimony around three key phases of your faith "
            "journey. It's perfect for stories with a clear turning point or moment of transformation. "
            "You'll describe your life before your encounter with faith, the moment or period of encounter "
            "itself, and how your life has changed since."
        ),
        use_cases=[
            "You have a clear moment of conversion or spiritual awakening",
            "You want to highlight the contrast between your old and new life",
            'Your story has a distinct "before and after" transformation',
            "You're sharing a testimony for the first time",
        ],
        sample_questions=[
            "What was your life like before your encounter with faith?",
            "What were your beliefs, values, and priorities?",
            "What led to your encounter or moment of change?",
            "How did you experience God or faith in that moment?",
            "What has changed in your life since that encounter?",
            "How has your perspective, relationships, or purpose shifted?",
        ],
        visual_structure=VisualStructure(type="progression", elements=["Before", "Encounter", "After"]),
        icon="🔄",
    ),
    FrameworkResponse(
        id=FrameworkType.LIFE_TIMELINE,
        name="Life Timeline",
        brief_description=(
            "Document key milestones and events throughout your faith journey in chronological order."
        ),
        full_description=(
            "The Life Timeline framework allows you to tell your story through significant moments and "
            "milestones. This approach is ideal if your faith journey has developed over time through "
            "multiple experiences, events, or seasons. You can add as many milestones as needed, each "
            "capturing a specific age, event, and its impact on your journey."
        ),
        use_cases=[
            "Your faith journey spans many years or decades",
            "You have multiple significant moments to share",
            "You want to show how your faith has evolved over time",
            "You prefer a chronological storytelling approach",
        ],
        sample_questions=[
            "What age or time period was this milestone?",
            "What specific event or experience happened?",
            "How did this moment impact your faith journey?",
            "What did you learn or how did you grow?",
            "How did this shape who you are today?",
        ],
        visual_structure=VisualStructure(
            type="timeline", elements=["Milestone 1", "Milestone 2", "Milestone 3", "..."]
        ),
        icon="📅",
    ),
    FrameworkResponse(
        id=FrameworkType.SEASONS_OF_GROWTH,
        name="Seasons of Growth",
        brief_description=(
            "Explore different seasons or periods of your life, each with its own challenges, "
            "growth, and lessons."
        ),
        full_description=(
            "The Seasons of Growth framework helps you reflect on distinct periods of your life, each with "
            "unique challenges and opportunities for spiritual growth. This approach is perfect if your "
            "journey has had multiple phases or if you want to explore how different life circumstances "
            "shaped your faith. Each season captures the challenges you faced, how you grew, and the "
            "lessons you learned."
        ),
        use_cases=[
            "Your faith journey has distinct phases or seasons",
            "You want to explore how different life circumstances shaped your faith",
            "You've experienced growth through various challenges",
            "You prefer thematic organization over chronological",
        ],
        sample_questions=[
            "What season or period of life was this?",
            "What challenges did you face during this season?",
            "How did you grow spiritually during this time?",
            "What lessons did you learn?",
            "How did this season prepare you for what came next?",
        ],
        visual_structure=VisualStructure(type="seasons", elements=["Season 1", "Season 2", "Season 3", "..."]),
        icon="🌱",
    ),
    FrameworkResponse(
        id=FrameworkType.FREE_FORM,
        name="Free-Form Narrative",
        brief_description="Write your testimony in your own words, without a structured framework.",
        full_description=(
            "The Free-Form Narrative gives you complete freedom to tell your story however feels most "
            "natural to you. This framework is perfect if you prefer to write organically, if your story "
            "doesn't fit neatly into other structures, or if you want maximum flexibility in how you "
            "express your journey. Simply write your testimony as it flows from your heart."
        ),
        use_cases=[
            "You prefer to write organically without structure",
            "Your story doesn't fit neatly into other frameworks",
            "You want maximum flexibility in expression",
            "You're comfortable with unstructured storytelling",
        ],
        sample_questions=[
            "What is your faith story?",
            "How has your relationship with God developed?",
            "What experiences have shaped your faith?",
            "What would you want others to know about your journey?",
        ],
        visual_structure=VisualStructure(type="narrative", elements=["Your Story"]),
        icon="✍️",
    ),
]

_BY_ID: Dict[FrameworkType, FrameworkResponse] = {framework.id: framework for framework in FRAMEWORKS}


def get_framework_config(framework_type: FrameworkType) -> Optional[FrameworkResponse]:
    return _BY_ID.get(framework_type)


def get_framework_name(framework_type: FrameworkType) -> str:
    framework = get_framework_config(framework_type)
    return framework.name if framework else framework_type.value
