"""
Application-wide constants for Nexus Match.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from typing import Any, Final, Optional


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "Nexus Match"
APP_DISPLAY_NAME: Final[str] = "L&D Nexus Trainer Matching Core"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Enum helpers
# =============================================================================


def normalize_enum_token(value: Any) -> Any:
    """Normalize caller-supplied enum strings ("In-Person" -> "in_person")."""
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_").replace(" ", "_")
    return value


class _TokenEnum(str, Enum):
    """String enum that accepts loosely formatted input values."""

    @classmethod
    def _missing_(cls, value: object) -> Optional["_TokenEnum"]:
        token = normalize_enum_token(value)
        aliases = getattr(cls, "_aliases", lambda: {})()
        token = aliases.get(token, token)
        for member in cls:
            if member.value == token:
                return member
        return None

    @property
    def display_name(self) -> str:
        """Human-readable form ("in_person" -> "In Person")."""
        overrides = getattr(type(self), "_display_names", lambda: {})()
        return overrides.get(self.value, self.value.replace("_", " ").title())


# =============================================================================
# Matching Enums
# =============================================================================


class Sector(_TokenEnum):
    """Industry sector a training requirement belongs to."""

    TECHNOLOGY = "technology"
    FINANCE = "finance"
    HEALTHCARE = "healthcare"
    OIL_GAS = "oil_gas"
    LEADERSHIP = "leadership"
    HOSPITALITY = "hospitality"
    RETAIL = "retail"
    EDUCATION = "education"
    GOVERNMENT = "government"
    REAL_ESTATE = "real_estate"
    LOGISTICS = "logistics"
    MANUFACTURING = "manufacturing"

    @staticmethod
    def _display_names() -> dict[str, str]:
        return {"oil_gas": "Oil & Gas"}


class TrainingLanguage(_TokenEnum):
    """Delivery language. BILINGUAL covers both English and Arabic."""

    ENGLISH = "english"
    ARABIC = "arabic"
    BILINGUAL = "bilingual"


class TrainingFormat(_TokenEnum):
    """Training delivery format."""

    ONLINE = "online"
    IN_PERSON = "in_person"
    HYBRID = "hybrid"


class ExperienceLevel(_TokenEnum):
    """Ordinal experience level of a trainer."""

    ENTRY = "entry"
    JUNIOR = "junior"
    INTERMEDIATE = "intermediate"
    SENIOR = "senior"
    EXPERT = "expert"

    @staticmethod
    def _aliases() -> dict[str, str]:
        return {"mid": "intermediate", "executive": "expert"}

    @property
    def ordinal(self) -> int:
        return EXPERIENCE_ORDER.index(self)


class Urgency(_TokenEnum):
    """How soon the training is needed."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def ordinal(self) -> int:
        return URGENCY_ORDER.index(self)


EXPERIENCE_ORDER: Final[tuple[ExperienceLevel, ...]] = (
    ExperienceLevel.ENTRY,
    ExperienceLevel.JUNIOR,
    ExperienceLevel.INTERMEDIATE,
    ExperienceLevel.SENIOR,
    ExperienceLevel.EXPERT,
)

URGENCY_ORDER: Final[tuple[Urgency, ...]] = (Urgency.LOW, Urgency.MEDIUM, Urgency.HIGH)


# =============================================================================
# Sector Catalog
# =============================================================================

SECTOR_KEYWORDS: Final[dict[Sector, dict[str, list[str]]]] = {
    Sector.TECHNOLOGY: {
        "keywords": ["it", "software", "digital transformation", "cybersecurity", "data analytics", "ai", "blockchain", "cloud computing"],
        "arabic_keywords": ["تكنولوجيا المعلومات", "البرمجيات", "التحول الرقمي", "الأمن السيبراني", "تحليل البيانات", "الذكاء الاصطناعي"],
    },
    Sector.FINANCE: {
        "keywords": ["banking", "finance", "accounting", "investment", "financial planning", "compliance", "risk management", "islamic finance"],
        "arabic_keywords": ["البنوك", "التمويل", "المحاسبة", "الاستثمار", "التخطيط المالي", "الامتثال", "إدارة المخاطر", "التمويل الإسلامي"],
    },
    Sector.HEALTHCARE: {
        "keywords": ["healthcare", "medical", "pharmaceutical", "patient care", "health management", "clinical training"],
        "arabic_keywords": ["الرعاية الصحية", "الطبية", "الصيدلة", "رعاية المرضى", "إدارة الصحة"],
    },
    Sector.OIL_GAS: {
        "keywords": ["oil", "gas", "energy", "petroleum", "drilling", "refining", "upstream", "downstream", "petrochemicals"],
        "arabic_keywords": ["النفط", "الغاز", "الطاقة", "البترول", "الحفر", "التكرير", "البتروكيماويات"],
    },
    Sector.LEADERSHIP: {
        "keywords": ["leadership", "management", "executive coaching", "team building", "change management", "strategic planning"],
        "arabic_keywords": ["القيادة", "الإدارة", "التدريب التنفيذي", "بناء الفريق", "إدارة التغيير", "التخطيط الاستراتيجي"],
    },
    Sector.HOSPITALITY: {
        "keywords": ["hospitality", "tourism", "customer service", "hotel management", "event management", "guest relations"],
        "arabic_keywords": ["الضيافة", "السياحة", "خدمة العملاء", "إدارة الفنادق", "إدارة الفعاليات"],
    },
    Sector.RETAIL: {
        "keywords": ["retail", "sales", "customer experience", "merchandising", "supply chain", "e-commerce"],
        "arabic_keywords": ["التجزئة", "المبيعات", "تجربة العملاء", "التسويق", "سلسلة التوريد", "التجارة الإلكترونية"],
    },
    Sector.EDUCATION: {
        "keywords": ["education", "teaching", "curriculum", "e-learning", "instructional design"],
        "arabic_keywords": ["التعليم", "التدريس", "المناهج", "التعلم الإلكتروني"],
    },
    Sector.GOVERNMENT: {
        "keywords": ["government", "public sector", "policy", "smart government", "public administration"],
        "arabic_keywords": ["الحكومة", "القطاع العام", "السياسات", "الإدارة العامة"],
    },
    Sector.REAL_ESTATE: {
        "keywords": ["real estate", "construction", "property management", "development"],
        "arabic_keywords": ["العقارات", "الإنشاءات", "إدارة الممتلكات", "التطوير"],
    },
    Sector.LOGISTICS: {
        "keywords": ["logistics", "shipping", "warehousing", "freight", "ports"],
        "arabic_keywords": ["الخدمات اللوجستية", "الشحن", "التخزين", "الموانئ"],
    },
    Sector.MANUFACTURING: {
        "keywords": ["manufacturing", "lean", "quality control", "operations", "six sigma"],
        "arabic_keywords": ["التصنيع", "مراقبة الجودة", "العمليات"],
    },
}


def list_sectors() -> list[dict[str, Any]]:
    """Sector catalog in display order, one dict per sector."""
    return [
        {
            "value": sector.value,
            "name": sector.display_name,
            "keywords": list(catalog["keywords"]),
            "arabic_keywords": list(catalog["arabic_keywords"]),
        }
        for sector, catalog in SECTOR_KEYWORDS.items()
    ]


# =============================================================================
# Scoring Constants
# =============================================================================

# Default weights for candidate scoring (sum to 1.0)
DEFAULT_SCORING_WEIGHTS: Final[dict[str, float]] = {
    "sector": 0.35,
    "language": 0.15,
    "format": 0.15,
    "experience": 0.15,
    "budget": 0.15,
    "rating": 0.05,
}

# Contributions at or above this normalized value can become reasons
REASON_THRESHOLD: Final[float] = 0.7
MAX_REASONS: Final[int] = 3

# Equal weighted contributions are explained in this order
REASON_PRIORITY: Final[tuple[str, ...]] = (
    "sector",
    "budget",
    "experience",
    "language",
    "format",
    "rating",
)

# Rate overrun (fraction of budget) at which budget fit reaches zero
BUDGET_OVERRUN_LIMIT: Final[float] = 0.5

# Ordinal levels below the requirement at which experience fit reaches zero
EXPERIENCE_GAP_LIMIT: Final[int] = 2

# Neutral value for unknown candidate attributes (rating, rate)
NEUTRAL_SCORE: Final[float] = 0.5

MAX_RATING: Final[float] = 5.0

SCORE_PRECISION: Final[int] = 4

# Result sizes
PREVIEW_K: Final[int] = 3
LISTING_K: Final[int] = 25

# Match strength thresholds
SCORE_THRESHOLDS: Final[dict[str, float]] = {
    "exceptional": 0.90,
    "excellent": 0.80,
    "strong": 0.70,
    "good": 0.60,
    "moderate": 0.40,
}

DUPLICATE_TITLE_SUFFIX: Final[str] = " (Copy)"


# =============================================================================
# Enums
# =============================================================================


class JobStatus(str, Enum):
    """Status of a job posting."""

    DRAFT = "draft"
    OPEN = "open"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"
    EXPIRED = "expired"
    DELETED = "deleted"


class ApplicationStatus(str, Enum):
    """Status of a professional's application to a job."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MatchStatus(str, Enum):
    """Outcome of a matching pass."""

    OK = "ok"
    INCOMPLETE = "incomplete"
    TIMED_OUT = "timed_out"
    JOB_NOT_LIVE = "job_not_live"
    CANCELLED = "cancelled"


class MatchStrength(Enum):
    """Categorical levels for match scores."""

    EXCEPTIONAL = "exceptional"
    EXCELLENT = "excellent"
    STRONG = "strong"
    GOOD = "good"
    MODERATE = "moderate"
    BASIC = "basic"

    @classmethod
    def from_score(cls, score: float) -> "MatchStrength":
        """Convert a numeric score to a level."""
        if score >= SCORE_THRESHOLDS["exceptional"]:
            return cls.EXCEPTIONAL
        elif score >= SCORE_THRESHOLDS["excellent"]:
            return cls.EXCELLENT
        elif score >= SCORE_THRESHOLDS["strong"]:
            return cls.STRONG
        elif score >= SCORE_THRESHOLDS["good"]:
            return cls.GOOD
        elif score >= SCORE_THRESHOLDS["moderate"]:
            return cls.MODERATE
        return cls.BASIC

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Match"


class AuditAction(str, Enum):
    """Types of actions that can be audited."""

    JOB_CREATED = "job_created"
    JOB_STATUS_CHANGED = "job_status_changed"
    JOB_DELETED = "job_deleted"
    JOB_DUPLICATED = "job_duplicated"
    MATCH_FEEDBACK = "match_feedback"
