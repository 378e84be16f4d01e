from enum import StrEnum


class EventStatus(StrEnum):
    DRAFT = 'DRAFT'
    ACTIVE = 'ACTIVE'
    CANCELLED = 'CANCELLED'


class EventCategory(StrEnum):
    TECHNOLOGY = 'Technology'
    BUSINESS = 'Business'
    ENTERTAINMENT = 'Entertainment'
    SPORTS = 'Sports'
    EDUCATION = 'Education'
    HEALTH = 'Health'
    FOOD = 'Food'
    MUSIC = 'Music'
    ART = 'Art'
    OTHER = 'Other'

    @classmethod
    def parse(cls, value: str) -> 'EventCategory':
        for category in cls:
            if category.value.lower() == value.strip().lower():
                return category
        return cls.OTHER
